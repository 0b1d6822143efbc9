"""
负载均衡设置（LoadBalancerSettings）

LoadBalancerSettings 和 ConsistentHashLB 在 wire 上都是 oneof 形式的对象，
由出现的判别键决定变体：

    loadBalancer:
      simple: LEAST_CONN

    loadBalancer:
      consistentHash:
        httpCookie:
          name: user
          ttl: 0s
"""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Dict, List, Optional, Union

from istio_crd_schema.codec import (
    BOOLEAN, DURATION, STRING, UINT32, UINT64,
    EnumNode, MapNode, RecordNode, SequenceNode, UnionNode, Variant,
    optional, required,
)


class SimpleLB(Enum):
    """无需调优的标准负载均衡算法"""
    ROUND_ROBIN = "ROUND_ROBIN"  # 轮询（默认）
    LEAST_CONN = "LEAST_CONN"  # 最少请求
    RANDOM = "RANDOM"  # 随机
    PASSTHROUGH = "PASSTHROUGH"  # 直接转发到调用方请求的原始IP


@dataclass
class HTTPCookie:
    """作为一致性哈希键的 HTTP cookie，不存在时会被生成"""
    name: str
    ttl: timedelta
    path: Optional[str] = None


# 一致性哈希的四个变体，minimumRingSize 是每个变体都有的共享字段

@dataclass
class HttpHeaderNameHash:
    http_header_name: str
    minimum_ring_size: Optional[int] = None


@dataclass
class HttpCookieHash:
    http_cookie: HTTPCookie
    minimum_ring_size: Optional[int] = None


@dataclass
class UseSourceIpHash:
    use_source_ip: bool
    minimum_ring_size: Optional[int] = None


@dataclass
class HttpQueryParameterNameHash:
    http_query_parameter_name: str
    minimum_ring_size: Optional[int] = None


ConsistentHashLB = Union[
    HttpHeaderNameHash, HttpCookieHash, UseSourceIpHash, HttpQueryParameterNameHash
]


@dataclass
class Distribute:
    """从 from 区域发出的流量如何分配到各个 to 区域"""
    from_: Optional[str] = None  # region/zone/sub_zone，支持末尾通配符
    to: Optional[Dict[str, int]] = None  # 上游区域 -> 权重，权重之和应为100


@dataclass
class Failover:
    """跨 region 的故障转移策略"""
    from_: Optional[str] = None
    to: Optional[str] = None


@dataclass
class LocalityLoadBalancerSetting:
    """
    基于地域的负载均衡设置

    distribute / failover / failoverPriority 只能设置其中之一
    """
    distribute: Optional[List[Distribute]] = None
    failover: Optional[List[Failover]] = None
    failover_priority: Optional[List[str]] = None
    enabled: Optional[bool] = None


@dataclass
class SimpleLoadBalancer:
    simple: SimpleLB
    locality_lb_setting: Optional[LocalityLoadBalancerSetting] = None


@dataclass
class ConsistentHashLoadBalancer:
    consistent_hash: ConsistentHashLB
    locality_lb_setting: Optional[LocalityLoadBalancerSetting] = None


LoadBalancerSettings = Union[SimpleLoadBalancer, ConsistentHashLoadBalancer]


# ---------------------------------------------------------------------------
# 模式定义
# ---------------------------------------------------------------------------

SIMPLE_LB = EnumNode(SimpleLB)

HTTP_COOKIE = RecordNode(HTTPCookie, [
    required('name', 'name', STRING),
    optional('path', 'path', STRING),
    required('ttl', 'ttl', DURATION),
])

CONSISTENT_HASH_LB = UnionNode("ConsistentHashLB", [
    Variant("HttpHeaderName", "httpHeaderName", RecordNode(HttpHeaderNameHash, [
        required('http_header_name', 'httpHeaderName', STRING),
        optional('minimum_ring_size', 'minimumRingSize', UINT64),
    ])),
    Variant("HttpCookie", "httpCookie", RecordNode(HttpCookieHash, [
        required('http_cookie', 'httpCookie', HTTP_COOKIE),
        optional('minimum_ring_size', 'minimumRingSize', UINT64),
    ])),
    Variant("UseSourceIp", "useSourceIp", RecordNode(UseSourceIpHash, [
        required('use_source_ip', 'useSourceIp', BOOLEAN),
        optional('minimum_ring_size', 'minimumRingSize', UINT64),
    ])),
    Variant("HttpQueryParameterName", "httpQueryParameterName", RecordNode(HttpQueryParameterNameHash, [
        required('http_query_parameter_name', 'httpQueryParameterName', STRING),
        optional('minimum_ring_size', 'minimumRingSize', UINT64),
    ])),
])

DISTRIBUTE = RecordNode(Distribute, [
    optional('from_', 'from', STRING),
    optional('to', 'to', MapNode(UINT32, name="Distribute.to")),
])

FAILOVER = RecordNode(Failover, [
    optional('from_', 'from', STRING),
    optional('to', 'to', STRING),
])

LOCALITY_LB_SETTING = RecordNode(LocalityLoadBalancerSetting, [
    optional('distribute', 'distribute', SequenceNode(DISTRIBUTE)),
    optional('failover', 'failover', SequenceNode(FAILOVER)),
    optional('failover_priority', 'failoverPriority', SequenceNode(STRING)),
    optional('enabled', 'enabled', BOOLEAN),
])

# localityLbSetting 属于每个变体自己的字段集合，不参与判别
LOAD_BALANCER_SETTINGS = UnionNode("LoadBalancerSettings", [
    Variant("Simple", "simple", RecordNode(SimpleLoadBalancer, [
        required('simple', 'simple', SIMPLE_LB),
        optional('locality_lb_setting', 'localityLbSetting', LOCALITY_LB_SETTING),
    ])),
    Variant("ConsistentHash", "consistentHash", RecordNode(ConsistentHashLoadBalancer, [
        required('consistent_hash', 'consistentHash', CONSISTENT_HASH_LB),
        optional('locality_lb_setting', 'localityLbSetting', LOCALITY_LB_SETTING),
    ])),
])
