"""
DestinationRule 数据模型

DestinationRule 定义路由完成之后作用于目标服务流量的策略：负载均衡、
连接池大小以及异常检测。例如：

    apiVersion: networking.istio.io/v1beta1
    kind: DestinationRule
    metadata:
      name: bookinfo-ratings
    spec:
      host: ratings.prod.svc.cluster.local
      trafficPolicy:
        loadBalancer:
          simple: LEAST_CONN
      subsets:
      - name: testversion
        labels:
          version: v3
        trafficPolicy:
          loadBalancer:
            simple: ROUND_ROBIN
"""
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Dict, List, Optional

from kubernetes.client import V1ObjectMeta

from istio_crd_schema.codec import (
    BOOLEAN, DURATION, INT32, STRING, UINT32,
    EnumNode, MapNode, RecordNode, SequenceNode, optional, required,
)
from istio_crd_schema.models.common import PORT_SELECTOR, PortSelector
from istio_crd_schema.models.connection_pool import (
    CONNECTION_POOL_SETTINGS, ConnectionPoolSettings
)
from istio_crd_schema.models.load_balancer import (
    LOAD_BALANCER_SETTINGS, LoadBalancerSettings
)
from istio_crd_schema.models.meta import OBJECT_META


@dataclass
class OutlierDetection:
    """
    异常检测（熔断）

    跟踪上游每个主机的状态，连续出错的主机会在一段时间内被逐出负载均衡池。
    """
    split_external_local_origin_errors: Optional[bool] = None
    consecutive_local_origin_failures: Optional[int] = None
    consecutive_gateway_errors: Optional[int] = None
    consecutive_5xx_errors: Optional[int] = None
    interval: Optional[timedelta] = None  # 逐出扫描间隔
    base_ejection_time: Optional[timedelta] = None  # 最短逐出时长
    max_ejection_percent: Optional[int] = None
    min_health_percent: Optional[int] = None


class ClientTLSMode(Enum):
    """到上游的 TLS 连接模式"""
    DISABLE = "DISABLE"
    SIMPLE = "SIMPLE"
    MUTUAL = "MUTUAL"
    ISTIO_MUTUAL = "ISTIO_MUTUAL"


@dataclass
class ClientTLSSettings:
    """上游连接的 SSL/TLS 设置，HTTP 和 TCP 上游通用"""
    mode: ClientTLSMode
    client_certificate: Optional[str] = None  # mode 为 MUTUAL 时必填
    private_key: Optional[str] = None  # mode 为 MUTUAL 时必填
    ca_certificates: Optional[str] = None
    credential_name: Optional[str] = None
    subject_alt_names: Optional[List[str]] = None
    sni: Optional[str] = None
    insecure_skip_verify: Optional[bool] = None


@dataclass
class PortTrafficPolicy:
    """只作用于服务某个端口的流量策略"""
    port: Optional[PortSelector] = None
    load_balancer: Optional[LoadBalancerSettings] = None
    connection_pool: Optional[ConnectionPoolSettings] = None
    outlier_detection: Optional[OutlierDetection] = None
    tls: Optional[ClientTLSSettings] = None


@dataclass
class TrafficPolicy:
    """
    作用于某个目标所有端口的流量策略

    端口级设置会整体覆盖目标级设置，不会继承
    """
    load_balancer: Optional[LoadBalancerSettings] = None
    connection_pool: Optional[ConnectionPoolSettings] = None
    outlier_detection: Optional[OutlierDetection] = None
    tls: Optional[ClientTLSSettings] = None
    port_level_settings: Optional[List[PortTrafficPolicy]] = None


@dataclass
class Subset:
    """服务端点的子集，通常对应服务的一个版本"""
    name: str
    labels: Optional[Dict[str, str]] = None
    traffic_policy: Optional[TrafficPolicy] = None


@dataclass
class DestinationRuleSpec:
    host: str  # 服务注册表中的服务名，建议使用 FQDN
    traffic_policy: Optional[TrafficPolicy] = None
    subsets: Optional[List[Subset]] = None
    export_to: Optional[List[str]] = None  # "." 表示当前命名空间，"*" 表示全部


@dataclass
class DestinationRule:
    metadata: V1ObjectMeta = field(default_factory=V1ObjectMeta)
    spec: Optional[DestinationRuleSpec] = None


# ---------------------------------------------------------------------------
# 模式定义
# ---------------------------------------------------------------------------

OUTLIER_DETECTION = RecordNode(OutlierDetection, [
    optional('split_external_local_origin_errors', 'splitExternalLocalOriginErrors', BOOLEAN),
    optional('consecutive_local_origin_failures', 'consecutiveLocalOriginFailures', UINT32),
    optional('consecutive_gateway_errors', 'consecutiveGatewayErrors', UINT32),
    optional('consecutive_5xx_errors', 'consecutive5xxErrors', UINT32),
    optional('interval', 'interval', DURATION),
    optional('base_ejection_time', 'baseEjectionTime', DURATION),
    optional('max_ejection_percent', 'maxEjectionPercent', INT32),
    optional('min_health_percent', 'minHealthPercent', INT32),
])

CLIENT_TLS_MODE = EnumNode(ClientTLSMode, name="TLSmode")

CLIENT_TLS_SETTINGS = RecordNode(ClientTLSSettings, [
    required('mode', 'mode', CLIENT_TLS_MODE),
    optional('client_certificate', 'clientCertificate', STRING),
    optional('private_key', 'privateKey', STRING),
    optional('ca_certificates', 'caCertificates', STRING),
    optional('credential_name', 'credentialName', STRING),
    optional('subject_alt_names', 'subjectAltNames', SequenceNode(STRING)),
    optional('sni', 'sni', STRING),
    optional('insecure_skip_verify', 'insecureSkipVerify', BOOLEAN),
])

PORT_TRAFFIC_POLICY = RecordNode(PortTrafficPolicy, [
    optional('port', 'port', PORT_SELECTOR),
    optional('load_balancer', 'loadBalancer', LOAD_BALANCER_SETTINGS),
    optional('connection_pool', 'connectionPool', CONNECTION_POOL_SETTINGS),
    optional('outlier_detection', 'outlierDetection', OUTLIER_DETECTION),
    optional('tls', 'tls', CLIENT_TLS_SETTINGS),
])

TRAFFIC_POLICY = RecordNode(TrafficPolicy, [
    optional('load_balancer', 'loadBalancer', LOAD_BALANCER_SETTINGS),
    optional('connection_pool', 'connectionPool', CONNECTION_POOL_SETTINGS),
    optional('outlier_detection', 'outlierDetection', OUTLIER_DETECTION),
    optional('tls', 'tls', CLIENT_TLS_SETTINGS),
    optional('port_level_settings', 'portLevelSettings', SequenceNode(PORT_TRAFFIC_POLICY)),
])

SUBSET = RecordNode(Subset, [
    required('name', 'name', STRING),
    optional('labels', 'labels', MapNode(STRING, name="Subset.labels")),
    optional('traffic_policy', 'trafficPolicy', TRAFFIC_POLICY),
])

DESTINATION_RULE_SPEC = RecordNode(DestinationRuleSpec, [
    required('host', 'host', STRING),
    optional('traffic_policy', 'trafficPolicy', TRAFFIC_POLICY),
    optional('subsets', 'subsets', SequenceNode(SUBSET)),
    optional('export_to', 'exportTo', SequenceNode(STRING)),
])

DESTINATION_RULE = RecordNode(DestinationRule, [
    required('metadata', 'metadata', OBJECT_META),
    optional('spec', 'spec', DESTINATION_RULE_SPEC),
])
