"""
上游主机的连接池设置，可以同时作用于 TCP 层和 HTTP 层

    connectionPool:
      tcp:
        maxConnections: 100
        connectTimeout: 30ms
        tcpKeepalive:
          time: 7200s
          interval: 75s
"""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

from istio_crd_schema.codec import (
    BOOLEAN, DURATION, INT32, UINT32, EnumNode, RecordNode, optional
)


@dataclass
class TcpKeepalive:
    probes: Optional[int] = None  # 判定连接失效前最多发送的探测次数
    time: Optional[timedelta] = None  # 连接空闲多久后开始发送探测
    interval: Optional[timedelta] = None  # 两次探测之间的间隔


@dataclass
class TCPSettings:
    """HTTP 和 TCP 上游连接共用的设置"""
    max_connections: Optional[int] = None
    connect_timeout: Optional[timedelta] = None
    tcp_keepalive: Optional[TcpKeepalive] = None


class H2UpgradePolicy(Enum):
    """是否把 http1.1 连接升级为 http2"""
    DEFAULT = "DEFAULT"
    DO_NOT_UPGRADE = "DO_NOT_UPGRADE"
    UPGRADE = "UPGRADE"


@dataclass
class HTTPSettings:
    """HTTP1.1/HTTP2/GRPC 连接设置"""
    http1_max_pending_requests: Optional[int] = None
    http2_max_requests: Optional[int] = None
    max_requests_per_connection: Optional[int] = None
    max_retries: Optional[int] = None
    idle_timeout: Optional[timedelta] = None
    h2_upgrade_policy: Optional[H2UpgradePolicy] = None
    use_client_protocol: Optional[bool] = None


@dataclass
class ConnectionPoolSettings:
    tcp: Optional[TCPSettings] = None
    http: Optional[HTTPSettings] = None


TCP_KEEPALIVE = RecordNode(TcpKeepalive, [
    optional('probes', 'probes', UINT32),
    optional('time', 'time', DURATION),
    optional('interval', 'interval', DURATION),
])

TCP_SETTINGS = RecordNode(TCPSettings, [
    optional('max_connections', 'maxConnections', INT32),
    optional('connect_timeout', 'connectTimeout', DURATION),
    optional('tcp_keepalive', 'tcpKeepalive', TCP_KEEPALIVE),
])

H2_UPGRADE_POLICY = EnumNode(H2UpgradePolicy)

HTTP_SETTINGS = RecordNode(HTTPSettings, [
    optional('http1_max_pending_requests', 'http1MaxPendingRequests', INT32),
    optional('http2_max_requests', 'http2MaxRequests', INT32),
    optional('max_requests_per_connection', 'maxRequestsPerConnection', INT32),
    optional('max_retries', 'maxRetries', INT32),
    optional('idle_timeout', 'idleTimeout', DURATION),
    optional('h2_upgrade_policy', 'h2UpgradePolicy', H2_UPGRADE_POLICY),
    optional('use_client_protocol', 'useClientProtocol', BOOLEAN),
])

CONNECTION_POOL_SETTINGS = RecordNode(ConnectionPoolSettings, [
    optional('tcp', 'tcp', TCP_SETTINGS),
    optional('http', 'http', HTTP_SETTINGS),
])
