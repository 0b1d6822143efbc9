"""
Gateway 数据模型

Gateway 描述运行在网格边缘的负载均衡器，接收入站或出站的 HTTP/TCP 连接：

    apiVersion: networking.istio.io/v1beta1
    kind: Gateway
    metadata:
      name: my-gateway
      namespace: some-config-namespace
    spec:
      selector:
        app: my-gateway-controller
      servers:
      - port:
          number: 80
          name: http
          protocol: HTTP
        hosts:
        - uk.bookinfo.com
        tls:
          httpsRedirect: true
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from kubernetes.client import V1ObjectMeta

from istio_crd_schema.codec import (
    BOOLEAN, INT32, STRING, UINT32,
    EnumNode, MapNode, RecordNode, SequenceNode, optional, required,
)
from istio_crd_schema.models.meta import OBJECT_META


class ServerTLSMode(Enum):
    """代理侧的 TLS 模式"""
    PASSTHROUGH = "PASSTHROUGH"
    SIMPLE = "SIMPLE"
    MUTUAL = "MUTUAL"
    AUTO_PASSTHROUGH = "AUTO_PASSTHROUGH"
    ISTIO_MUTUAL = "ISTIO_MUTUAL"


class TLSProtocol(Enum):
    TLS_AUTO = "TLS_AUTO"
    TLSV1_0 = "TLSV1_0"
    TLSV1_1 = "TLSV1_1"
    TLSV1_2 = "TLSV1_2"
    TLSV1_3 = "TLSV1_3"


@dataclass
class Port:
    number: int
    protocol: str  # HTTP|HTTPS|GRPC|HTTP2|MONGO|TCP|TLS
    name: str
    target_port: Optional[int] = None


@dataclass
class ServerTLSSettings:
    https_redirect: Optional[bool] = None  # 为 true 时对所有 http 请求返回 301 重定向到 https
    mode: Optional[ServerTLSMode] = None
    server_certificate: Optional[str] = None
    private_key: Optional[str] = None
    ca_certificates: Optional[str] = None
    credential_name: Optional[str] = None
    subject_alt_names: Optional[List[str]] = None
    verify_certificate_spki: Optional[List[str]] = None
    verify_certificate_hash: Optional[List[str]] = None
    min_protocol_version: Optional[TLSProtocol] = None
    max_protocol_version: Optional[TLSProtocol] = None
    cipher_suites: Optional[List[str]] = None


@dataclass
class Server:
    """负载均衡器上暴露的一个端口及其主机"""
    port: Port
    hosts: List[str]
    bind: Optional[str] = None
    tls: Optional[ServerTLSSettings] = None
    name: Optional[str] = None


@dataclass
class GatewaySpec:
    servers: List[Server]
    selector: Dict[str, str]  # 选择应用该配置的网关 pod


@dataclass
class Gateway:
    metadata: V1ObjectMeta = field(default_factory=V1ObjectMeta)
    spec: Optional[GatewaySpec] = None


SERVER_TLS_MODE = EnumNode(ServerTLSMode, name="ServerTLSSettings.TLSmode")
TLS_PROTOCOL = EnumNode(TLSProtocol)

PORT = RecordNode(Port, [
    required('number', 'number', INT32),
    required('protocol', 'protocol', STRING),
    required('name', 'name', STRING),
    optional('target_port', 'targetPort', UINT32),
])

SERVER_TLS_SETTINGS = RecordNode(ServerTLSSettings, [
    optional('https_redirect', 'httpsRedirect', BOOLEAN),
    optional('mode', 'mode', SERVER_TLS_MODE),
    optional('server_certificate', 'serverCertificate', STRING),
    optional('private_key', 'privateKey', STRING),
    optional('ca_certificates', 'caCertificates', STRING),
    optional('credential_name', 'credentialName', STRING),
    optional('subject_alt_names', 'subjectAltNames', SequenceNode(STRING)),
    optional('verify_certificate_spki', 'verifyCertificateSpki', SequenceNode(STRING)),
    optional('verify_certificate_hash', 'verifyCertificateHash', SequenceNode(STRING)),
    optional('min_protocol_version', 'minProtocolVersion', TLS_PROTOCOL),
    optional('max_protocol_version', 'maxProtocolVersion', TLS_PROTOCOL),
    optional('cipher_suites', 'cipherSuites', SequenceNode(STRING)),
])

SERVER = RecordNode(Server, [
    required('port', 'port', PORT),
    optional('bind', 'bind', STRING),
    required('hosts', 'hosts', SequenceNode(STRING)),
    optional('tls', 'tls', SERVER_TLS_SETTINGS),
    optional('name', 'name', STRING),
])

GATEWAY_SPEC = RecordNode(GatewaySpec, [
    required('servers', 'servers', SequenceNode(SERVER)),
    required('selector', 'selector', MapNode(STRING, name="GatewaySpec.selector")),
])

GATEWAY = RecordNode(Gateway, [
    required('metadata', 'metadata', OBJECT_META),
    optional('spec', 'spec', GATEWAY_SPEC),
])
