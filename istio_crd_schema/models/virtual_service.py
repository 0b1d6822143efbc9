"""
VirtualService 数据模型

VirtualService 定义寻址某个主机时应用的一组流量路由规则：

    apiVersion: networking.istio.io/v1beta1
    kind: VirtualService
    metadata:
      name: reviews-route
    spec:
      hosts:
      - reviews.prod.svc.cluster.local
      http:
      - name: "reviews-v2-routes"
        match:
        - uri:
            prefix: "/wpcatalog"
        rewrite:
          uri: "/newcatalog"
        route:
        - destination:
            host: reviews.prod.svc.cluster.local
            subset: v2
"""
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Dict, List, Optional, Union

from kubernetes.client import V1ObjectMeta

from istio_crd_schema.codec import (
    BOOLEAN, DURATION, INT32, PERCENT, STRING, UINT32,
    EnumNode, MapNode, RecordNode, SequenceNode, UnionNode, Variant,
    optional, required,
)
from istio_crd_schema.models.common import PORT_SELECTOR, PortSelector
from istio_crd_schema.models.meta import OBJECT_META


# StringMatch 的三个变体，wire 上为 {"exact": ...} / {"prefix": ...} / {"regex": ...}

@dataclass
class ExactMatch:
    exact: str


@dataclass
class PrefixMatch:
    prefix: str


@dataclass
class RegexMatch:
    regex: str  # RE2 语法


StringMatch = Union[ExactMatch, PrefixMatch, RegexMatch]


@dataclass
class Destination:
    """请求或连接在路由处理之后被转发到的服务"""
    host: str
    subset: Optional[str] = None
    port: Optional[PortSelector] = None


@dataclass
class Delegate:
    name: Optional[str] = None
    namespace: Optional[str] = None


@dataclass
class HeaderOperations:
    set: Optional[Dict[str, str]] = None
    add: Optional[Dict[str, str]] = None
    remove: Optional[List[str]] = None


@dataclass
class Headers:
    request: Optional[HeaderOperations] = None
    response: Optional[HeaderOperations] = None


@dataclass
class HTTPMatchRequest:
    """HTTP 路由规则的匹配条件，同一个 match 块内的条件是 AND 关系"""
    name: Optional[str] = None
    uri: Optional[StringMatch] = None
    scheme: Optional[StringMatch] = None
    method: Optional[StringMatch] = None
    authority: Optional[StringMatch] = None
    headers: Optional[Dict[str, StringMatch]] = None
    port: Optional[int] = None
    source_labels: Optional[Dict[str, str]] = None
    gateways: Optional[List[str]] = None
    query_params: Optional[Dict[str, StringMatch]] = None
    ignore_uri_case: Optional[bool] = None
    without_headers: Optional[Dict[str, StringMatch]] = None
    source_namespace: Optional[str] = None


@dataclass
class HTTPRouteDestination:
    destination: Destination
    weight: Optional[int] = None
    headers: Optional[Headers] = None


@dataclass
class RouteDestination:
    destination: Destination
    weight: Optional[int] = None


@dataclass
class L4MatchAttributes:
    destination_subnets: Optional[List[str]] = None
    port: Optional[int] = None
    source_labels: Optional[Dict[str, str]] = None
    gateways: Optional[List[str]] = None
    source_namespace: Optional[str] = None


@dataclass
class TLSMatchAttributes:
    sni_hosts: List[str]
    destination_subnets: Optional[List[str]] = None
    port: Optional[int] = None
    source_labels: Optional[Dict[str, str]] = None
    gateways: Optional[List[str]] = None
    source_namespace: Optional[str] = None


class RedirectPortSelection(Enum):
    FROM_PROTOCOL_DEFAULT = "FROM_PROTOCOL_DEFAULT"
    FROM_REQUEST_PORT = "FROM_REQUEST_PORT"


@dataclass
class HTTPRedirect:
    uri: Optional[str] = None
    authority: Optional[str] = None
    port: Optional[int] = None
    derive_port: Optional[RedirectPortSelection] = None
    scheme: Optional[str] = None
    redirect_code: Optional[int] = None  # 默认 301


@dataclass
class HTTPRewrite:
    uri: Optional[str] = None
    authority: Optional[str] = None


@dataclass
class HTTPRetry:
    attempts: int
    per_try_timeout: Optional[timedelta] = None
    retry_on: Optional[str] = None  # 逗号分隔的重试条件
    retry_remote_localities: Optional[bool] = None


@dataclass
class CorsPolicy:
    allow_origins: Optional[List[StringMatch]] = None
    allow_methods: Optional[List[str]] = None
    allow_headers: Optional[List[str]] = None
    expose_headers: Optional[List[str]] = None
    max_age: Optional[timedelta] = None
    allow_credentials: Optional[bool] = None


@dataclass
class FaultInjectionDelay:
    fixed_delay: timedelta
    percentage: Optional[float] = None
    percent: Optional[int] = None  # 已废弃，使用 percentage


@dataclass
class FaultInjectionAbort:
    http_status: int
    percentage: Optional[float] = None


@dataclass
class HTTPFaultInjection:
    delay: Optional[FaultInjectionDelay] = None
    abort: Optional[FaultInjectionAbort] = None


@dataclass
class HTTPRoute:
    """HTTP/1.1、HTTP2、gRPC 流量的路由规则"""
    name: Optional[str] = None
    match: Optional[List[HTTPMatchRequest]] = None
    route: Optional[List[HTTPRouteDestination]] = None
    redirect: Optional[HTTPRedirect] = None
    delegate: Optional[Delegate] = None
    rewrite: Optional[HTTPRewrite] = None
    timeout: Optional[timedelta] = None
    retries: Optional[HTTPRetry] = None
    fault: Optional[HTTPFaultInjection] = None
    mirror: Optional[Destination] = None
    mirror_percentage: Optional[float] = None
    cors_policy: Optional[CorsPolicy] = None
    headers: Optional[Headers] = None
    mirror_percent: Optional[int] = None  # 已废弃，使用 mirror_percentage


@dataclass
class TLSRoute:
    """未终止的 TLS/HTTPS 流量，按 SNI 路由"""
    match: List[TLSMatchAttributes]
    route: Optional[List[RouteDestination]] = None


@dataclass
class TCPRoute:
    match: Optional[List[L4MatchAttributes]] = None
    route: Optional[List[RouteDestination]] = None


@dataclass
class VirtualServiceSpec:
    hosts: Optional[List[str]] = None
    gateways: Optional[List[str]] = None
    http: Optional[List[HTTPRoute]] = None
    tls: Optional[List[TLSRoute]] = None
    tcp: Optional[List[TCPRoute]] = None
    export_to: Optional[List[str]] = None


@dataclass
class VirtualService:
    metadata: V1ObjectMeta = field(default_factory=V1ObjectMeta)
    spec: Optional[VirtualServiceSpec] = None


# ---------------------------------------------------------------------------
# 模式定义
# ---------------------------------------------------------------------------

STRING_MATCH = UnionNode("StringMatch", [
    Variant("exact", "exact", RecordNode(ExactMatch, [required('exact', 'exact', STRING)])),
    Variant("prefix", "prefix", RecordNode(PrefixMatch, [required('prefix', 'prefix', STRING)])),
    Variant("regex", "regex", RecordNode(RegexMatch, [required('regex', 'regex', STRING)])),
])

DESTINATION = RecordNode(Destination, [
    required('host', 'host', STRING),
    optional('subset', 'subset', STRING),
    optional('port', 'port', PORT_SELECTOR),
])

DELEGATE = RecordNode(Delegate, [
    optional('name', 'name', STRING),
    optional('namespace', 'namespace', STRING),
])

HEADER_OPERATIONS = RecordNode(HeaderOperations, [
    optional('set', 'set', MapNode(STRING, name="HeaderOperations.set")),
    optional('add', 'add', MapNode(STRING, name="HeaderOperations.add")),
    optional('remove', 'remove', SequenceNode(STRING)),
])

HEADERS = RecordNode(Headers, [
    optional('request', 'request', HEADER_OPERATIONS),
    optional('response', 'response', HEADER_OPERATIONS),
])

HTTP_MATCH_REQUEST = RecordNode(HTTPMatchRequest, [
    optional('name', 'name', STRING),
    optional('uri', 'uri', STRING_MATCH),
    optional('scheme', 'scheme', STRING_MATCH),
    optional('method', 'method', STRING_MATCH),
    optional('authority', 'authority', STRING_MATCH),
    optional('headers', 'headers', MapNode(STRING_MATCH, name="HTTPMatchRequest.headers")),
    optional('port', 'port', UINT32),
    optional('source_labels', 'sourceLabels', MapNode(STRING, name="HTTPMatchRequest.sourceLabels")),
    optional('gateways', 'gateways', SequenceNode(STRING)),
    optional('query_params', 'queryParams', MapNode(STRING_MATCH, name="HTTPMatchRequest.queryParams")),
    optional('ignore_uri_case', 'ignoreUriCase', BOOLEAN),
    optional('without_headers', 'withoutHeaders', MapNode(STRING_MATCH, name="HTTPMatchRequest.withoutHeaders")),
    optional('source_namespace', 'sourceNamespace', STRING),
])

HTTP_ROUTE_DESTINATION = RecordNode(HTTPRouteDestination, [
    required('destination', 'destination', DESTINATION),
    optional('weight', 'weight', INT32),
    optional('headers', 'headers', HEADERS),
])

ROUTE_DESTINATION = RecordNode(RouteDestination, [
    required('destination', 'destination', DESTINATION),
    optional('weight', 'weight', INT32),
])

L4_MATCH_ATTRIBUTES = RecordNode(L4MatchAttributes, [
    optional('destination_subnets', 'destinationSubnets', SequenceNode(STRING)),
    optional('port', 'port', UINT32),
    optional('source_labels', 'sourceLabels', MapNode(STRING, name="L4MatchAttributes.sourceLabels")),
    optional('gateways', 'gateways', SequenceNode(STRING)),
    optional('source_namespace', 'sourceNamespace', STRING),
])

TLS_MATCH_ATTRIBUTES = RecordNode(TLSMatchAttributes, [
    required('sni_hosts', 'sniHosts', SequenceNode(STRING)),
    optional('destination_subnets', 'destinationSubnets', SequenceNode(STRING)),
    optional('port', 'port', UINT32),
    optional('source_labels', 'sourceLabels', MapNode(STRING, name="TLSMatchAttributes.sourceLabels")),
    optional('gateways', 'gateways', SequenceNode(STRING)),
    optional('source_namespace', 'sourceNamespace', STRING),
])

REDIRECT_PORT_SELECTION = EnumNode(RedirectPortSelection)

HTTP_REDIRECT = RecordNode(HTTPRedirect, [
    optional('uri', 'uri', STRING),
    optional('authority', 'authority', STRING),
    optional('port', 'port', UINT32),
    optional('derive_port', 'derivePort', REDIRECT_PORT_SELECTION),
    optional('scheme', 'scheme', STRING),
    optional('redirect_code', 'redirectCode', INT32),
])

HTTP_REWRITE = RecordNode(HTTPRewrite, [
    optional('uri', 'uri', STRING),
    optional('authority', 'authority', STRING),
])

HTTP_RETRY = RecordNode(HTTPRetry, [
    required('attempts', 'attempts', INT32),
    optional('per_try_timeout', 'perTryTimeout', DURATION),
    optional('retry_on', 'retryOn', STRING),
    optional('retry_remote_localities', 'retryRemoteLocalities', BOOLEAN),
])

CORS_POLICY = RecordNode(CorsPolicy, [
    optional('allow_origins', 'allowOrigins', SequenceNode(STRING_MATCH)),
    optional('allow_methods', 'allowMethods', SequenceNode(STRING)),
    optional('allow_headers', 'allowHeaders', SequenceNode(STRING)),
    optional('expose_headers', 'exposeHeaders', SequenceNode(STRING)),
    optional('max_age', 'maxAge', DURATION),
    optional('allow_credentials', 'allowCredentials', BOOLEAN),
])

FAULT_INJECTION_DELAY = RecordNode(FaultInjectionDelay, [
    required('fixed_delay', 'fixedDelay', DURATION),
    optional('percentage', 'percentage', PERCENT),
    optional('percent', 'percent', INT32),
])

FAULT_INJECTION_ABORT = RecordNode(FaultInjectionAbort, [
    required('http_status', 'httpStatus', INT32),
    optional('percentage', 'percentage', PERCENT),
])

HTTP_FAULT_INJECTION = RecordNode(HTTPFaultInjection, [
    optional('delay', 'delay', FAULT_INJECTION_DELAY),
    optional('abort', 'abort', FAULT_INJECTION_ABORT),
])

HTTP_ROUTE = RecordNode(HTTPRoute, [
    optional('name', 'name', STRING),
    optional('match', 'match', SequenceNode(HTTP_MATCH_REQUEST)),
    optional('route', 'route', SequenceNode(HTTP_ROUTE_DESTINATION)),
    optional('redirect', 'redirect', HTTP_REDIRECT),
    optional('delegate', 'delegate', DELEGATE),
    optional('rewrite', 'rewrite', HTTP_REWRITE),
    optional('timeout', 'timeout', DURATION),
    optional('retries', 'retries', HTTP_RETRY),
    optional('fault', 'fault', HTTP_FAULT_INJECTION),
    optional('mirror', 'mirror', DESTINATION),
    optional('mirror_percentage', 'mirrorPercentage', PERCENT),
    optional('cors_policy', 'corsPolicy', CORS_POLICY),
    optional('headers', 'headers', HEADERS),
    optional('mirror_percent', 'mirrorPercent', INT32),
])

TLS_ROUTE = RecordNode(TLSRoute, [
    required('match', 'match', SequenceNode(TLS_MATCH_ATTRIBUTES)),
    optional('route', 'route', SequenceNode(ROUTE_DESTINATION)),
])

TCP_ROUTE = RecordNode(TCPRoute, [
    optional('match', 'match', SequenceNode(L4_MATCH_ATTRIBUTES)),
    optional('route', 'route', SequenceNode(ROUTE_DESTINATION)),
])

VIRTUAL_SERVICE_SPEC = RecordNode(VirtualServiceSpec, [
    optional('hosts', 'hosts', SequenceNode(STRING)),
    optional('gateways', 'gateways', SequenceNode(STRING)),
    optional('http', 'http', SequenceNode(HTTP_ROUTE)),
    optional('tls', 'tls', SequenceNode(TLS_ROUTE)),
    optional('tcp', 'tcp', SequenceNode(TCP_ROUTE)),
    optional('export_to', 'exportTo', SequenceNode(STRING)),
])

VIRTUAL_SERVICE = RecordNode(VirtualService, [
    required('metadata', 'metadata', OBJECT_META),
    optional('spec', 'spec', VIRTUAL_SERVICE_SPEC),
])
