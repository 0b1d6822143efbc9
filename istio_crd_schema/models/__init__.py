"""
Istio 网络资源的数据模型及其模式定义
"""
from .common import PortSelector
from .connection_pool import (
    ConnectionPoolSettings,
    H2UpgradePolicy,
    HTTPSettings,
    TCPSettings,
    TcpKeepalive,
)
from .load_balancer import (
    ConsistentHashLB,
    ConsistentHashLoadBalancer,
    Distribute,
    Failover,
    HTTPCookie,
    HttpCookieHash,
    HttpHeaderNameHash,
    HttpQueryParameterNameHash,
    LoadBalancerSettings,
    LocalityLoadBalancerSetting,
    SimpleLB,
    SimpleLoadBalancer,
    UseSourceIpHash,
)
from .destination_rule import (
    ClientTLSMode,
    ClientTLSSettings,
    DestinationRule,
    DestinationRuleSpec,
    OutlierDetection,
    PortTrafficPolicy,
    Subset,
    TrafficPolicy,
    DESTINATION_RULE,
    DESTINATION_RULE_SPEC,
)
from .gateway import (
    Gateway,
    GatewaySpec,
    Port,
    Server,
    ServerTLSMode,
    ServerTLSSettings,
    TLSProtocol,
    GATEWAY,
    GATEWAY_SPEC,
)
from .virtual_service import (
    CorsPolicy,
    Delegate,
    Destination,
    ExactMatch,
    FaultInjectionAbort,
    FaultInjectionDelay,
    HeaderOperations,
    Headers,
    HTTPFaultInjection,
    HTTPMatchRequest,
    HTTPRedirect,
    HTTPRetry,
    HTTPRewrite,
    HTTPRoute,
    HTTPRouteDestination,
    L4MatchAttributes,
    PrefixMatch,
    RedirectPortSelection,
    RegexMatch,
    RouteDestination,
    StringMatch,
    TCPRoute,
    TLSMatchAttributes,
    TLSRoute,
    VirtualService,
    VirtualServiceSpec,
    VIRTUAL_SERVICE,
    VIRTUAL_SERVICE_SPEC,
)

__all__ = [
    # 共享结构
    'PortSelector',

    # 连接池
    'ConnectionPoolSettings',
    'H2UpgradePolicy',
    'HTTPSettings',
    'TCPSettings',
    'TcpKeepalive',

    # 负载均衡
    'ConsistentHashLB',
    'ConsistentHashLoadBalancer',
    'Distribute',
    'Failover',
    'HTTPCookie',
    'HttpCookieHash',
    'HttpHeaderNameHash',
    'HttpQueryParameterNameHash',
    'LoadBalancerSettings',
    'LocalityLoadBalancerSetting',
    'SimpleLB',
    'SimpleLoadBalancer',
    'UseSourceIpHash',

    # DestinationRule
    'ClientTLSMode',
    'ClientTLSSettings',
    'DestinationRule',
    'DestinationRuleSpec',
    'OutlierDetection',
    'PortTrafficPolicy',
    'Subset',
    'TrafficPolicy',
    'DESTINATION_RULE',
    'DESTINATION_RULE_SPEC',

    # Gateway
    'Gateway',
    'GatewaySpec',
    'Port',
    'Server',
    'ServerTLSMode',
    'ServerTLSSettings',
    'TLSProtocol',
    'GATEWAY',
    'GATEWAY_SPEC',

    # VirtualService
    'CorsPolicy',
    'Delegate',
    'Destination',
    'ExactMatch',
    'FaultInjectionAbort',
    'FaultInjectionDelay',
    'HeaderOperations',
    'Headers',
    'HTTPFaultInjection',
    'HTTPMatchRequest',
    'HTTPRedirect',
    'HTTPRetry',
    'HTTPRewrite',
    'HTTPRoute',
    'HTTPRouteDestination',
    'L4MatchAttributes',
    'PrefixMatch',
    'RedirectPortSelection',
    'RegexMatch',
    'RouteDestination',
    'StringMatch',
    'TCPRoute',
    'TLSMatchAttributes',
    'TLSRoute',
    'VirtualService',
    'VirtualServiceSpec',
    'VIRTUAL_SERVICE',
    'VIRTUAL_SERVICE_SPEC',
]
