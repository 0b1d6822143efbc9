from datetime import timedelta

from kubernetes.client import V1ObjectMeta

from istio_crd_schema.codec.wire import dump_json, load_json
from istio_crd_schema.models import (
    ClientTLSMode, ClientTLSSettings, ConnectionPoolSettings, ConsistentHashLoadBalancer,
    DestinationRule, DestinationRuleSpec, Distribute, Failover, H2UpgradePolicy,
    HTTPCookie, HTTPSettings, HttpCookieHash, HttpQueryParameterNameHash,
    LocalityLoadBalancerSetting, OutlierDetection, PortSelector, PortTrafficPolicy,
    SimpleLB, SimpleLoadBalancer, Subset, TCPSettings, TcpKeepalive, TrafficPolicy,
    DESTINATION_RULE, DESTINATION_RULE_SPEC,
)
from istio_crd_schema.models.connection_pool import TCP_KEEPALIVE
from istio_crd_schema.models.load_balancer import DISTRIBUTE, HTTP_COOKIE
from istio_crd_schema.registry import decode_bytes

RATINGS_SPEC = (
    b'{"host":"ratings.prod.svc.cluster.local",'
    b'"trafficPolicy":{"loadBalancer":{"simple":"LEAST_CONN"}}}'
)


def test_ratings_spec_decodes_and_reencodes_identically():
    spec = DESTINATION_RULE_SPEC.decode(load_json(RATINGS_SPEC))

    assert spec.host == "ratings.prod.svc.cluster.local"
    assert spec.traffic_policy.load_balancer == SimpleLoadBalancer(simple=SimpleLB.LEAST_CONN)
    assert spec.traffic_policy.load_balancer.locality_lb_setting is None
    assert dump_json(DESTINATION_RULE_SPEC.encode(spec)) == RATINGS_SPEC


def test_manifest_decodes(destination_rule_yaml):
    rule = decode_bytes(destination_rule_yaml, fmt="yaml")

    assert isinstance(rule, DestinationRule)
    assert rule.metadata.name == "reviews"
    assert rule.metadata.labels == {"app": "reviews"}

    policy = rule.spec.traffic_policy
    assert policy.connection_pool.tcp.connect_timeout == timedelta(milliseconds=30)
    assert policy.connection_pool.tcp.tcp_keepalive.time == timedelta(hours=2)
    assert policy.connection_pool.http.h2_upgrade_policy is H2UpgradePolicy.UPGRADE
    assert policy.outlier_detection.consecutive_5xx_errors == 7
    assert policy.outlier_detection.base_ejection_time == timedelta(minutes=15)

    consistent_hash = policy.load_balancer.consistent_hash
    assert isinstance(consistent_hash, HttpCookieHash)
    assert consistent_hash.http_cookie.ttl == timedelta(0)
    assert consistent_hash.minimum_ring_size == 1024

    assert [s.name for s in rule.spec.subsets] == ["v1", "v2"]
    assert rule.spec.subsets[1].traffic_policy.tls.mode is ClientTLSMode.ISTIO_MUTUAL


def test_canonical_durations_on_encode(destination_rule_yaml):
    rule = decode_bytes(destination_rule_yaml, fmt="yaml")
    tcp = DESTINATION_RULE.encode(rule)["spec"]["trafficPolicy"]["connectionPool"]["tcp"]
    # 7200s 以最大的整除单位输出
    assert tcp["tcpKeepalive"] == {"time": "2h", "interval": "75s"}
    assert tcp["connectTimeout"] == "30ms"


def test_typed_value_round_trip():
    rule = DestinationRule(
        metadata=V1ObjectMeta(name="reviews", namespace="bookinfo"),
        spec=DestinationRuleSpec(
            host="reviews.bookinfo.svc.cluster.local",
            traffic_policy=TrafficPolicy(
                load_balancer=ConsistentHashLoadBalancer(
                    consistent_hash=HttpQueryParameterNameHash(http_query_parameter_name="user"),
                    locality_lb_setting=LocalityLoadBalancerSetting(
                        distribute=[Distribute(
                            from_="us-west/zone1/*",
                            to={"us-west/zone1/*": 80, "us-west/zone2/*": 20},
                        )],
                        failover=[Failover(from_="us-east", to="eu-west")],
                        failover_priority=["topology.istio.io/network"],
                        enabled=True,
                    ),
                ),
                connection_pool=ConnectionPoolSettings(
                    tcp=TCPSettings(
                        max_connections=100,
                        tcp_keepalive=TcpKeepalive(probes=3, time=timedelta(seconds=30)),
                    ),
                    http=HTTPSettings(idle_timeout=timedelta(minutes=1), use_client_protocol=True),
                ),
                outlier_detection=OutlierDetection(
                    consecutive_gateway_errors=5,
                    interval=timedelta(seconds=10),
                    max_ejection_percent=50,
                ),
                tls=ClientTLSSettings(
                    mode=ClientTLSMode.MUTUAL,
                    client_certificate="/etc/certs/cert.pem",
                    private_key="/etc/certs/key.pem",
                    subject_alt_names=["reviews.bookinfo"],
                ),
                port_level_settings=[PortTrafficPolicy(
                    port=PortSelector(number=9080),
                    load_balancer=SimpleLoadBalancer(simple=SimpleLB.PASSTHROUGH),
                )],
            ),
            subsets=[Subset(name="v1", labels={"version": "v1"})],
            export_to=["."],
        ),
    )
    assert DESTINATION_RULE.decode(DESTINATION_RULE.encode(rule)) == rule


def test_empty_spec_fields_are_omitted():
    rule = DestinationRule(metadata=V1ObjectMeta(name="minimal"), spec=DestinationRuleSpec(host="h"))
    assert DESTINATION_RULE.encode(rule) == {"metadata": {"name": "minimal"}, "spec": {"host": "h"}}


def test_distribute_uses_from_key():
    value = Distribute(from_="us-west/zone1/*", to={"us-west/zone2/*": 100})
    assert DISTRIBUTE.encode(value) == {"from": "us-west/zone1/*", "to": {"us-west/zone2/*": 100}}
    assert DISTRIBUTE.decode({"from": "a", "to": {"b": 100}}) == Distribute(from_="a", to={"b": 100})


def test_tcp_keepalive_fields_are_optional():
    assert TCP_KEEPALIVE.decode({}) == TcpKeepalive()
    assert TCP_KEEPALIVE.encode(TcpKeepalive(interval=timedelta(seconds=75))) == {"interval": "75s"}


def test_http_cookie_wire_order():
    cookie = HTTPCookie(name="user", ttl=timedelta(seconds=10), path="/")
    assert list(HTTP_COOKIE.encode(cookie)) == ["name", "path", "ttl"]
