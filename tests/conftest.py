import textwrap

import pytest

from istio_crd_schema import config as config_module


DESTINATION_RULE_YAML = textwrap.dedent("""\
    apiVersion: networking.istio.io/v1beta1
    kind: DestinationRule
    metadata:
      name: reviews
      namespace: bookinfo
      labels:
        app: reviews
    spec:
      host: reviews.bookinfo.svc.cluster.local
      trafficPolicy:
        connectionPool:
          tcp:
            maxConnections: 100
            connectTimeout: 30ms
            tcpKeepalive:
              time: 7200s
              interval: 75s
          http:
            http1MaxPendingRequests: 10
            maxRequestsPerConnection: 1
            h2UpgradePolicy: UPGRADE
        outlierDetection:
          consecutive5xxErrors: 7
          interval: 5m
          baseEjectionTime: 15m
        loadBalancer:
          consistentHash:
            httpCookie:
              name: user
              ttl: 0s
            minimumRingSize: 1024
      subsets:
      - name: v1
        labels:
          version: v1
      - name: v2
        labels:
          version: v2
        trafficPolicy:
          loadBalancer:
            simple: ROUND_ROBIN
          tls:
            mode: ISTIO_MUTUAL
    status: {}
    """)

GATEWAY_YAML = textwrap.dedent("""\
    apiVersion: networking.istio.io/v1beta1
    kind: Gateway
    metadata:
      name: bookinfo-gateway
      namespace: bookinfo
    spec:
      selector:
        istio: ingressgateway
      servers:
      - port:
          number: 80
          name: http
          protocol: HTTP
        hosts:
        - "*.bookinfo.com"
        tls:
          httpsRedirect: true
      - port:
          number: 443
          name: https
          protocol: HTTPS
        hosts:
        - "*.bookinfo.com"
        tls:
          mode: SIMPLE
          credentialName: bookinfo-cert
          minProtocolVersion: TLSV1_2
    """)

VIRTUAL_SERVICE_YAML = textwrap.dedent("""\
    apiVersion: networking.istio.io/v1beta1
    kind: VirtualService
    metadata:
      name: reviews-route
      namespace: bookinfo
    spec:
      hosts:
      - reviews.bookinfo.svc.cluster.local
      gateways:
      - bookinfo-gateway
      http:
      - name: reviews-v2-routes
        match:
        - uri:
            prefix: /wpcatalog
          headers:
            end-user:
              exact: jason
        rewrite:
          uri: /newcatalog
        route:
        - destination:
            host: reviews.bookinfo.svc.cluster.local
            subset: v2
        timeout: 10s
        retries:
          attempts: 3
          perTryTimeout: 2s
          retryOn: gateway-error,connect-failure
      - name: reviews-default
        route:
        - destination:
            host: reviews.bookinfo.svc.cluster.local
            subset: v1
          weight: 75
        - destination:
            host: reviews.bookinfo.svc.cluster.local
            subset: v3
            port:
              number: 9080
          weight: 25
        fault:
          delay:
            fixedDelay: 5s
            percentage:
              value: 10
        mirror:
          host: reviews.bookinfo.svc.cluster.local
          subset: v3
        mirrorPercentage:
          value: 50.0
      tcp:
      - match:
        - port: 27017
        route:
        - destination:
            host: mongo.backup.svc.cluster.local
            port:
              number: 5555
      tls:
      - match:
        - sniHosts:
          - login.bookinfo.com
          port: 443
        route:
        - destination:
            host: login.prod.svc.cluster.local
    """)

BROKEN_DESTINATION_RULE_YAML = textwrap.dedent("""\
    apiVersion: networking.istio.io/v1beta1
    kind: DestinationRule
    metadata:
      name: broken
      namespace: bookinfo
    spec:
      host: ratings.bookinfo.svc.cluster.local
      trafficPolicy:
        tls:
          mode: BOGUS
    """)

SERVICE_YAML = textwrap.dedent("""\
    apiVersion: v1
    kind: Service
    metadata:
      name: reviews
    spec:
      ports:
      - port: 9080
    """)


@pytest.fixture(autouse=True)
def reset_global_config(monkeypatch):
    monkeypatch.setattr(config_module, "_global_config", None)


@pytest.fixture
def destination_rule_yaml():
    return DESTINATION_RULE_YAML


@pytest.fixture
def gateway_yaml():
    return GATEWAY_YAML


@pytest.fixture
def virtual_service_yaml():
    return VIRTUAL_SERVICE_YAML


@pytest.fixture
def broken_destination_rule_yaml():
    return BROKEN_DESTINATION_RULE_YAML


@pytest.fixture
def service_yaml():
    return SERVICE_YAML


@pytest.fixture
def config_dir(tmp_path):
    """<plural>/<namespace>/*.yaml 布局的配置目录"""
    root = tmp_path / "istio_config"
    layout = {
        "destinationrules/bookinfo/reviews.yaml": DESTINATION_RULE_YAML,
        "gateways/bookinfo/bookinfo-gateway.yaml": GATEWAY_YAML,
        "virtualservices/bookinfo/reviews-route.yaml": VIRTUAL_SERVICE_YAML,
        "destinationrules/other/ratings.yaml": DESTINATION_RULE_YAML.replace(
            "name: reviews\n  namespace: bookinfo", "name: ratings\n  namespace: other"
        ),
    }
    for relative, content in layout.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root
