import pytest
import yaml

from istio_crd_schema.codec import MissingRequiredField, TypeMismatch, UnknownVariant
from istio_crd_schema.codec.wire import load_yaml
from istio_crd_schema.models import Gateway, Port, ServerTLSMode, TLSProtocol, GATEWAY
from istio_crd_schema.registry import decode, decode_bytes, encode


def test_manifest_decodes(gateway_yaml):
    gateway = decode_bytes(gateway_yaml, fmt="yaml")

    assert isinstance(gateway, Gateway)
    assert gateway.spec.selector == {"istio": "ingressgateway"}

    http, https = gateway.spec.servers
    assert http.port == Port(number=80, protocol="HTTP", name="http")
    assert http.hosts == ["*.bookinfo.com"]
    assert http.tls.https_redirect is True
    assert https.tls.mode is ServerTLSMode.SIMPLE
    assert https.tls.credential_name == "bookinfo-cert"
    assert https.tls.min_protocol_version is TLSProtocol.TLSV1_2


def test_round_trip(gateway_yaml):
    gateway = decode_bytes(gateway_yaml, fmt="yaml")
    assert decode(encode(gateway)) == gateway


def test_encoded_spec_matches_source(gateway_yaml):
    source = yaml.safe_load(gateway_yaml)
    assert encode(decode_bytes(gateway_yaml, fmt="yaml"))["spec"] == source["spec"]


def test_selector_is_required(gateway_yaml):
    document = load_yaml(gateway_yaml)
    del document["spec"]["selector"]
    with pytest.raises(MissingRequiredField) as exc:
        decode(document)
    assert exc.value.field_path == "spec.selector"


def test_port_number_must_be_integer(gateway_yaml):
    document = load_yaml(gateway_yaml)
    document["spec"]["servers"][0]["port"]["number"] = "80"
    with pytest.raises(TypeMismatch) as exc:
        decode(document)
    assert exc.value.field == "spec.servers[0].port.number"


def test_unknown_server_tls_mode(gateway_yaml):
    document = load_yaml(gateway_yaml)
    document["spec"]["servers"][1]["tls"]["mode"] = "OPTIONAL_MUTUAL"
    with pytest.raises(UnknownVariant) as exc:
        GATEWAY.decode(document)
    assert exc.value.enum_name == "ServerTLSSettings.TLSmode"
    assert exc.value.field_path == "spec.servers[1].tls.mode"
