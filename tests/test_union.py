from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import pytest

from istio_crd_schema.codec import (
    STRING,
    AmbiguousVariant, NoMatchingVariant, RecordNode, SchemaDefinitionError,
    UnionNode, Variant, optional, required,
)
from istio_crd_schema.models.load_balancer import (
    CONSISTENT_HASH_LB, LOAD_BALANCER_SETTINGS,
    ConsistentHashLoadBalancer, HTTPCookie, HttpCookieHash, HttpHeaderNameHash,
    LocalityLoadBalancerSetting, SimpleLB, SimpleLoadBalancer, UseSourceIpHash,
)
from istio_crd_schema.models.virtual_service import (
    STRING_MATCH, ExactMatch, PrefixMatch, RegexMatch,
)


def test_use_source_ip_survives_round_trip():
    settings = ConsistentHashLoadBalancer(
        consistent_hash=UseSourceIpHash(use_source_ip=True, minimum_ring_size=1024)
    )
    wire = LOAD_BALANCER_SETTINGS.encode(settings)
    assert wire == {"consistentHash": {"useSourceIp": True, "minimumRingSize": 1024}}

    decoded = LOAD_BALANCER_SETTINGS.decode(wire)
    assert isinstance(decoded.consistent_hash, UseSourceIpHash)
    assert decoded == settings


def test_two_discriminators_are_ambiguous():
    with pytest.raises(AmbiguousVariant) as exc:
        CONSISTENT_HASH_LB.decode({
            "httpCookie": {"name": "user", "ttl": "0s"},
            "useSourceIp": True,
        })
    assert exc.value.union_name == "ConsistentHashLB"
    assert exc.value.matched_tags == ["HttpCookie", "UseSourceIp"]


def test_shared_field_alone_matches_nothing():
    with pytest.raises(NoMatchingVariant) as exc:
        CONSISTENT_HASH_LB.decode({"minimumRingSize": 5})
    assert exc.value.union_name == "ConsistentHashLB"


def test_null_discriminator_does_not_select_variant():
    decoded = CONSISTENT_HASH_LB.decode({"httpHeaderName": None, "useSourceIp": False})
    assert decoded == UseSourceIpHash(use_source_ip=False)


def test_encode_emits_only_active_variant():
    value = HttpCookieHash(http_cookie=HTTPCookie(name="user", ttl=timedelta(0)))
    assert CONSISTENT_HASH_LB.encode(value) == {"httpCookie": {"name": "user", "ttl": "0s"}}

    header = HttpHeaderNameHash(http_header_name="x-user", minimum_ring_size=64)
    assert CONSISTENT_HASH_LB.encode(header) == {"httpHeaderName": "x-user", "minimumRingSize": 64}


def test_locality_setting_is_not_a_discriminator():
    decoded = LOAD_BALANCER_SETTINGS.decode({
        "simple": "RANDOM",
        "localityLbSetting": {"enabled": True},
    })
    assert decoded == SimpleLoadBalancer(
        simple=SimpleLB.RANDOM,
        locality_lb_setting=LocalityLoadBalancerSetting(enabled=True),
    )

    with pytest.raises(NoMatchingVariant):
        LOAD_BALANCER_SETTINGS.decode({"localityLbSetting": {"enabled": True}})


def test_discriminator_table():
    assert LOAD_BALANCER_SETTINGS.discriminators == {
        "simple": "Simple",
        "consistentHash": "ConsistentHash",
    }
    assert set(CONSISTENT_HASH_LB.discriminators) == {
        "httpHeaderName", "httpCookie", "useSourceIp", "httpQueryParameterName"
    }


def test_encode_rejects_foreign_value():
    with pytest.raises(TypeError):
        LOAD_BALANCER_SETTINGS.encode(ExactMatch(exact="x"))


def test_string_match():
    assert STRING_MATCH.decode({"prefix": "/api"}) == PrefixMatch(prefix="/api")
    assert STRING_MATCH.decode({"regex": "^/v[0-9]+"}) == RegexMatch(regex="^/v[0-9]+")
    assert STRING_MATCH.encode(ExactMatch(exact="jason")) == {"exact": "jason"}
    with pytest.raises(AmbiguousVariant):
        STRING_MATCH.decode({"exact": "a", "prefix": "b"})


@dataclass
class Left:
    left: str
    right: Optional[str] = None


@dataclass
class Right:
    right: str


@dataclass
class Loose:
    loose: Optional[str] = None


LEFT = RecordNode(Left, [required('left', 'left', STRING), optional('right', 'right', STRING)])
RIGHT = RecordNode(Right, [required('right', 'right', STRING)])


def test_overlapping_discriminator_is_a_definition_error():
    with pytest.raises(SchemaDefinitionError):
        UnionNode("LeftRight", [Variant("Left", "left", LEFT), Variant("Right", "right", RIGHT)])


def test_optional_discriminator_is_a_definition_error():
    loose = RecordNode(Loose, [optional('loose', 'loose', STRING)])
    with pytest.raises(SchemaDefinitionError):
        UnionNode("Loose", [Variant("Loose", "loose", loose)])


def test_discriminator_must_be_a_field():
    with pytest.raises(SchemaDefinitionError):
        UnionNode("Right", [Variant("Right", "missing", RIGHT)])


def test_duplicate_tags_are_a_definition_error():
    with pytest.raises(SchemaDefinitionError):
        UnionNode("Dup", [Variant("Same", "left", LEFT), Variant("Same", "right", RIGHT)])
