"""
Istio 网络资源（DestinationRule / Gateway / VirtualService）的模式驱动编解码

    from istio_crd_schema import decode_bytes, encode_bytes

    rule = decode_bytes(raw, fmt="yaml")
    print(encode_bytes(rule, fmt="json", indent=2).decode())
"""
from .codec import (
    SchemaError,
    SchemaDefinitionError,
    DecodeError,
    TypeMismatch,
    MissingRequiredField,
    UnknownVariant,
    NoMatchingVariant,
    AmbiguousVariant,
    InvalidDuration,
    DuplicateKey,
    IntegerOutOfRange,
    UnknownResourceKind,
)
from .registry import (
    ResourceKind,
    SchemaRegistry,
    build_default_registry,
    default_registry,
    decode,
    encode,
    decode_bytes,
    encode_bytes,
    decode_all,
)
from .models import DestinationRule, Gateway, VirtualService

__version__ = "0.1.0"

__all__ = [
    # 错误
    'SchemaError',
    'SchemaDefinitionError',
    'DecodeError',
    'TypeMismatch',
    'MissingRequiredField',
    'UnknownVariant',
    'NoMatchingVariant',
    'AmbiguousVariant',
    'InvalidDuration',
    'DuplicateKey',
    'IntegerOutOfRange',
    'UnknownResourceKind',

    # 注册表
    'ResourceKind',
    'SchemaRegistry',
    'build_default_registry',
    'default_registry',
    'decode',
    'encode',
    'decode_bytes',
    'encode_bytes',
    'decode_all',

    # 顶层资源
    'DestinationRule',
    'Gateway',
    'VirtualService',
]
