"""
通用的模式驱动编解码核心，与具体资源类型无关
"""
from .errors import (
    SchemaError,
    SchemaDefinitionError,
    DecodeError,
    TypeMismatch,
    MissingRequiredField,
    UnknownVariant,
    NoMatchingVariant,
    AmbiguousVariant,
    InvalidDuration,
    InvalidTimestamp,
    DuplicateKey,
    IntegerOutOfRange,
    UnknownResourceKind,
)
from .nodes import SchemaNode, OptionalNode, SequenceNode, MapNode, wire_kind
from .scalars import (
    StringNode,
    BooleanNode,
    IntegerNode,
    PercentNode,
    DurationNode,
    STRING,
    BOOLEAN,
    INT32,
    UINT32,
    UINT64,
    PERCENT,
    DURATION,
    parse_duration,
    format_duration,
)
from .enums import EnumNode
from .record import Field, RecordNode, required, optional
from .union import Variant, UnionNode

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
    'InvalidTimestamp',
    'DuplicateKey',
    'IntegerOutOfRange',
    'UnknownResourceKind',

    # 节点
    'SchemaNode',
    'OptionalNode',
    'SequenceNode',
    'MapNode',
    'wire_kind',
    'StringNode',
    'BooleanNode',
    'IntegerNode',
    'PercentNode',
    'DurationNode',
    'EnumNode',
    'Field',
    'RecordNode',
    'required',
    'optional',
    'Variant',
    'UnionNode',

    # 预置标量
    'STRING',
    'BOOLEAN',
    'INT32',
    'UINT32',
    'UINT64',
    'PERCENT',
    'DURATION',
    'parse_duration',
    'format_duration',
]
