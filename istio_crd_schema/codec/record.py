"""
记录（复合结构）编解码

每个记录由一个 dataclass 和一张显式的字段表组成：
内部字段名 -> wire 键名 -> 模式节点。字段表在构建时校验唯一性和完整性，
避免拼写错误悄悄产生与 Kubernetes API 不兼容的输出。
"""
import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Type

from istio_crd_schema.codec.errors import (
    DecodeError, MissingRequiredField, SchemaDefinitionError, TypeMismatch
)
from istio_crd_schema.codec.nodes import OptionalNode, SchemaNode, wire_kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Field:
    """字段定义"""
    name: str  # dataclass 中的属性名
    wire_name: str  # wire 对象中的键名，区分大小写
    node: SchemaNode

    @property
    def optional(self) -> bool:
        return isinstance(self.node, OptionalNode)


def required(name: str, wire_name: str, node: SchemaNode) -> Field:
    """必填字段：解码时缺失即报 MissingRequiredField"""
    return Field(name, wire_name, node)


def optional(name: str, wire_name: str, node: SchemaNode) -> Field:
    """可选字段：值为 None 时编码结果中不出现该键"""
    return Field(name, wire_name, OptionalNode(node))


class RecordNode(SchemaNode):
    """
    记录节点

    编码按字段声明顺序输出 wire 键，顺序稳定便于比对；
    解码校验必填字段，忽略模式中未声明的键。
    """

    kind = "object"

    def __init__(self, cls: Type, fields: Sequence[Field]):
        self.cls = cls
        self.fields = tuple(fields)
        self._validate()
        self.wire_names = frozenset(f.wire_name for f in self.fields)

    @property
    def name(self) -> str:
        return self.cls.__name__

    def _validate(self):
        """校验字段表：内部名唯一、wire 名唯一、与 dataclass 字段完全对应"""
        if not dataclasses.is_dataclass(self.cls):
            raise SchemaDefinitionError(f"{self.name} is not a dataclass")

        seen_names = set()
        seen_wire = set()
        for f in self.fields:
            if f.name in seen_names:
                raise SchemaDefinitionError(f"{self.name}: duplicate field '{f.name}'")
            if f.wire_name in seen_wire:
                raise SchemaDefinitionError(f"{self.name}: duplicate wire name '{f.wire_name}'")
            seen_names.add(f.name)
            seen_wire.add(f.wire_name)

        declared = {f.name for f in dataclasses.fields(self.cls)}
        missing = declared - seen_names
        extra = seen_names - declared
        if missing:
            raise SchemaDefinitionError(
                f"{self.name}: fields without wire mapping: {', '.join(sorted(missing))}"
            )
        if extra:
            raise SchemaDefinitionError(
                f"{self.name}: unknown fields in table: {', '.join(sorted(extra))}"
            )

    def field(self, name: str) -> Field:
        """按内部名查找字段定义"""
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def encode(self, value: Any) -> Dict[str, Any]:
        if not isinstance(value, self.cls):
            raise TypeError(f"expected {self.name}, got {type(value).__name__}")
        result = {}
        for f in self.fields:
            item = getattr(value, f.name)
            if item is None and f.optional:
                continue
            result[f.wire_name] = f.node.encode(item)
        return result

    def decode(self, data: Any) -> Any:
        if not isinstance(data, dict):
            raise TypeMismatch(self.kind, wire_kind(data))

        kwargs = {}
        for f in self.fields:
            raw = data.get(f.wire_name)
            if raw is None:
                if f.optional:
                    kwargs[f.name] = None
                    continue
                raise MissingRequiredField(f.wire_name).at(f.wire_name)
            try:
                kwargs[f.name] = f.node.decode(raw)
            except DecodeError as e:
                e.at(f.wire_name)
                raise

        unknown = [key for key in data if key not in self.wire_names]
        if unknown:
            logger.debug(f"{self.name}: 忽略未声明的字段 {unknown}")
        return self.cls(**kwargs)

    def __repr__(self) -> str:
        return f"RecordNode({self.name})"


def wire_names(node: RecordNode) -> List[str]:
    """按声明顺序返回记录的 wire 键"""
    return [f.wire_name for f in node.fields]
