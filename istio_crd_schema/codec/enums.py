"""
枚举编解码：封闭的标签集合编码为裸字符串
"""
from enum import Enum
from typing import Any, List, Optional, Type

from istio_crd_schema.codec.errors import TypeMismatch, UnknownVariant
from istio_crd_schema.codec.nodes import SchemaNode, wire_kind


class EnumNode(SchemaNode):
    """
    枚举节点

    成员的 value 就是 wire 标签，匹配区分大小写。
    未知标签是硬性解码失败，不会被映射到默认值。
    """

    kind = "string"

    def __init__(self, enum_cls: Type[Enum], name: Optional[str] = None):
        self.enum_cls = enum_cls
        self.name = name or enum_cls.__name__

    @property
    def tags(self) -> List[str]:
        """按声明顺序返回全部标签"""
        return [member.value for member in self.enum_cls]

    def encode(self, value: Enum) -> str:
        return value.value

    def decode(self, data: Any) -> Enum:
        if not isinstance(data, str):
            raise TypeMismatch(self.kind, wire_kind(data))
        try:
            return self.enum_cls(data)
        except ValueError:
            raise UnknownVariant(self.name, data) from None

    def __repr__(self) -> str:
        return f"EnumNode({self.name})"
