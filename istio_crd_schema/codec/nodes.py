"""
模式节点基类与容器节点

模式节点描述一个类型化的值如何映射到 wire 数据（JSON/YAML）以及如何反向映射。
节点在导入时构建一次，之后不再修改，可以在多个线程之间共享。
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from istio_crd_schema.codec.errors import DecodeError, DuplicateKey, TypeMismatch


def wire_kind(value: Any) -> str:
    """返回 wire 值对应的 JSON 类型名称"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class SchemaNode(ABC):
    """模式节点基类"""

    # 错误信息中使用的期望类型名称
    kind = "value"

    @abstractmethod
    def encode(self, value: Any) -> Any:
        """
        将领域值编码为 wire 值

        编码对类型正确的输入总是成功的
        """
        pass

    @abstractmethod
    def decode(self, data: Any) -> Any:
        """
        将 wire 值解码为领域值

        Raises:
            DecodeError: wire 数据与模式不符
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind})"


class OptionalNode(SchemaNode):
    """
    可选节点

    缺失（None）的值在记录中整个键都会被省略，而不是写成 null。
    解码时缺失的键和显式的 null 都映射为 None。
    """

    def __init__(self, inner: SchemaNode):
        self.inner = inner
        self.kind = inner.kind

    def encode(self, value: Any) -> Any:
        if value is None:
            return None
        return self.inner.encode(value)

    def decode(self, data: Any) -> Any:
        if data is None:
            return None
        return self.inner.decode(data)

    def __repr__(self) -> str:
        return f"OptionalNode({self.inner!r})"


class SequenceNode(SchemaNode):
    """有序列表"""

    kind = "array"

    def __init__(self, inner: SchemaNode):
        self.inner = inner

    def encode(self, value: Any) -> List[Any]:
        return [self.inner.encode(item) for item in value]

    def decode(self, data: Any) -> List[Any]:
        if not isinstance(data, list):
            raise TypeMismatch(self.kind, wire_kind(data))
        items = []
        for index, item in enumerate(data):
            try:
                items.append(self.inner.decode(item))
            except DecodeError as e:
                e.at(index)
                raise
        return items

    def __repr__(self) -> str:
        return f"SequenceNode({self.inner!r})"


class MapNode(SchemaNode):
    """键唯一、无序的字符串映射"""

    kind = "object"

    def __init__(self, inner: SchemaNode, name: str = "map"):
        self.inner = inner
        self.name = name

    def encode(self, value: Any) -> Dict[str, Any]:
        return {key: self.inner.encode(item) for key, item in value.items()}

    def decode(self, data: Any) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise TypeMismatch(self.kind, wire_kind(data))
        # WireObject 会记录解析时遇到的重复键
        duplicates = getattr(data, 'duplicate_keys', None)
        if duplicates:
            raise DuplicateKey(self.name, duplicates[0])
        result = {}
        for key, item in data.items():
            if not isinstance(key, str):
                raise TypeMismatch("string key", wire_kind(key)).at(str(key))
            try:
                result[key] = self.inner.decode(item)
            except DecodeError as e:
                e.at(key)
                raise
        return result

    def __repr__(self) -> str:
        return f"MapNode({self.name}, {self.inner!r})"
