"""
编解码错误定义

所有解码错误都是快速失败的：遇到第一个错误就中止当前结构的解码，
并携带字段路径向上传播，便于定位格式错误的CRD文档。
"""
from typing import Any, List, Sequence, Union


class SchemaError(Exception):
    """模式相关错误基类"""


class SchemaDefinitionError(SchemaError):
    """模式定义本身有误（重复字段、字段表不完整等），在导入时抛出"""


class DecodeError(SchemaError):
    """解码错误基类，记录出错位置的字段路径"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.path: List[Union[str, int]] = []

    def at(self, segment: Union[str, int]) -> 'DecodeError':
        """在路径最前面插入一段（由外层容器调用）"""
        self.path.insert(0, segment)
        return self

    @property
    def field_path(self) -> str:
        """点分路径，序列下标写成 [i]"""
        parts: List[str] = []
        for segment in self.path:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif parts:
                parts.append(f".{segment}")
            else:
                parts.append(segment)
        return "".join(parts)

    def __str__(self) -> str:
        if self.path:
            return f"{self.field_path}: {self.message}"
        return self.message


class TypeMismatch(DecodeError):
    """wire 值的 JSON 类型与模式不符"""

    def __init__(self, expected_kind: str, actual_kind: str):
        super().__init__(f"expected {expected_kind}, got {actual_kind}")
        self.expected_kind = expected_kind
        self.actual_kind = actual_kind

    @property
    def field(self) -> str:
        return self.field_path


class MissingRequiredField(DecodeError):
    def __init__(self, field: str):
        super().__init__(f"missing required field '{field}'")
        self.field = field


class UnknownVariant(DecodeError):
    """枚举字符串不在封闭标签集合中"""

    def __init__(self, enum_name: str, tag: Any):
        super().__init__(f"unknown {enum_name} variant {tag!r}")
        self.enum_name = enum_name
        self.tag = tag


class NoMatchingVariant(DecodeError):
    def __init__(self, union_name: str):
        super().__init__(f"no discriminating key of {union_name} is present")
        self.union_name = union_name


class AmbiguousVariant(DecodeError):
    def __init__(self, union_name: str, matched_tags: Sequence[str]):
        super().__init__(
            f"{union_name} matches more than one variant: {', '.join(matched_tags)}"
        )
        self.union_name = union_name
        self.matched_tags = list(matched_tags)


class InvalidDuration(DecodeError):
    def __init__(self, raw: Any):
        super().__init__(f"invalid duration {raw!r}, expected <digits>(h|m|s|ms)")
        self.raw = raw


class InvalidTimestamp(DecodeError):
    """元数据中的时间戳不是 RFC 3339 格式"""

    def __init__(self, raw: Any):
        super().__init__(f"invalid timestamp {raw!r}, expected RFC 3339 date-time")
        self.raw = raw


class DuplicateKey(DecodeError):
    def __init__(self, map_name: str, key: Any):
        super().__init__(f"duplicate key {key!r} in {map_name}")
        self.map_name = map_name
        self.key = key


class IntegerOutOfRange(DecodeError):
    def __init__(self, kind: str, value: int):
        super().__init__(f"{value} does not fit in {kind}")
        self.kind = kind
        self.value = value


class UnknownResourceKind(DecodeError):
    """注册表中没有对应的 apiVersion/kind"""

    def __init__(self, api_version: Any, kind: Any):
        super().__init__(f"unknown resource kind {api_version}/{kind}")
        self.api_version = api_version
        self.kind = kind
