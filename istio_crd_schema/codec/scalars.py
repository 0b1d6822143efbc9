"""
标量与语义包装类型编解码

- 字符串、整数、布尔值与 JSON 原生类型一一对应
- 时长编码为 "30ms"、"1h" 这样的字符串，最小粒度为毫秒
- 百分比编码为浮点数，不做范围裁剪
"""
import re
from datetime import timedelta
from typing import Any

from istio_crd_schema.codec.errors import (
    IntegerOutOfRange, InvalidDuration, TypeMismatch
)
from istio_crd_schema.codec.nodes import SchemaNode, wire_kind


_DURATION_PATTERN = re.compile(r"([0-9]+)(h|m|s|ms)")

# 单位 -> 毫秒数，按从大到小排列，编码时选择能精确表示的最大单位
_DURATION_UNITS = (
    ("h", 3600 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
    ("ms", 1),
)
_UNIT_MILLIS = dict(_DURATION_UNITS)


def parse_duration(raw: str) -> timedelta:
    """
    解析时长字符串

    Args:
        raw: 形如 "30ms"、"10s"、"5m"、"1h" 的字符串

    Returns:
        对应的 timedelta

    Raises:
        InvalidDuration: 不符合 <数字>(h|m|s|ms) 语法，或超出 timedelta 的表示范围
    """
    match = _DURATION_PATTERN.fullmatch(raw)
    if match is None:
        raise InvalidDuration(raw)
    amount, unit = match.groups()
    try:
        return timedelta(milliseconds=int(amount) * _UNIT_MILLIS[unit])
    except OverflowError:
        raise InvalidDuration(raw) from None


def format_duration(value: timedelta) -> str:
    """将 timedelta 格式化为规范的时长字符串（不足1毫秒的部分被截断）"""
    if value < timedelta(0):
        raise ValueError(f"durations cannot be negative: {value}")
    millis = value // timedelta(milliseconds=1)
    if millis == 0:
        return "0s"
    for unit, size in _DURATION_UNITS:
        if millis % size == 0:
            return f"{millis // size}{unit}"
    # ms 单位总能整除，不会走到这里
    return f"{millis}ms"


class StringNode(SchemaNode):
    kind = "string"

    def encode(self, value: Any) -> str:
        return value

    def decode(self, data: Any) -> str:
        if not isinstance(data, str):
            raise TypeMismatch(self.kind, wire_kind(data))
        return data


class BooleanNode(SchemaNode):
    kind = "boolean"

    def encode(self, value: Any) -> bool:
        return bool(value)

    def decode(self, data: Any) -> bool:
        if not isinstance(data, bool):
            raise TypeMismatch(self.kind, wire_kind(data))
        return data


class IntegerNode(SchemaNode):
    """带位宽检查的整数"""

    def __init__(self, kind: str, minimum: int, maximum: int):
        self.kind = kind
        self.minimum = minimum
        self.maximum = maximum

    def encode(self, value: Any) -> int:
        return int(value)

    def decode(self, data: Any) -> int:
        # bool 是 int 的子类，需要单独排除
        if isinstance(data, bool) or not isinstance(data, int):
            raise TypeMismatch(self.kind, wire_kind(data))
        if not self.minimum <= data <= self.maximum:
            raise IntegerOutOfRange(self.kind, data)
        return data


class PercentNode(SchemaNode):
    """
    百分比

    编码为裸浮点数；解码同时接受 protobuf 包装形式 {"value": n}。
    超出 [0, 100] 的值原样透传，范围校验属于更上层的策略。
    """

    kind = "number"

    def encode(self, value: Any) -> float:
        return float(value)

    def decode(self, data: Any) -> float:
        if isinstance(data, dict) and set(data) == {"value"}:
            data = data["value"]
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise TypeMismatch(self.kind, wire_kind(data))
        try:
            return float(data)
        except OverflowError:
            raise IntegerOutOfRange("double", data) from None


class DurationNode(SchemaNode):
    kind = "duration string"

    def encode(self, value: timedelta) -> str:
        return format_duration(value)

    def decode(self, data: Any) -> timedelta:
        if not isinstance(data, str):
            raise TypeMismatch(self.kind, wire_kind(data))
        return parse_duration(data)


STRING = StringNode()
BOOLEAN = BooleanNode()
INT32 = IntegerNode("int32", -2 ** 31, 2 ** 31 - 1)
UINT32 = IntegerNode("uint32", 0, 2 ** 32 - 1)
UINT64 = IntegerNode("uint64", 0, 2 ** 64 - 1)
PERCENT = PercentNode()
DURATION = DurationNode()
