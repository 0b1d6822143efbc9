"""
标签联合编解码（Kubernetes oneof 风格）

wire 上的联合体是一个普通对象，通过其中出现的判别键来确定是哪个变体，
例如 ConsistentHashLB 的 httpHeaderName / httpCookie / useSourceIp /
httpQueryParameterName。判别键表在模式定义时构建，解码时不做动态推断。
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from istio_crd_schema.codec.errors import (
    AmbiguousVariant, NoMatchingVariant, SchemaDefinitionError, TypeMismatch
)
from istio_crd_schema.codec.nodes import SchemaNode, wire_kind
from istio_crd_schema.codec.record import RecordNode


@dataclass(frozen=True)
class Variant:
    """联合体的一个变体"""
    tag: str  # 变体名称，如 "UseSourceIp"
    discriminator: str  # 只属于该变体的 wire 键
    record: RecordNode  # 变体自身的字段（包括 minimumRingSize 这类共享字段）

    @property
    def cls(self) -> type:
        return self.record.cls


class UnionNode(SchemaNode):
    """
    联合节点

    解码：恰好一个判别键存在时选中对应变体；没有则 NoMatchingVariant，
    多于一个则 AmbiguousVariant。
    编码：只输出当前变体自己的字段。
    """

    kind = "object"

    def __init__(self, name: str, variants: Sequence[Variant]):
        self.name = name
        self.variants = tuple(variants)
        self._validate()
        self._by_class = {v.cls: v for v in self.variants}

    def _validate(self):
        tags = [v.tag for v in self.variants]
        if len(set(tags)) != len(tags):
            raise SchemaDefinitionError(f"{self.name}: duplicate variant tags {tags}")
        classes = [v.cls for v in self.variants]
        if len(set(classes)) != len(classes):
            raise SchemaDefinitionError(f"{self.name}: variant classes must be distinct")

        for variant in self.variants:
            owner = [f for f in variant.record.fields if f.wire_name == variant.discriminator]
            if not owner:
                raise SchemaDefinitionError(
                    f"{self.name}.{variant.tag}: discriminator '{variant.discriminator}' "
                    f"is not a field of {variant.record.name}"
                )
            if owner[0].optional:
                raise SchemaDefinitionError(
                    f"{self.name}.{variant.tag}: discriminator '{variant.discriminator}' "
                    f"must be a required field"
                )
            # 判别键必须互斥，否则解码有歧义
            for other in self.variants:
                if other is not variant and variant.discriminator in other.record.wire_names:
                    raise SchemaDefinitionError(
                        f"{self.name}: discriminator '{variant.discriminator}' of "
                        f"{variant.tag} also appears in {other.tag}"
                    )

    @property
    def discriminators(self) -> Dict[str, str]:
        """判别键 -> 变体名称"""
        return {v.discriminator: v.tag for v in self.variants}

    def variant_for(self, value: Any) -> Variant:
        variant = self._by_class.get(type(value))
        if variant is None:
            raise TypeError(f"{type(value).__name__} is not a variant of {self.name}")
        return variant

    def encode(self, value: Any) -> Dict[str, Any]:
        return self.variant_for(value).record.encode(value)

    def decode(self, data: Any) -> Any:
        if not isinstance(data, dict):
            raise TypeMismatch(self.kind, wire_kind(data))

        matched: List[Variant] = [
            v for v in self.variants if data.get(v.discriminator) is not None
        ]
        if not matched:
            raise NoMatchingVariant(self.name)
        if len(matched) > 1:
            raise AmbiguousVariant(self.name, [v.tag for v in matched])
        return matched[0].record.decode(data)

    def __repr__(self) -> str:
        return f"UnionNode({self.name})"
