"""
资源模式注册表

按 group/version/kind 索引每种顶层资源的模式定义、复数 URL 路径段以及作用域。
这是唯一保存资源类型相关知识的地方，编解码核心本身与资源类型无关。
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from istio_crd_schema.codec.errors import (
    DecodeError, MissingRequiredField, SchemaDefinitionError, TypeMismatch,
    UnknownResourceKind,
)
from istio_crd_schema.codec.nodes import wire_kind
from istio_crd_schema.codec.record import RecordNode
from istio_crd_schema.codec.wire import (
    dump_json, dump_yaml, load_json, load_yaml, load_yaml_all
)
from istio_crd_schema.models.destination_rule import DESTINATION_RULE
from istio_crd_schema.models.gateway import GATEWAY
from istio_crd_schema.models.virtual_service import VIRTUAL_SERVICE

logger = logging.getLogger(__name__)

ISTIO_NETWORKING_GROUP = "networking.istio.io"
WIRE_FORMATS = ("json", "yaml")


@dataclass(frozen=True)
class ResourceKind:
    """一种顶层资源的注册信息"""
    group: str
    version: str
    kind: str
    plural: str  # URL 路径段，如 destinationrules
    node: RecordNode  # metadata + spec
    namespaced: bool = True

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"

    @property
    def key(self) -> str:
        return f"{self.api_version}/{self.kind}"

    @property
    def scope(self) -> str:
        return "Namespaced" if self.namespaced else "Cluster"

    @property
    def resource_class(self) -> type:
        return self.node.cls

    @property
    def spec_node(self) -> RecordNode:
        return self.node.field('spec').node.inner

    def decode(self, document: Any) -> Any:
        """解码一个完整的 wire 文档（包含 apiVersion/kind/metadata/spec）"""
        api_version, kind = _document_kind(document)
        if (api_version, kind) != (self.api_version, self.kind):
            raise UnknownResourceKind(api_version, kind)
        return self.node.decode(document)

    def encode(self, resource: Any) -> Dict[str, Any]:
        """编码为完整的 wire 文档，status 永远不输出"""
        document = {'apiVersion': self.api_version, 'kind': self.kind}
        document.update(self.node.encode(resource))
        return document

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'apiVersion': self.api_version,
            'plural': self.plural,
            'scope': self.scope,
        }


def _document_kind(document: Any):
    """读取文档的 apiVersion 和 kind"""
    if not isinstance(document, dict):
        raise TypeMismatch("object", wire_kind(document))
    values = []
    for key in ('apiVersion', 'kind'):
        value = document.get(key)
        if value is None:
            raise MissingRequiredField(key).at(key)
        if not isinstance(value, str):
            raise TypeMismatch("string", wire_kind(value)).at(key)
        values.append(value)
    return tuple(values)


class SchemaRegistry:
    """资源模式注册表"""

    def __init__(self):
        self._kinds: Dict[str, ResourceKind] = {}
        self._by_class: Dict[type, ResourceKind] = {}

    def register(self, resource_kind: ResourceKind):
        """注册资源类型，重复注册视为模式定义错误"""
        if resource_kind.key in self._kinds:
            raise SchemaDefinitionError(f"resource kind {resource_kind.key} already registered")
        if resource_kind.resource_class in self._by_class:
            raise SchemaDefinitionError(
                f"class {resource_kind.resource_class.__name__} already registered"
            )
        self._kinds[resource_kind.key] = resource_kind
        self._by_class[resource_kind.resource_class] = resource_kind

    def get(self, api_version: str, kind: str) -> Optional[ResourceKind]:
        """获取资源类型，不存在时返回 None"""
        return self._kinds.get(f"{api_version}/{kind}")

    def lookup(self, api_version: str, kind: str) -> ResourceKind:
        resource_kind = self.get(api_version, kind)
        if resource_kind is None:
            raise UnknownResourceKind(api_version, kind)
        return resource_kind

    def for_resource(self, resource: Any) -> ResourceKind:
        """根据资源值的类型找到注册信息"""
        resource_kind = self._by_class.get(type(resource))
        if resource_kind is None:
            raise TypeError(f"{type(resource).__name__} is not a registered resource")
        return resource_kind

    def kinds(self) -> List[ResourceKind]:
        """获取所有已注册的资源类型（按注册顺序）"""
        return list(self._kinds.values())

    def is_registered(self, document: Any) -> bool:
        """文档的 apiVersion/kind 是否已注册"""
        if not isinstance(document, dict):
            return False
        return self.get(document.get('apiVersion'), document.get('kind')) is not None

    def decode(self, document: Any) -> Any:
        """
        解码 wire 文档

        Args:
            document: 已解析的 JSON/YAML 对象

        Returns:
            类型化的资源值

        Raises:
            DecodeError: 文档格式错误，错误中带有出错字段的路径
        """
        api_version, kind = _document_kind(document)
        resource_kind = self.lookup(api_version, kind)
        resource = resource_kind.node.decode(document)
        logger.debug(f"解码资源 {resource_kind.kind}/{_resource_name(resource)}")
        return resource

    def encode(self, resource: Any) -> Dict[str, Any]:
        resource_kind = self.for_resource(resource)
        logger.debug(f"编码资源 {resource_kind.kind}/{_resource_name(resource)}")
        return resource_kind.encode(resource)

    def decode_bytes(self, raw: Union[str, bytes], fmt: str = "json") -> Any:
        """从 JSON 或 YAML 文本解码单个资源"""
        return self.decode(_load(raw, fmt))

    def encode_bytes(self, resource: Any, fmt: str = "json", indent: Optional[int] = None) -> bytes:
        """编码为 JSON 或 YAML 文本"""
        document = self.encode(resource)
        if fmt == "json":
            return dump_json(document, indent=indent)
        if fmt == "yaml":
            return dump_yaml(document)
        raise ValueError(f"unsupported wire format: {fmt}")

    def decode_all(self, raw: Union[str, bytes]) -> List[Any]:
        """
        解码多文档 YAML 流，跳过空文档

        第 i 个文档的错误路径以 [i] 开头
        """
        resources = []
        for index, document in enumerate(load_yaml_all(raw)):
            if document is None:
                continue
            try:
                resources.append(self.decode(document))
            except DecodeError as e:
                e.at(index)
                raise
        return resources


def _load(raw: Union[str, bytes], fmt: str) -> Any:
    if fmt == "json":
        return load_json(raw)
    if fmt == "yaml":
        return load_yaml(raw)
    raise ValueError(f"unsupported wire format: {fmt}")


def _resource_name(resource: Any) -> str:
    metadata = getattr(resource, 'metadata', None)
    return getattr(metadata, 'name', None) or "<unnamed>"


def build_default_registry() -> SchemaRegistry:
    """构建包含 DestinationRule、Gateway、VirtualService 的注册表"""
    registry = SchemaRegistry()
    registry.register(ResourceKind(
        ISTIO_NETWORKING_GROUP, "v1beta1", "DestinationRule", "destinationrules", DESTINATION_RULE
    ))
    registry.register(ResourceKind(
        ISTIO_NETWORKING_GROUP, "v1beta1", "Gateway", "gateways", GATEWAY
    ))
    registry.register(ResourceKind(
        ISTIO_NETWORKING_GROUP, "v1beta1", "VirtualService", "virtualservices", VIRTUAL_SERVICE
    ))
    return registry


# 全局注册表
default_registry = build_default_registry()


def decode(document: Any) -> Any:
    return default_registry.decode(document)


def encode(resource: Any) -> Dict[str, Any]:
    return default_registry.encode(resource)


def decode_bytes(raw: Union[str, bytes], fmt: str = "json") -> Any:
    return default_registry.decode_bytes(raw, fmt)


def encode_bytes(resource: Any, fmt: str = "json", indent: Optional[int] = None) -> bytes:
    return default_registry.encode_bytes(resource, fmt, indent)


def decode_all(raw: Union[str, bytes]) -> List[Any]:
    return default_registry.decode_all(raw)
