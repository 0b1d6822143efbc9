"""
Kubernetes 对象元数据

ObjectMeta 由 kubernetes 客户端库提供，这里只负责把它接入编解码核心。
解码按模型类的 openapi_types / attribute_map 逐字段校验类型，
错误与其它字段一样带有字段路径。
"""
import logging
import re
from datetime import date, datetime
from typing import Any, Dict

from kubernetes import client

from istio_crd_schema.codec.errors import (
    DecodeError, DuplicateKey, InvalidTimestamp, TypeMismatch
)
from istio_crd_schema.codec.nodes import SchemaNode, wire_kind

logger = logging.getLogger(__name__)

_LIST_TYPE = re.compile(r"list\[(.+)\]")
_DICT_TYPE = re.compile(r"dict\(([^,]+), (.+)\)")

# openapi 类型名 -> (允许的 Python 类型, 错误信息中的类型名)
_PRIMITIVES = {
    'str': ((str,), "string"),
    'int': ((int,), "integer"),
    'bool': ((bool,), "boolean"),
    'float': ((int, float), "number"),
}


def _decode_primitive(data: Any, type_name: str) -> Any:
    accepted, kind = _PRIMITIVES[type_name]
    # bool 是 int 的子类，只有声明为 bool 时才接受
    if isinstance(data, bool) and type_name != 'bool':
        raise TypeMismatch(kind, wire_kind(data))
    if not isinstance(data, accepted):
        raise TypeMismatch(kind, wire_kind(data))
    return data


def _decode_datetime(data: Any) -> datetime:
    # YAML 中未加引号的时间戳已经被解析成 datetime
    if isinstance(data, datetime):
        return data
    if isinstance(data, date):
        raise InvalidTimestamp(data.isoformat())
    if not isinstance(data, str):
        raise TypeMismatch("date-time string", wire_kind(data))
    try:
        return datetime.fromisoformat(data.replace('Z', '+00:00'))
    except ValueError:
        raise InvalidTimestamp(data) from None


def _decode_list(data: Any, item_type: str) -> list:
    if not isinstance(data, list):
        raise TypeMismatch("array", wire_kind(data))
    items = []
    for index, item in enumerate(data):
        try:
            items.append(decode_openapi(item, item_type))
        except DecodeError as e:
            e.at(index)
            raise
    return items


def _decode_dict(data: Any, value_type: str, name: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeMismatch("object", wire_kind(data))
    duplicates = getattr(data, 'duplicate_keys', None)
    if duplicates:
        raise DuplicateKey(name, duplicates[0])
    result = {}
    for key, item in data.items():
        if not isinstance(key, str):
            raise TypeMismatch("string key", wire_kind(key)).at(str(key))
        try:
            result[key] = decode_openapi(item, value_type)
        except DecodeError as e:
            e.at(key)
            raise
    return result


def _decode_model(data: Any, model_name: str) -> Any:
    if not isinstance(data, dict):
        raise TypeMismatch("object", wire_kind(data))
    duplicates = getattr(data, 'duplicate_keys', None)
    if duplicates:
        raise DuplicateKey(model_name, duplicates[0])
    model_cls = getattr(client, model_name)
    attributes = {wire: attr for attr, wire in model_cls.attribute_map.items()}

    kwargs = {}
    for key, item in data.items():
        attr = attributes.get(key)
        if attr is None:
            logger.debug(f"{model_name}: 忽略未声明的字段 {key!r}")
            continue
        try:
            kwargs[attr] = decode_openapi(item, model_cls.openapi_types[attr])
        except DecodeError as e:
            e.at(key)
            raise

    try:
        return model_cls(**kwargs)
    except ValueError as e:
        # 客户端侧校验：必填字段缺失或取值不合法
        raise DecodeError(f"invalid {model_name}: {e}") from None


def decode_openapi(data: Any, type_name: str) -> Any:
    """
    按 kubernetes 客户端模型的 openapi 类型名解码 wire 值

    Args:
        data: wire 值
        type_name: 如 'str'、'dict(str, str)'、'list[V1OwnerReference]'、'V1ObjectMeta'

    Returns:
        解码后的值，模型类型返回客户端库的模型实例

    Raises:
        DecodeError: wire 值与模型声明的类型不符
    """
    if data is None:
        return None
    match = _LIST_TYPE.fullmatch(type_name)
    if match:
        return _decode_list(data, match.group(1))
    match = _DICT_TYPE.fullmatch(type_name)
    if match:
        return _decode_dict(data, match.group(2), type_name)
    if type_name in _PRIMITIVES:
        return _decode_primitive(data, type_name)
    if type_name == 'datetime':
        return _decode_datetime(data)
    if type_name == 'object':
        return data
    return _decode_model(data, type_name)


class ObjectMetaNode(SchemaNode):
    """V1ObjectMeta <-> wire 对象（camelCase 键，省略空值）"""

    kind = "object"

    def __init__(self):
        self._api_client = client.ApiClient()

    def encode(self, value: client.V1ObjectMeta) -> Dict[str, Any]:
        return self._api_client.sanitize_for_serialization(value)

    def decode(self, data: Any) -> client.V1ObjectMeta:
        return decode_openapi(data, 'V1ObjectMeta')


OBJECT_META = ObjectMetaNode()
