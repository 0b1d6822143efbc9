"""
wire 格式读写（JSON / YAML）

标准的 json/yaml 解析会静默地用后出现的重复键覆盖前面的值，
这里把每个映射解析成 WireObject，记录下重复键，交给 MapNode 报告 DuplicateKey。
"""
import json
from datetime import date, datetime
from typing import Any, Iterable, List, Tuple, Union

import yaml
from yaml.constructor import ConstructorError
from yaml.resolver import BaseResolver


class WireObject(dict):
    """记录了重复键的 wire 对象"""

    def __init__(self, pairs: Iterable[Tuple[Any, Any]] = ()):
        super().__init__()
        self.duplicate_keys: List[Any] = []
        for key, value in pairs:
            if key in self:
                self.duplicate_keys.append(key)
            self[key] = value


class WireLoader(yaml.SafeLoader):
    """把 YAML 映射构造成 WireObject 的 SafeLoader"""

    def construct_wire_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            raise ConstructorError(
                None, None, f"expected a mapping node, but found {node.id}", node.start_mark
            )
        self.flatten_mapping(node)
        pairs = []
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)
            try:
                hash(key)
            except TypeError:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    "found unhashable key", key_node.start_mark
                )
            pairs.append((key, self.construct_object(value_node, deep=True)))
        return WireObject(pairs)


WireLoader.add_constructor(BaseResolver.DEFAULT_MAPPING_TAG, WireLoader.construct_wire_mapping)


def _as_text(raw: Union[str, bytes]) -> str:
    if isinstance(raw, bytes):
        return raw.decode('utf-8')
    return raw


def load_json(raw: Union[str, bytes]) -> Any:
    """解析 JSON 文本"""
    return json.loads(_as_text(raw), object_pairs_hook=WireObject)


def load_yaml(raw: Union[str, bytes]) -> Any:
    """解析单个 YAML 文档"""
    return yaml.load(_as_text(raw), Loader=WireLoader)


def load_yaml_all(raw: Union[str, bytes]) -> List[Any]:
    """解析多文档 YAML 流（以 --- 分隔）"""
    return list(yaml.load_all(_as_text(raw), Loader=WireLoader))


def json_default(value: Any) -> Any:
    # YAML 中未加引号的时间戳会被解析成 datetime
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_json(document: Any, indent: int = None) -> bytes:
    """
    输出 JSON，保持键的插入顺序

    indent 为 None 时输出紧凑格式
    """
    separators = (',', ':') if indent is None else (',', ': ')
    text = json.dumps(
        document, indent=indent, separators=separators,
        ensure_ascii=False, default=json_default
    )
    return text.encode('utf-8')


def dump_yaml(document: Any) -> bytes:
    """输出块格式 YAML，保持键的插入顺序"""
    text = yaml.safe_dump(
        _plain(document), sort_keys=False, default_flow_style=False, allow_unicode=True
    )
    return text.encode('utf-8')


def dump_yaml_all(documents: Iterable[Any]) -> bytes:
    text = yaml.safe_dump_all(
        [_plain(d) for d in documents], sort_keys=False,
        default_flow_style=False, allow_unicode=True
    )
    return text.encode('utf-8')


def _plain(value: Any) -> Any:
    """SafeDumper 不认识 dict 子类，先转换成普通 dict"""
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value
