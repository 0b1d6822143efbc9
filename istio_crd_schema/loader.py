"""
资源加载器
从清单文件或按 <plural>/<namespace>/*.yaml 组织的配置目录中加载并解码资源
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from istio_crd_schema.codec.errors import DecodeError
from istio_crd_schema.config import get_config
from istio_crd_schema.registry import SchemaRegistry, default_registry
from istio_crd_schema.utils.file_utils import (
    JSON_SUFFIXES, is_manifest_file, load_json_file, load_yaml_file
)

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """加载结果"""
    resources: List[Any] = field(default_factory=list)
    errors: List[Tuple[str, Exception]] = field(default_factory=list)  # (来源, 错误)
    skipped: int = 0  # 未注册类型的文档数

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def get_summary(self) -> Dict[str, Any]:
        """获取加载摘要"""
        by_kind: Dict[str, int] = {}
        for resource in self.resources:
            kind = type(resource).__name__
            by_kind[kind] = by_kind.get(kind, 0) + 1
        return {
            'total_resources': len(self.resources),
            'by_kind': by_kind,
            'errors': len(self.errors),
            'skipped': self.skipped,
        }


def load_documents(path: str) -> List[Any]:
    """
    读取一个清单文件中的全部 wire 文档

    Kubernetes List（kind 以 List 结尾且带 items）会被展开
    """
    if os.path.splitext(path)[1].lower() in JSON_SUFFIXES:
        documents = [load_json_file(path)]
    else:
        documents = load_yaml_file(path)

    result = []
    for document in documents:
        if _is_list_document(document):
            result.extend(document['items'])
        else:
            result.append(document)
    return result


def _is_list_document(document: Any) -> bool:
    return (
        isinstance(document, dict)
        and isinstance(document.get('kind'), str)
        and document['kind'].endswith('List')
        and isinstance(document.get('items'), list)
    )


def load_resource_files(
    paths: Iterable[str],
    registry: Optional[SchemaRegistry] = None,
    continue_on_error: Optional[bool] = None
) -> LoadResult:
    """
    加载并解码多个清单文件

    Args:
        paths: 文件路径列表
        registry: 资源注册表，默认使用全局注册表
        continue_on_error: 解码失败后是否继续处理后续文档，None 时取全局配置

    Returns:
        LoadResult，错误来源格式为 "<文件>#<文档序号>"
    """
    registry = registry or default_registry
    if continue_on_error is None:
        continue_on_error = get_config().continue_on_error
    result = LoadResult()

    for path in paths:
        try:
            documents = load_documents(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"读取文件失败 {path}: {e}")
            result.errors.append((path, e))
            if not continue_on_error:
                return result
            continue

        logger.info(f"加载 {path}: {len(documents)} 个文档")
        for index, document in enumerate(documents):
            source = f"{path}#{index}"
            if not registry.is_registered(document):
                kind = document.get('kind') if isinstance(document, dict) else None
                logger.warning(f"跳过未注册的资源类型 {source}: {kind}")
                result.skipped += 1
                continue
            try:
                result.resources.append(registry.decode(document))
            except DecodeError as e:
                logger.error(f"解码失败 {source}: {e}")
                result.errors.append((source, e))
                if not continue_on_error:
                    return result

    return result


def find_resource_files(
    config_dir: str,
    registry: Optional[SchemaRegistry] = None,
    namespace: Optional[str] = None
) -> List[str]:
    """
    按 <config_dir>/<plural>/[<namespace>/]*.yaml 布局查找清单文件

    :param config_dir: 配置目录
    :param registry: 资源注册表
    :param namespace: 可选的命名空间过滤
    :return: 排序后的文件路径列表
    """
    registry = registry or default_registry
    files = []
    for resource_kind in registry.kinds():
        resource_dir = os.path.join(config_dir, resource_kind.plural)
        if not os.path.isdir(resource_dir):
            logger.debug(f"资源目录不存在: {resource_dir}")
            continue

        if namespace:
            search_dirs = [os.path.join(resource_dir, namespace)]
        else:
            # 直接放在资源目录下的文件，以及各命名空间子目录
            search_dirs = [resource_dir] + [
                os.path.join(resource_dir, ns) for ns in sorted(os.listdir(resource_dir))
                if os.path.isdir(os.path.join(resource_dir, ns))
            ]

        for search_dir in search_dirs:
            if not os.path.isdir(search_dir):
                continue
            for name in sorted(os.listdir(search_dir)):
                path = os.path.join(search_dir, name)
                if os.path.isfile(path) and is_manifest_file(path):
                    files.append(path)
    return files


def load_resource_dir(
    config_dir: str,
    registry: Optional[SchemaRegistry] = None,
    namespace: Optional[str] = None,
    continue_on_error: Optional[bool] = None
) -> LoadResult:
    """从配置目录加载全部已注册类型的资源，未指定的参数取全局配置"""
    if namespace is None:
        namespace = get_config().namespace
    files = find_resource_files(config_dir, registry, namespace)
    if not files:
        logger.warning(f"配置目录中没有找到清单文件: {config_dir}")
    return load_resource_files(files, registry, continue_on_error)
