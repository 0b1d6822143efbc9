"""
资源导出器
将解码后的资源重新编码为规范格式，按 <plural>/<namespace>/<name> 写入磁盘
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from istio_crd_schema.config import get_config
from istio_crd_schema.registry import SchemaRegistry, default_registry

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"


class ResourceExporter:
    """资源导出器 - 生成规范化的清单文件"""

    def __init__(self, registry: Optional[SchemaRegistry] = None):
        self.registry = registry or default_registry

    def export_resources(
        self,
        resources: List[Any],
        output_dir: str = ".",
        fmt: Optional[str] = None,
        indent: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        导出资源

        Args:
            resources: 类型化的资源列表
            output_dir: 输出目录
            fmt: yaml 或 json，None 时取全局配置的 output_format
            indent: JSON 缩进，None 时取全局配置的 json_indent

        Returns:
            {
                'files': ['...', ...],
                'index_file': '...'
            }

        同一 plural/namespace 下重名的资源不会互相覆盖，后出现的写入 <name>-<n>.<fmt>
        """
        config = get_config()
        fmt = fmt or config.output_format
        if indent is None:
            indent = config.json_indent

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        files = []
        written: Set[Path] = set()
        index: Dict[str, Dict[str, Any]] = {}
        for position, resource in enumerate(resources):
            resource_kind = self.registry.for_resource(resource)
            metadata = resource.metadata
            namespace = metadata.namespace or DEFAULT_NAMESPACE
            name = metadata.name or f"unnamed-{position}"

            target_dir = output_path / resource_kind.plural / namespace
            target_dir.mkdir(parents=True, exist_ok=True)
            target = self._unique_target(target_dir, name, fmt, written)
            target.write_bytes(self.registry.encode_bytes(resource, fmt, indent))
            written.add(target)
            files.append(str(target))
            logger.info(f"{resource_kind.kind} {namespace}/{name} 已导出到: {target}")

            entry = index.setdefault(resource_kind.kind, {
                'apiVersion': resource_kind.api_version,
                'plural': resource_kind.plural,
                'count': 0,
                'resources': []
            })
            entry['count'] += 1
            entry['resources'].append(f"{namespace}/{name}")

        index_file = output_path / "index.json"
        with open(index_file, 'w', encoding='utf-8') as f:
            json.dump(index, f, indent=2, ensure_ascii=False)
        logger.info(f"导出索引已写入: {index_file}")

        return {
            'files': files,
            'index_file': str(index_file)
        }

    @staticmethod
    def _unique_target(target_dir: Path, name: str, fmt: str, written: Set[Path]) -> Path:
        target = target_dir / f"{name}.{fmt}"
        suffix = 1
        while target in written:
            suffix += 1
            target = target_dir / f"{name}-{suffix}.{fmt}"
        if suffix > 1:
            logger.warning(f"资源名重复 {target_dir.name}/{name}，改为写入: {target}")
        return target
