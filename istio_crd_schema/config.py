"""
全局配置管理

加载器和导出器在调用方没有显式传参时读取这里的全局配置，
命令行入口负责把配置文件与命令行参数合并后写入全局配置。
"""

import json
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional

OUTPUT_FORMATS = ("yaml", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class GlobalConfig:
    """全局配置类"""

    # 日志配置
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # 输出配置
    output_format: str = "yaml"  # yaml 或 json
    json_indent: Optional[int] = 2  # None 表示紧凑输出

    # 批量处理配置
    continue_on_error: bool = True  # 某个文档解码失败后是否继续处理其余文档
    namespace: Optional[str] = None  # 目录加载时的命名空间过滤

    def __post_init__(self):
        """初始化后处理：校验取值"""
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")
        self.log_level = self.log_level.upper()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format!r}"
            )
        if self.json_indent is not None and (
                isinstance(self.json_indent, bool)
                or not isinstance(self.json_indent, int)
                or self.json_indent < 0):
            raise ValueError(f"json_indent must be a non-negative integer or null, "
                             f"got {self.json_indent!r}")
        if not isinstance(self.continue_on_error, bool):
            raise ValueError(f"continue_on_error must be a boolean, got {self.continue_on_error!r}")

    @classmethod
    def from_file(cls, config_file: str) -> 'GlobalConfig':
        """
        从JSON配置文件加载配置

        Raises:
            OSError: 文件无法读取
            ValueError: 不是合法的 JSON 对象，包含未知配置项，或取值不合法
        """
        with open(config_file, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        if not isinstance(config_dict, dict):
            raise ValueError(f"config file must contain a JSON object, got {type(config_dict).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**config_dict)

    def to_file(self, config_file: str):
        """保存配置到JSON文件"""
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(asdict(self), f, indent=2, ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return asdict(self)


# 全局配置单例
_global_config: Optional[GlobalConfig] = None


def get_config() -> GlobalConfig:
    """获取全局配置单例"""
    global _global_config
    if _global_config is None:
        _global_config = GlobalConfig()
    return _global_config


def set_config(config: GlobalConfig):
    """设置全局配置"""
    global _global_config
    _global_config = config


def load_config_from_file(config_file: str) -> GlobalConfig:
    """从文件加载全局配置"""
    config = GlobalConfig.from_file(config_file)
    set_config(config)
    return config
