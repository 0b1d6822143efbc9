#!/usr/bin/env python3
"""
Istio 网络资源模式工具 - 主入口

统一的命令行界面，支持校验、规范化输出以及列出已注册的资源类型
"""

import sys
import argparse
import logging
from typing import List, Optional

from istio_crd_schema.config import (
    GlobalConfig, LOG_LEVELS, OUTPUT_FORMATS, get_config, load_config_from_file, set_config
)
from istio_crd_schema.exporter import ResourceExporter
from istio_crd_schema.loader import LoadResult, load_resource_dir, load_resource_files
from istio_crd_schema.registry import SchemaRegistry, default_registry

EXIT_OK = 0
EXIT_FAILURE = 1


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """配置日志（输出到 stderr，stdout 留给规范化结果）"""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=log_format,
        handlers=handlers
    )


def load_inputs(files: List[str], config_dir: Optional[str],
                registry: SchemaRegistry) -> LoadResult:
    """加载命令行给出的文件和目录，出错后是否继续以及命名空间过滤取全局配置"""
    result = load_resource_files(files, registry)
    if config_dir and (get_config().continue_on_error or not result.has_errors()):
        dir_result = load_resource_dir(config_dir, registry)
        result.resources.extend(dir_result.resources)
        result.errors.extend(dir_result.errors)
        result.skipped += dir_result.skipped
    return result


def report_errors(result: LoadResult, stream=None):
    for source, error in result.errors:
        print(f"{source}: {error}", file=stream or sys.stdout)


def run_validate(result: LoadResult) -> int:
    """校验模式：输出每个错误及汇总"""
    logger = logging.getLogger(__name__)
    report_errors(result)

    summary = result.get_summary()
    print(f"valid: {summary['total_resources']}, invalid: {summary['errors']}, "
          f"skipped: {summary['skipped']}")
    logger.info(f"校验完成: {summary}")
    return EXIT_FAILURE if result.has_errors() else EXIT_OK


def run_normalize(result: LoadResult, registry: SchemaRegistry,
                  output_dir: Optional[str] = None) -> int:
    """规范化模式：重新编码所有成功解码的资源"""
    logger = logging.getLogger(__name__)
    config = get_config()
    fmt = config.output_format

    if output_dir:
        exporter = ResourceExporter(registry)
        exported = exporter.export_resources(result.resources, output_dir)
        logger.info(f"已导出 {len(exported['files'])} 个文件到 {output_dir}")
    else:
        chunks = [
            registry.encode_bytes(resource, fmt, config.json_indent).decode('utf-8')
            for resource in result.resources
        ]
        if fmt == "yaml":
            sys.stdout.write("---\n".join(chunks))
        else:
            for chunk in chunks:
                sys.stdout.write(chunk + "\n")

    report_errors(result, sys.stderr)
    return EXIT_FAILURE if result.has_errors() else EXIT_OK


def run_kinds(registry: SchemaRegistry) -> int:
    """列出已注册的资源类型"""
    rows = [("KIND", "APIVERSION", "PLURAL", "SCOPE")]
    rows.extend(
        (k.kind, k.api_version, k.plural, k.scope) for k in registry.kinds()
    )
    widths = [max(len(row[i]) for row in rows) for i in range(4)]
    for row in rows:
        print("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="istio-crd-schema",
        description="Istio 网络资源（DestinationRule / Gateway / VirtualService）模式校验工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  # 校验清单文件
  istio-crd-schema --mode validate reviews-dr.yaml bookinfo-gateway.yaml

  # 校验配置目录中某个命名空间下的资源
  istio-crd-schema --mode validate --dir ./istio_config --namespace online-boutique

  # 规范化输出为 JSON
  istio-crd-schema --mode normalize --format json reviews-vs.yaml

  # 列出支持的资源类型
  istio-crd-schema --mode kinds
        """
    )

    parser.add_argument(
        "--mode",
        choices=["validate", "normalize", "kinds"],
        default="validate",
        help="运行模式: validate(校验), normalize(规范化输出), kinds(列出资源类型)"
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="清单文件路径 (.yaml/.yml/.json)"
    )

    parser.add_argument(
        "--dir",
        type=str,
        help="配置目录，布局为 <plural>/<namespace>/*.yaml"
    )

    parser.add_argument(
        "--namespace",
        type=str,
        help="目录加载时只读取该命名空间"
    )

    parser.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        help="normalize 模式的输出格式 (默认: yaml)"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        help="normalize 模式的输出目录，不指定时输出到 stdout"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="配置文件路径 (JSON格式)"
    )

    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        help="日志级别 (默认: INFO)"
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="日志文件路径"
    )

    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="遇到第一个错误即停止"
    )

    return parser


def apply_arguments(config: GlobalConfig, args: argparse.Namespace) -> GlobalConfig:
    """命令行参数覆盖配置文件中的值"""
    if args.log_level:
        config.log_level = args.log_level
    if args.log_file:
        config.log_file = args.log_file
    if args.format:
        config.output_format = args.format
    if args.namespace:
        config.namespace = args.namespace
    if args.fail_fast:
        config.continue_on_error = False
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mode != "kinds" and not args.files and not args.dir:
        parser.error("validate/normalize 模式需要至少一个文件或 --dir")

    if args.config:
        try:
            load_config_from_file(args.config)
        except (OSError, ValueError) as e:
            parser.error(f"无法加载配置文件 {args.config}: {e}")
    else:
        set_config(GlobalConfig())
    config = apply_arguments(get_config(), args)

    # 配置日志
    setup_logging(config.log_level, config.log_file)
    logger = logging.getLogger(__name__)
    if args.config:
        logger.info(f"从文件加载配置: {args.config}")
    logger.debug(f"使用配置: {config.to_dict()}")

    registry = default_registry

    # 根据模式执行
    try:
        if args.mode == "kinds":
            return run_kinds(registry)

        result = load_inputs(args.files, args.dir, registry)
        if args.mode == "validate":
            return run_validate(result)
        return run_normalize(result, registry, args.output_dir)

    except Exception as e:
        logger.error(f"❌ 任务执行失败: {e}", exc_info=True)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
