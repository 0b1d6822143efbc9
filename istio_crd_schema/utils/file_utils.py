import os

from istio_crd_schema.codec.wire import load_json, load_yaml_all

YAML_SUFFIXES = ('.yaml', '.yml')
JSON_SUFFIXES = ('.json',)


def load_yaml_file(path):
    """读取 YAML 文件中的全部文档，跳过空文档"""
    with open(path, 'rb') as f:
        return [doc for doc in load_yaml_all(f.read()) if doc is not None]


def load_json_file(path):
    with open(path, 'rb') as f:
        return load_json(f.read())


def is_manifest_file(path):
    """是否为可加载的清单文件"""
    return os.path.splitext(path)[1].lower() in YAML_SUFFIXES + JSON_SUFFIXES
