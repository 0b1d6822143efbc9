from .file_utils import load_yaml_file, load_json_file, is_manifest_file

__all__ = [
    'load_yaml_file',
    'load_json_file',
    'is_manifest_file'
]
