import os
from typing import Any

from ruamel.yaml import YAML


def get_yaml_instance() -> YAML:
    yaml = YAML(typ="rt")
    yaml.default_flow_style = False
    yaml.explicit_start = False
    yaml.preserve_quotes = True
    yaml.width = 4096
    yaml.indent(mapping=2, sequence=2, offset=0)
    return yaml


def load_yaml_file(yaml: YAML, file_path: str) -> Any:
    with open(file_path, "r") as f:
        return yaml.load(f)


def dump_yaml_file(yaml: YAML, data: Any, file_path: str) -> None:
    # write next to the target and rename so an interrupted run never leaves a truncated file
    tmp_path = f"{file_path}.tmp"
    with open(tmp_path, "w") as f:
        yaml.dump(data, f)
    os.replace(tmp_path, file_path)
