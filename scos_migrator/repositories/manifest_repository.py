import os
from collections.abc import Mapping

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from scos_migrator.errors import InvalidManifest
from scos_migrator.utils.yaml_loader import get_yaml_instance, load_yaml_file


class ManifestRepository:
    """Reads the component -> image mapping, bare or nested under ``components``."""

    def __init__(self, file_path: str):
        self.file_path: str = file_path
        self.yaml: YAML = get_yaml_instance()

    def load(self) -> dict:
        if not os.path.isfile(self.file_path):
            raise InvalidManifest(f"Manifest file {self.file_path} does not exist")
        try:
            data = load_yaml_file(self.yaml, self.file_path)
        except (OSError, YAMLError) as e:
            raise InvalidManifest(f"Unable to read manifest {self.file_path}: {e}") from e
        if isinstance(data, Mapping) and isinstance(data.get("components"), Mapping):
            data = data["components"]
        if not isinstance(data, Mapping):
            raise InvalidManifest(f"Invalid manifest {self.file_path}: expected a mapping of component names to images")
        return dict(data)
