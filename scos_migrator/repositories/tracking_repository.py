import os

from ruamel.yaml import YAML

from scos_migrator.models import ComponentRecord, ComponentStatus, RecordsFile, ReleaseCommand
from scos_migrator.utils.yaml_loader import dump_yaml_file, get_yaml_instance, load_yaml_file

MANIFEST_FILE = "manifest.yaml"
RECORDS_FILE = "records.yaml"
METADATA_FILE = "metadata.yaml"
BUILDABLE_FILE = "buildable.yaml"
UNBUILDABLE_FILE = "unbuildable.yaml"
BUILD_RESULTS_FILE = "build-results.yaml"
REPLACEMENTS_FILE = "replacements.yaml"
FINAL_MAPPING_FILE = "final-mapping.yaml"
RELEASE_COMMAND_FILE = "release-command.yaml"

# records that made it through the locator; failed ones only fail while building
_BUILDABLE_STATUSES = (ComponentStatus.BUILDABLE, ComponentStatus.SUCCEEDED, ComponentStatus.FAILED)


class TrackingRepository:
    """Persists the record set and the collections derived from it, one YAML file per concept.

    Every collection is regenerated whole from the records, so writing the same
    records twice yields identical files.
    """

    def __init__(self, state_dir: str):
        self.state_dir: str = state_dir
        self.yaml: YAML = get_yaml_instance()

    def path(self, file_name: str) -> str:
        return os.path.join(self.state_dir, file_name)

    def save_manifest(self, manifest: dict) -> None:
        self._write(MANIFEST_FILE, {str(k): str(v) for k, v in manifest.items()})

    def load_manifest(self) -> dict[str, str]:
        data = self._read(MANIFEST_FILE)
        return dict(data) if data else {}

    def find_all(self) -> list[ComponentRecord]:
        data = self._read(RECORDS_FILE)
        if not data:
            return []
        try:
            return RecordsFile(**data).records
        except Exception as e:
            raise ValueError(f"Invalid {RECORDS_FILE}: {e}") from e

    def save(self, records: list[ComponentRecord]) -> None:
        self._write(RECORDS_FILE, {"records": [r.to_dict() for r in records]})
        self._write(METADATA_FILE, {
            r.name: {
                "vcs_url": r.vcs_url,
                "vcs_ref": r.vcs_ref,
                "resolved_ref": r.resolved_ref,
                "revision": r.revision,
                "dockerfile_path": r.dockerfile_path,
            }
            for r in records if r.vcs_url
        })
        self._write(BUILDABLE_FILE, [r.name for r in records if r.status in _BUILDABLE_STATUSES])
        self._write(UNBUILDABLE_FILE, {
            r.name: self._drop_empty({
                "reason": r.failure_reason.value,
                "image": r.original_digest,
                "vcs_url": r.vcs_url,
                "vcs_ref": r.resolved_ref,
            })
            for r in records if r.status == ComponentStatus.UNBUILDABLE
        })
        self._write(BUILD_RESULTS_FILE, {
            r.name: {"outcome": "succeeded", "image": r.replacement_image} if r.succeeded
            else {"outcome": "failed", "reason": r.failure_reason.value}
            for r in records if r.status in (ComponentStatus.SUCCEEDED, ComponentStatus.FAILED)
        })
        self._write(REPLACEMENTS_FILE, {r.name: r.replacement_image for r in records if r.succeeded})

    def save_final_mapping(self, mapping: dict[str, str]) -> None:
        self._write(FINAL_MAPPING_FILE, dict(mapping))

    def save_release_command(self, command: ReleaseCommand) -> None:
        self._write(RELEASE_COMMAND_FILE, command.to_dict())

    def _read(self, file_name: str):
        path = self.path(file_name)
        if not os.path.isfile(path):
            return None
        return load_yaml_file(self.yaml, path)

    def _write(self, file_name: str, data) -> None:
        try:
            os.makedirs(self.state_dir, exist_ok=True)
            dump_yaml_file(self.yaml, data, self.path(file_name))
        except OSError as e:
            raise Exception(f"Error writing {file_name}: {e}") from e

    @staticmethod
    def _drop_empty(values: dict) -> dict:
        return {k: v for k, v in values.items() if v is not None}
