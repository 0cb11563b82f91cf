import logging

from scos_migrator.clients.image_registry_client import ImageRegistryClient, RegistryError
from scos_migrator.models import ComponentRecord, ComponentStatus, FailureReason
from scos_migrator.utils.logging import setup_logger

SOURCE_URL_LABELS = (
    "io.openshift.build.source-location",
    "org.opencontainers.image.source",
    "vcs-url",
)
SOURCE_REF_LABELS = (
    "io.openshift.build.commit.ref",
    "org.opencontainers.image.ref.name",
)
DEFAULT_REF = "master"


def first_label(labels: dict[str, str], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = labels.get(key)
        if value and value.strip():
            return value.strip()
    return None


class MetadataResolver:
    def __init__(self, registry: ImageRegistryClient):
        self.registry: ImageRegistryClient = registry
        self.logger: logging.Logger = setup_logger("MetadataResolver")

    def resolve(self, record: ComponentRecord) -> ComponentRecord:
        if record.status != ComponentStatus.PENDING:
            raise ValueError(f"Cannot resolve metadata of {record.name} in status {record.status.value}")
        try:
            info = self.registry.inspect(record.original_digest)
        except RegistryError as e:
            self.logger.warning(f"Inspection of {record.name} failed: {e}")
            return record.fail(FailureReason.INSPECTION_FAILED)

        url = first_label(info.labels, SOURCE_URL_LABELS)
        if not url:
            self.logger.warning(f"No source location found in labels of {record.name}")
            return record.fail(FailureReason.NO_SOURCE_URL)

        ref = first_label(info.labels, SOURCE_REF_LABELS) or DEFAULT_REF
        self.logger.info(f"Resolved {record.name} to {url}@{ref}")
        return record.advance(ComponentStatus.METADATA_RESOLVED, vcs_url=url, vcs_ref=ref, resolved_ref=ref)
