import re
from collections.abc import Mapping

from scos_migrator.errors import InvalidManifest
from scos_migrator.models import ComponentRecord, FailureReason

IMAGE_REFERENCE_PATTERN = re.compile(
    r"^(?P<registry>[A-Za-z0-9.-]+(?::[0-9]+)?)/(?P<path>[a-z0-9._/-]+)@sha256:(?P<digest>[a-f0-9]+)$"
)
COMPONENT_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


def manifest_reference(image: object) -> str:
    return "" if image is None else str(image)


def is_valid_reference(image: object) -> bool:
    return isinstance(image, str) and IMAGE_REFERENCE_PATTERN.match(image) is not None


def load_records(manifest: Mapping) -> list[ComponentRecord]:
    """Create one pending record per manifest entry, in manifest order.

    Entries with a malformed image reference become terminal ``invalid_reference``
    records instead of failing the whole manifest.
    """
    if not isinstance(manifest, Mapping):
        raise InvalidManifest("Manifest must be a mapping of component names to images")
    if not manifest:
        raise InvalidManifest("Manifest is empty")

    records = []
    for name, image in manifest.items():
        # names become directory names and image repositories
        if not isinstance(name, str) or not COMPONENT_NAME_PATTERN.fullmatch(name):
            raise InvalidManifest(f"Invalid component name {name!r}")
        record = ComponentRecord(name=name, original_digest=manifest_reference(image))
        if not is_valid_reference(image):
            record = record.fail(FailureReason.INVALID_REFERENCE)
        records.append(record)
    return records
