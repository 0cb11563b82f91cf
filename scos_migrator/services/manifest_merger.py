from collections.abc import Iterable, Mapping

from scos_migrator.models import RELEASE_ROOT_COMPONENT, ComponentRecord, MergeResult
from scos_migrator.services.manifest_loader import manifest_reference


def merge_manifest(
    records: Iterable[ComponentRecord],
    manifest: Mapping[str, str],
    release_root: str = RELEASE_ROOT_COMPONENT,
) -> MergeResult:
    """Pick the rebuilt image where one exists and the original reference otherwise.

    The result has exactly the manifest's keys, in manifest order.
    """
    replacements = {r.name: r.replacement_image for r in records if r.succeeded}
    final_mapping = {
        name: replacements.get(name, manifest_reference(original))
        for name, original in manifest.items()
    }
    override = replacements.get(release_root) if release_root in manifest else None
    return MergeResult(final_mapping=final_mapping, override_base_image=override)
