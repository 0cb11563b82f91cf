from collections import Counter
from collections.abc import Iterable

from scos_migrator.models import ComponentRecord, ComponentStatus


def outcome_key(record: ComponentRecord) -> str:
    if record.failure_reason:
        return f"{record.status.value}:{record.failure_reason.value}"
    return record.status.value


def count_outcomes(records: Iterable[ComponentRecord]) -> Counter:
    return Counter(outcome_key(r) for r in records)


def pre_build_summary(records: list[ComponentRecord]) -> list[str]:
    counts = count_outcomes(records)
    lines = [f"{len(records)} components in manifest"]
    lines += [f"  {key}: {counts[key]}" for key in sorted(counts)]
    return lines


def final_summary(records: list[ComponentRecord]) -> list[str]:
    succeeded = [r for r in records if r.status == ComponentStatus.SUCCEEDED]
    failed = [r for r in records if r.status == ComponentStatus.FAILED]
    fallbacks = [r for r in records if r.status != ComponentStatus.SUCCEEDED]
    lines = [
        f"Rebuilt: {len(succeeded)}",
        f"Build failures: {len(failed)}",
        f"Falling back to original image: {len(fallbacks)}",
    ]
    lines += [f"  {r.name}: {r.failure_reason.value if r.failure_reason else r.status.value}" for r in fallbacks]
    return lines
