from pydantic.dataclasses import dataclass

from scos_migrator.models.component_record import ComponentRecord


@dataclass(frozen=True)
class RecordsFile:
    records: list[ComponentRecord]
