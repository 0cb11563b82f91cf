from dataclasses import field

from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class ImageInfo:
    digest: str | None
    labels: dict[str, str] = field(default_factory=dict)
