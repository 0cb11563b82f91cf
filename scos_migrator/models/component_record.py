from dataclasses import replace
from enum import Enum

from pydantic.dataclasses import dataclass


class ComponentStatus(str, Enum):
    PENDING = "pending"
    METADATA_RESOLVED = "metadata_resolved"
    FETCHED = "fetched"
    BUILDABLE = "buildable"
    SUCCEEDED = "succeeded"
    UNBUILDABLE = "unbuildable"
    FAILED = "failed"

    @property
    def rank(self) -> int:
        return _STATUS_RANKS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (ComponentStatus.SUCCEEDED, ComponentStatus.UNBUILDABLE, ComponentStatus.FAILED)


# terminal states share the highest rank, so none can follow another
_STATUS_RANKS = {
    ComponentStatus.PENDING: 0,
    ComponentStatus.METADATA_RESOLVED: 1,
    ComponentStatus.FETCHED: 2,
    ComponentStatus.BUILDABLE: 3,
    ComponentStatus.SUCCEEDED: 4,
    ComponentStatus.UNBUILDABLE: 4,
    ComponentStatus.FAILED: 4,
}


class FailureReason(str, Enum):
    INVALID_REFERENCE = "invalid_reference"
    INSPECTION_FAILED = "inspection_failed"
    NO_SOURCE_URL = "no_source_url"
    CLONE_FAILED = "clone_failed"
    NO_DOCKERFILE = "no_dockerfile"
    BUILD_FAILED = "build_failed"
    PUSH_FAILED = "push_failed"
    NO_DIGEST = "no_digest"

    @property
    def status(self) -> ComponentStatus:
        """Terminal status a record lands in when failing for this reason."""
        if self in (FailureReason.BUILD_FAILED, FailureReason.PUSH_FAILED, FailureReason.NO_DIGEST):
            return ComponentStatus.FAILED
        return ComponentStatus.UNBUILDABLE


@dataclass(frozen=True)
class ComponentRecord:
    name: str
    original_digest: str
    status: ComponentStatus = ComponentStatus.PENDING
    vcs_url: str | None = None
    vcs_ref: str | None = None
    resolved_ref: str | None = None
    revision: str | None = None
    dockerfile_path: str | None = None
    replacement_image: str | None = None
    failure_reason: FailureReason | None = None
    rewritten_lines: int = 0

    def __post_init__(self):
        if not self.name:
            raise ValueError("Component name must not be empty")
        if self.status == ComponentStatus.SUCCEEDED:
            if not self.replacement_image or self.failure_reason is not None:
                raise ValueError(f"Succeeded component {self.name} needs a replacement image and no failure reason")
        elif self.status.is_terminal:
            if self.failure_reason is None or self.replacement_image is not None:
                raise ValueError(f"Component {self.name} in {self.status.value} needs a failure reason and no replacement image")
            if self.failure_reason.status != self.status:
                raise ValueError(f"Failure reason {self.failure_reason.value} does not belong to status {self.status.value}")
        elif self.failure_reason is not None or self.replacement_image is not None:
            raise ValueError(f"Component {self.name} in {self.status.value} cannot carry an outcome")

    def advance(self, status: ComponentStatus, **changes) -> "ComponentRecord":
        """Return a copy moved forward to ``status``; moving backwards or out of a terminal state is rejected."""
        if self.status.is_terminal:
            raise ValueError(f"Component {self.name} is already terminal ({self.status.value})")
        if status.rank <= self.status.rank:
            raise ValueError(f"Component {self.name} cannot move from {self.status.value} to {status.value}")
        return replace(self, status=status, **changes)

    def fail(self, reason: FailureReason, **changes) -> "ComponentRecord":
        return self.advance(reason.status, failure_reason=reason, **changes)

    @property
    def succeeded(self) -> bool:
        return self.status == ComponentStatus.SUCCEEDED

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "original_digest": self.original_digest,
            "status": self.status.value,
            "vcs_url": self.vcs_url,
            "vcs_ref": self.vcs_ref,
            "resolved_ref": self.resolved_ref,
            "revision": self.revision,
            "dockerfile_path": self.dockerfile_path,
            "replacement_image": self.replacement_image,
            "failure_reason": self.failure_reason.value if self.failure_reason else None,
            "rewritten_lines": self.rewritten_lines,
        }
