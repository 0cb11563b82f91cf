import os
from dataclasses import field

from pydantic.dataclasses import dataclass

RELEASE_ROOT_COMPONENT = "cluster-version-operator"


@dataclass(frozen=True)
class RunContext:
    work_dir: str
    registry: str
    base_release: str
    output_image: str
    release_root_component: str = RELEASE_ROOT_COMPONENT
    build_args: dict[str, str] = field(default_factory=lambda: {"TAGS": "scos"})
    continue_on_failure: bool = True
    auto_confirm: bool = False
    execute_release: bool = False
    resume: bool = False
    command_timeout: int = 600
    build_timeout: int = 3600

    def __post_init__(self):
        for name in ("work_dir", "registry", "base_release", "output_image"):
            if not getattr(self, name):
                raise ValueError(f"{name} is mandatory")
        if self.command_timeout <= 0 or self.build_timeout <= 0:
            raise ValueError("Timeouts must be positive")
        # avoid double slashes in composed image references
        object.__setattr__(self, "registry", self.registry.rstrip("/"))

    @property
    def sources_dir(self) -> str:
        return os.path.join(self.work_dir, "sources")

    @property
    def state_dir(self) -> str:
        return os.path.join(self.work_dir, "state")
