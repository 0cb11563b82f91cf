from .component_record import ComponentRecord, ComponentStatus, FailureReason
from .image_info import ImageInfo
from .release_command import MergeResult, ReleaseCommand
from .run_context import RELEASE_ROOT_COMPONENT, RunContext
from .wrappers import RecordsFile

__all__ = [
    "ComponentRecord",
    "ComponentStatus",
    "FailureReason",
    "ImageInfo",
    "MergeResult",
    "ReleaseCommand",
    "RELEASE_ROOT_COMPONENT",
    "RunContext",
    "RecordsFile",
]
