import logging
import os
from pathlib import Path

from scos_migrator.models import ComponentRecord, ComponentStatus, FailureReason
from scos_migrator.utils.dockerfile_transform import transform_dockerfile
from scos_migrator.utils.logging import setup_logger

DOCKERFILE_CANDIDATES = (
    "Dockerfile",
    "Dockerfile.rhel",
    "Dockerfile.rhel9",
    "openshift/Dockerfile",
    "build/Dockerfile",
    "images/Dockerfile",
)


def find_dockerfile(source_root: str) -> str | None:
    """Return the recipe path relative to ``source_root``, or None."""
    root = Path(source_root)
    for candidate in DOCKERFILE_CANDIDATES:
        if (root / candidate).is_file():
            return candidate

    found = [
        p for p in root.rglob("Dockerfile*")
        if p.is_file() and ".git" not in p.relative_to(root).parts
    ]
    if not found:
        return None
    mtimes = {p.relative_to(root).as_posix(): p.stat().st_mtime for p in found}
    newest = max(mtimes.values())
    # ties go to the lexicographically smallest path
    return min(path for path, mtime in mtimes.items() if mtime == newest)


class DockerfileLocator:
    def __init__(self, sources_dir: str):
        self.sources_dir: str = sources_dir
        self.logger: logging.Logger = setup_logger("DockerfileLocator")

    def locate(self, record: ComponentRecord) -> ComponentRecord:
        if record.status != ComponentStatus.FETCHED:
            raise ValueError(f"Cannot locate Dockerfile of {record.name} in status {record.status.value}")
        source_root = os.path.join(self.sources_dir, record.name)
        dockerfile = find_dockerfile(source_root)
        if not dockerfile:
            self.logger.warning(f"No Dockerfile found for {record.name}")
            return record.fail(FailureReason.NO_DOCKERFILE)

        rewritten = self.rewrite(os.path.join(source_root, dockerfile))
        if rewritten:
            self.logger.info(f"Rewrote {rewritten} base image line(s) in {record.name}/{dockerfile}")
        else:
            self.logger.info(f"No OCP base image found in {record.name}/{dockerfile}, building it unchanged")
        return record.advance(ComponentStatus.BUILDABLE, dockerfile_path=dockerfile, rewritten_lines=rewritten)

    def rewrite(self, path: str) -> int:
        # newline="" and surrogateescape keep every untouched byte as it was
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            content = f.read()
        result = transform_dockerfile(content)
        if result.changed:
            with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(result.content)
        return result.rewritten_lines
