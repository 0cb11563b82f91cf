import logging
import os
import shutil

from scos_migrator.clients.command_runner import CommandError
from scos_migrator.clients.git_client import GitClient
from scos_migrator.models import ComponentRecord, ComponentStatus, FailureReason
from scos_migrator.utils.logging import setup_logger

FALLBACK_BRANCHES = {"master": "main"}


class SourceFetcher:
    def __init__(self, git: GitClient, sources_dir: str):
        self.git: GitClient = git
        self.sources_dir: str = sources_dir
        self.logger: logging.Logger = setup_logger("SourceFetcher")

    def source_dir(self, record: ComponentRecord) -> str:
        root = os.path.abspath(self.sources_dir)
        dest = os.path.abspath(os.path.join(root, record.name))
        # the clone target is removed before cloning, it must stay inside sources_dir
        if os.path.dirname(dest) != root:
            raise ValueError(f"Component name {record.name!r} does not map to a directory under {root}")
        return dest

    def fetch(self, record: ComponentRecord) -> ComponentRecord:
        if record.status != ComponentStatus.METADATA_RESOLVED:
            raise ValueError(f"Cannot fetch {record.name} in status {record.status.value}")
        dest = self.source_dir(record)
        ref = record.resolved_ref or record.vcs_ref

        if not self._clone(record.vcs_url, ref, dest):
            fallback = FALLBACK_BRANCHES.get(ref)
            if not fallback:
                return record.fail(FailureReason.CLONE_FAILED)
            self.logger.info(f"Retrying {record.name} with branch {fallback}")
            if not self._clone(record.vcs_url, fallback, dest):
                return record.fail(FailureReason.CLONE_FAILED)
            ref = fallback

        try:
            revision = self.git.revision(dest)
        except CommandError as e:
            self.logger.warning(f"Unable to resolve revision of {record.name}: {e}")
            return record.fail(FailureReason.CLONE_FAILED, resolved_ref=ref)
        if not revision:
            return record.fail(FailureReason.CLONE_FAILED, resolved_ref=ref)

        self.logger.info(f"Fetched {record.name} at {ref} ({revision})")
        return record.advance(ComponentStatus.FETCHED, resolved_ref=ref, revision=revision)

    def _clone(self, url: str, ref: str, dest: str) -> bool:
        if os.path.exists(dest):
            shutil.rmtree(dest)
        os.makedirs(self.sources_dir, exist_ok=True)
        try:
            self.git.clone(url, ref, dest)
            return True
        except CommandError as e:
            self.logger.warning(f"Clone of {url}@{ref} failed: {e}")
            return False
