import logging

from scos_migrator.clients.command_runner import run_command

logger = logging.getLogger(__name__)


class GitClient:
    def __init__(self, timeout: int = 600):
        self.timeout: int = timeout

    def clone(self, url: str, ref: str, dest_dir: str) -> None:
        cmd = ["git", "clone", "--depth", "1", "--branch", ref, url, dest_dir]
        run_command(cmd, timeout=self.timeout, capture_output=True)
        logger.info(f"Cloned {url}@{ref} into {dest_dir}")

    def revision(self, repo_dir: str) -> str:
        output = run_command(["git", "-C", repo_dir, "rev-parse", "HEAD"], timeout=self.timeout, capture_output=True)
        return output.strip()
