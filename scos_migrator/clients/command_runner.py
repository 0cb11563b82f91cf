import logging
import subprocess

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    def __init__(self, cmd: list[str], message: str):
        super().__init__(f"{cmd[0]} failed: {message}")
        self.cmd = cmd


def run_command(cmd: list[str], timeout: int, capture_output: bool = False) -> str:
    """Run ``cmd`` once and return its stdout (empty unless captured).

    A non-zero exit code or an expired timeout raises ``CommandError``.
    """
    logger.debug(f"Running {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, check=False, capture_output=capture_output, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        logger.error(f"{cmd[0]} timed out after {timeout}s")
        raise CommandError(cmd, f"timed out after {timeout}s") from e
    except OSError as e:
        logger.error(f"Unable to run {cmd[0]}: {e}")
        raise CommandError(cmd, str(e)) from e
    if result.returncode != 0:
        stderr = (result.stderr or "").strip() if capture_output else ""
        logger.error(f"{cmd[0]} failed with code {result.returncode}")
        raise CommandError(cmd, f"exit code {result.returncode}{': ' + stderr if stderr else ''}")
    return result.stdout or ""
