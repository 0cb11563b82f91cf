import logging

from scos_migrator.clients.command_runner import run_command
from scos_migrator.models import ReleaseCommand

logger = logging.getLogger(__name__)


class OcClient:
    def __init__(self, timeout: int = 600):
        self.timeout: int = timeout

    def new_release(self, command: ReleaseCommand) -> None:
        run_command(command.argv(), timeout=self.timeout)
        logger.info(f"Release {command.to_image} created from {command.from_release}")
