import logging

from scos_migrator.clients.command_runner import run_command

logger = logging.getLogger(__name__)


class PodmanClient:
    def __init__(self, build_timeout: int = 3600, push_timeout: int = 600):
        self.build_timeout: int = build_timeout
        self.push_timeout: int = push_timeout

    def build(self, recipe: str, context_dir: str, tags: list[str], build_args: dict[str, str]) -> None:
        cmd = ["podman", "build", "-f", recipe]
        for key, value in build_args.items():
            cmd += ["--build-arg", f"{key}={value}"]
        for tag in tags:
            cmd += ["-t", tag]
        cmd.append(context_dir)
        run_command(cmd, timeout=self.build_timeout)
        logger.info(f"Built {', '.join(tags)}")

    def push(self, tag: str) -> None:
        run_command(["podman", "push", tag], timeout=self.push_timeout)
        logger.info(f"Pushed {tag}")
