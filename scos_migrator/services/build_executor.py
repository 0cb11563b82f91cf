import logging
import os

from scos_migrator.clients.command_runner import CommandError
from scos_migrator.clients.image_registry_client import ImageRegistryClient
from scos_migrator.clients.podman_client import PodmanClient
from scos_migrator.models import ComponentRecord, ComponentStatus, FailureReason, RunContext
from scos_migrator.utils.logging import setup_logger


class BuildExecutor:
    def __init__(self, podman: PodmanClient, registry: ImageRegistryClient, context: RunContext):
        self.podman: PodmanClient = podman
        self.registry: ImageRegistryClient = registry
        self.context: RunContext = context
        self.logger: logging.Logger = setup_logger("BuildExecutor")

    def image_name(self, record: ComponentRecord) -> str:
        return f"{self.context.registry}/{record.name}"

    def tags(self, record: ComponentRecord) -> list[str]:
        image = self.image_name(record)
        return [f"{image}:{record.revision}", f"{image}:latest"]

    def build(self, record: ComponentRecord) -> ComponentRecord:
        if record.status != ComponentStatus.BUILDABLE:
            raise ValueError(f"Cannot build {record.name} in status {record.status.value}")
        recipe = os.path.join(self.context.sources_dir, record.name, record.dockerfile_path)
        tags = self.tags(record)

        try:
            self.podman.build(recipe, os.path.dirname(recipe), tags, self.context.build_args)
        except CommandError as e:
            self.logger.error(f"Build of {record.name} failed: {e}")
            return record.fail(FailureReason.BUILD_FAILED)

        try:
            for tag in tags:
                self.podman.push(tag)
        except CommandError as e:
            self.logger.error(f"Push of {record.name} failed: {e}")
            return record.fail(FailureReason.PUSH_FAILED)

        digest = self.registry.resolve_digest(tags[0])
        if not digest:
            self.logger.error(f"Unable to resolve digest of {tags[0]}")
            return record.fail(FailureReason.NO_DIGEST)

        replacement = f"{self.image_name(record)}@{digest}"
        self.logger.info(f"Built {record.name} as {replacement}")
        return record.advance(ComponentStatus.SUCCEEDED, replacement_image=replacement)
