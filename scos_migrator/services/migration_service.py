import json
import logging
from typing import Callable, override

from scos_migrator.clients.git_client import GitClient
from scos_migrator.clients.image_registry_client import ImageRegistryClient
from scos_migrator.clients.oc_client import OcClient
from scos_migrator.clients.podman_client import PodmanClient
from scos_migrator.errors import MigrationAborted, NoSuccessfulBuilds
from scos_migrator.models import ComponentRecord, ComponentStatus, ReleaseCommand, RunContext
from scos_migrator.repositories import ManifestRepository, TrackingRepository
from scos_migrator.services.build_executor import BuildExecutor
from scos_migrator.services.dockerfile_locator import DockerfileLocator
from scos_migrator.services.manifest_loader import load_records
from scos_migrator.services.manifest_merger import merge_manifest
from scos_migrator.services.metadata_resolver import MetadataResolver
from scos_migrator.services.release_command_builder import build_release_command
from scos_migrator.services.service import Service
from scos_migrator.services.source_fetcher import SourceFetcher
from scos_migrator.services.summary import final_summary, pre_build_summary
from scos_migrator.utils.confirm import AutoConfirmer, Confirmer, InteractiveConfirmer
from scos_migrator.utils.logging import setup_logger


class MigrationService(Service):
    def __init__(self, manifest_file: str, context: RunContext, confirmer: Confirmer | None = None):
        self.context: RunContext = context
        self.manifest_repo: ManifestRepository = ManifestRepository(manifest_file)
        self.tracking: TrackingRepository = TrackingRepository(context.state_dir)
        self.registry: ImageRegistryClient = ImageRegistryClient(timeout=context.command_timeout)
        self.git: GitClient = GitClient(timeout=context.command_timeout)
        self.podman: PodmanClient = PodmanClient(build_timeout=context.build_timeout, push_timeout=context.command_timeout)
        self.oc: OcClient = OcClient(timeout=context.command_timeout)
        self.resolver: MetadataResolver = MetadataResolver(self.registry)
        self.fetcher: SourceFetcher = SourceFetcher(self.git, context.sources_dir)
        self.locator: DockerfileLocator = DockerfileLocator(context.sources_dir)
        self.builder: BuildExecutor = BuildExecutor(self.podman, self.registry, context)
        self.confirmer: Confirmer = confirmer or (AutoConfirmer() if context.auto_confirm else InteractiveConfirmer())
        self.logger: logging.Logger = setup_logger("MigrationService")

    def preparation_stages(self) -> dict[ComponentStatus, Callable[[ComponentRecord], ComponentRecord]]:
        return {
            ComponentStatus.PENDING: self.resolver.resolve,
            ComponentStatus.METADATA_RESOLVED: self.fetcher.fetch,
            ComponentStatus.FETCHED: self.locator.locate,
        }

    @override
    def run(self) -> ReleaseCommand:
        manifest = self.manifest_repo.load()
        records = self.initial_records(manifest)
        self.tracking.save_manifest(manifest)
        self.tracking.save(records)

        records = self.prepare(records)
        for line in pre_build_summary(records):
            self.logger.info(line)

        buildable = [r for r in records if r.status == ComponentStatus.BUILDABLE]
        if buildable and not self.confirmer.confirm(f"Build and push {len(buildable)} components to {self.context.registry}?"):
            raise MigrationAborted("Build phase declined by operator")
        records = self.build(records)
        for line in final_summary(records):
            self.logger.info(line)

        if not any(r.succeeded for r in records):
            raise NoSuccessfulBuilds(len(records))

        merge = merge_manifest(records, manifest, self.context.release_root_component)
        self.tracking.save_final_mapping(merge.final_mapping)
        command = build_release_command(merge, self.context.base_release, self.context.output_image)
        self.tracking.save_release_command(command)
        if merge.override_base_image:
            self.logger.info(f"{self.context.release_root_component} was rebuilt, using it as release base image")

        self.compose(command)
        return command

    def initial_records(self, manifest: dict) -> list[ComponentRecord]:
        records = load_records(manifest)
        if not self.context.resume:
            return records
        stored = {r.name: r for r in self.tracking.find_all()}
        # the manifest decides the component set, stored records only carry progress
        resumed = [self._resumed(stored.get(r.name), r) for r in records]
        self.logger.info(f"Resuming {sum(1 for new, r in zip(records, resumed) if r is not new)} components from {self.tracking.state_dir}")
        return resumed

    def _resumed(self, stored: ComponentRecord | None, record: ComponentRecord) -> ComponentRecord:
        if stored is None:
            return record
        if stored.original_digest != record.original_digest:
            self.logger.info(f"{record.name} changed from {stored.original_digest} to {record.original_digest}, starting over")
            return record
        return stored

    def prepare(self, records: list[ComponentRecord]) -> list[ComponentRecord]:
        stages = self.preparation_stages()
        for i, record in enumerate(records):
            while record.status in stages:
                record = stages[record.status](record)
            records[i] = record
            self.tracking.save(records)
        return records

    def build(self, records: list[ComponentRecord]) -> list[ComponentRecord]:
        for i, record in enumerate(records):
            if record.status != ComponentStatus.BUILDABLE:
                continue
            record = self.builder.build(record)
            records[i] = record
            self.tracking.save(records)
            if record.status == ComponentStatus.FAILED and not self.context.continue_on_failure:
                if not self.confirmer.confirm(f"{record.name} failed ({record.failure_reason.value}). Continue?"):
                    raise MigrationAborted(f"Stopped after {record.name} failed")
        return records

    def compose(self, command: ReleaseCommand) -> None:
        if not self.context.execute_release:
            self.logger.info("Dry run mode. Release has not been created, command:")
            print(json.dumps(command.argv()))
            return
        if not self.confirmer.confirm(f"Create release {command.to_image}?"):
            self.logger.info(f"Release creation declined, command saved in {self.tracking.state_dir}")
            return
        self.oc.new_release(command)
