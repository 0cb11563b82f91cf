#!/usr/bin/env python3
import argparse
import os
import sys

from scos_migrator.models import RunContext
from scos_migrator.services.migration_service import MigrationService
from scos_migrator.utils.logging import setup_logger

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rebuild release components on SCOS base images")
    parser.add_argument('--manifest', default=os.environ.get("MANIFEST_FILE", f"{ROOT_DIR}/manifest.yaml"),
                        help='Component to image digest mapping (YAML or JSON)')
    parser.add_argument('--work-dir', default=os.environ.get("WORK_DIR", f"{ROOT_DIR}/_work"),
                        help='Directory holding cloned sources and tracking state')
    parser.add_argument('--registry', default=os.environ.get("TARGET_REGISTRY"),
                        help='Registry namespace rebuilt images are pushed to')
    parser.add_argument('--base-release', default=os.environ.get("BASE_RELEASE"),
                        help='Release image the new release is derived from')
    parser.add_argument('--output-image', default=os.environ.get("OUTPUT_IMAGE"),
                        help='Reference of the release image to create')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--dry-run', action='store_true',
                      help='Run in dry-run mode, only print the release command (default)')
    mode.add_argument('--execute', action='store_true',
                      help='Run oc adm release new instead of only printing the command')
    parser.add_argument('--yes', action='store_true', help='Answer yes to every confirmation')
    parser.add_argument('--stop-on-failure', action='store_true',
                        help='Ask whether to continue after each failed build')
    parser.add_argument('--resume', action='store_true', help='Continue from the records saved in the work dir')
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger("ReleaseMigration")

    try:
        context = RunContext(
            work_dir=args.work_dir,
            registry=args.registry or "",
            base_release=args.base_release or "",
            output_image=args.output_image or "",
            continue_on_failure=not args.stop_on_failure,
            auto_confirm=args.yes,
            execute_release=args.execute,
            resume=args.resume,
            command_timeout=int(os.environ.get("COMMAND_TIMEOUT", "600")),
            build_timeout=int(os.environ.get("BUILD_TIMEOUT", "3600")),
        )
        logger.info(f"Starting release migration with manifest: {args.manifest}")
        service = MigrationService(args.manifest, context)
        service.run()
        logger.info("Release migration completed successfully")
        return 0
    except Exception as e:
        logger.error(f"Release migration failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
