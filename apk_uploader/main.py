import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import Settings
from .drive import Authenticator, CredentialStore, UploadOrchestrator
from .flutter import BuildRunner

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apk-drive-uploader",
        description="Build a Flutter release APK and share it through Google Drive",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "bundle",
        help="Run Flutter and upload APK to Google Drive",
        allow_abbrev=False,
        description="Run 'flutter run --release' and upload the APK once it is built. "
        "Arguments after 'bundle' are passed to flutter unchanged, except -h/--help "
        "which show this message.",
    )
    return parser


async def bundle(settings: Settings, build_args: List[str]) -> int:
    """Run the release build, uploading the APK when it is reported built"""
    store = CredentialStore(settings.google_drive)
    authenticator = Authenticator(settings.google_drive, store)
    orchestrator = UploadOrchestrator(settings.upload, authenticator)
    runner = BuildRunner(settings.build, on_artifact_ready=orchestrator.upload)

    try:
        code = await runner.run(build_args)
    except FileNotFoundError as e:
        logger.error(f"Could not start {settings.build.executable}: {e}")
        return 127

    if settings.build.propagate_exit_code:
        return code
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args, build_args = parser.parse_known_args(argv)

    if args.command != "bundle":
        parser.print_help()
        return 2

    settings = Settings.load()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.logging.level, logging.INFO),
        format=settings.logging.format,
    )

    return asyncio.run(bundle(settings, build_args))


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
