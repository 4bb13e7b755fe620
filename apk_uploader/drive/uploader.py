import logging
from pathlib import Path
from typing import Callable, Optional
from google.oauth2.credentials import Credentials
from apk_uploader.config import UploadConfig
from apk_uploader.drive.auth import Authenticator
from apk_uploader.drive.client import DriveClient
from apk_uploader.models import UploadResult

logger = logging.getLogger(__name__)


class UploadOrchestrator:
    """Authenticates and pushes a finished build artifact to Drive"""

    def __init__(
        self,
        config: UploadConfig,
        authenticator: Authenticator,
        drive_factory: Callable[[Credentials], DriveClient] = DriveClient.from_credentials,
    ):
        self.config = config
        self.authenticator = authenticator
        self.drive_factory = drive_factory

    async def upload(self, artifact_path: Path) -> Optional[UploadResult]:
        """Upload the artifact, replacing any earlier copy in the target folder.

        Failures are logged and reported as None so the running build is
        never interrupted.
        """
        try:
            credentials = await self.authenticator.authorize()

            logger.info("Uploading APK file...")
            drive = self.drive_factory(credentials)
            folder_id = await drive.find_or_create_folder(self.config.folder_name)

            with open(artifact_path, "rb") as stream:
                result = await drive.upload_or_replace(
                    folder_id,
                    self.config.file_name,
                    self.config.mime_type,
                    stream,
                )

        except Exception as e:
            logger.error(f"Error uploading {artifact_path}: {e}", exc_info=True)
            return None

        action = "created" if result.created else "updated"
        logger.info(f"APK file {action} with ID: {result.id}")
        print(f"Web Content Link: {result.web_content_link}")
        return result
