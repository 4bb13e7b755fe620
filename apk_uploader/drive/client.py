import asyncio
import logging
from typing import IO, Optional
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload
from googleapiclient.errors import HttpError
from ..errors import DriveError
from ..models import UploadResult

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
UPLOAD_FIELDS = "id, name, webContentLink, webViewLink"


def _quote(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query string"""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class DriveClient:
    """Folder and file operations on Google Drive v3"""

    def __init__(self, service):
        self.service = service

    @classmethod
    def from_credentials(cls, credentials: Credentials) -> "DriveClient":
        return cls(build("drive", "v3", credentials=credentials, cache_discovery=False))

    async def _execute(self, request, action: str) -> dict:
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            logger.error(f"Error {action}: {e}", exc_info=True)
            status = getattr(e.resp, "status", None)
            raise DriveError(f"Drive API error {action}: {e}", status_code=int(status) if status else None) from e

    async def find_or_create_folder(self, name: str) -> str:
        """Return the id of the folder called name, creating it if none exists.

        The first match wins when several non-trashed folders share the name.
        """
        query = f"name='{_quote(name)}' and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"
        results = await self._execute(
            self.service.files().list(q=query, spaces="drive", fields="files(id, name)"),
            "listing folders",
        )

        folders = results.get("files", [])
        if folders:
            if len(folders) > 1:
                logger.warning(
                    f"Found {len(folders)} folders named '{name}', using {folders[0]['id']}"
                )
            return folders[0]["id"]

        folder_metadata = {
            "name": name,
            "mimeType": FOLDER_MIME_TYPE,
        }
        folder = await self._execute(
            self.service.files().create(body=folder_metadata, fields="id"),
            "creating folder",
        )
        folder_id = folder.get("id")
        logger.info(f"Created folder '{name}' with ID: {folder_id}")
        return folder_id

    async def find_file_in_folder(self, folder_id: str, file_name: str) -> Optional[str]:
        query = f"'{_quote(folder_id)}' in parents and name='{_quote(file_name)}' and trashed=false"
        results = await self._execute(
            self.service.files().list(q=query, spaces="drive", fields="files(id, name)"),
            "listing files",
        )

        files = results.get("files", [])
        if files:
            return files[0]["id"]
        return None

    async def upload_or_replace(
        self,
        folder_id: str,
        file_name: str,
        mime_type: str,
        stream: IO[bytes],
    ) -> UploadResult:
        """Replace the content of file_name in the folder, or create it there.

        The stream is sent once as a single non-resumable request body.
        """
        existing_file_id = await self.find_file_in_folder(folder_id, file_name)
        media = MediaIoBaseUpload(stream, mimetype=mime_type, resumable=False)

        if existing_file_id:
            file = await self._execute(
                self.service.files().update(
                    fileId=existing_file_id,
                    media_body=media,
                    fields=UPLOAD_FIELDS,
                ),
                "updating file",
            )
            logger.info(f"File '{file_name}' updated with ID: {existing_file_id}")
        else:
            file_metadata = {
                "name": file_name,
                "mimeType": mime_type,
                "parents": [folder_id],
            }
            file = await self._execute(
                self.service.files().create(
                    body=file_metadata,
                    media_body=media,
                    supportsAllDrives=True,
                    fields=UPLOAD_FIELDS,
                ),
                "creating file",
            )
            logger.info(f"File '{file_name}' created with ID: {file.get('id')}")

        return UploadResult(
            id=file.get("id") or existing_file_id,
            name=file.get("name", file_name),
            web_content_link=file.get("webContentLink"),
            web_view_link=file.get("webViewLink"),
            created=existing_file_id is None,
        )
