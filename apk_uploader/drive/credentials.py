import json
import logging
from pathlib import Path
from typing import Optional

import httpx

from ..config import GoogleDriveConfig
from ..errors import CredentialBundleError
from ..models import AuthorizationRecord, CredentialBundle

logger = logging.getLogger(__name__)


class CredentialStore:
    """Local token record plus the OAuth client bundle it was issued for"""

    def __init__(self, config: GoogleDriveConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.token_path = Path(config.token_file)
        self.credentials_path = Path(config.credentials_file)
        self._client = client

    def load(self) -> Optional[AuthorizationRecord]:
        """Read the saved authorization record.

        A missing file and a file that does not parse are both reported as
        no credentials.
        """
        try:
            with open(self.token_path, "r") as f:
                data = json.load(f)
            return AuthorizationRecord.model_validate(data)
        except (OSError, ValueError) as e:
            logger.debug(f"No usable authorization record at {self.token_path}: {e}")
            return None

    def save(self, record: AuthorizationRecord):
        """Overwrite the token file with the record (stored unencrypted)"""
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as f:
            json.dump(record.model_dump(), f)
        logger.info(f"Authorization record saved to {self.token_path}")

    async def fetch_bundle(self) -> CredentialBundle:
        """Download the OAuth client bundle and write it next to the token file"""
        url = self.config.credentials_url
        client = self._client or httpx.AsyncClient(
            timeout=self.config.download_timeout, follow_redirects=True
        )
        try:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
            bundle = CredentialBundle.model_validate(data)
            bundle.client_config()
        except httpx.HTTPStatusError as e:
            logger.error(f"Error downloading credentials: {e}")
            raise CredentialBundleError(
                f"Credential download failed with status {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Error downloading credentials: {e}")
            raise CredentialBundleError(f"Network error downloading credentials: {e}", url=url) from e
        except ValueError as e:
            logger.error(f"Downloaded credentials are not a valid client bundle: {e}")
            raise CredentialBundleError("Downloaded credentials are not a valid client bundle", url=url) from e
        finally:
            # Close client if we created it
            if not self._client:
                await client.aclose()

        self.credentials_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.credentials_path, "w") as f:
            json.dump(data, f)
        logger.info("Credentials downloaded successfully.")
        return bundle
