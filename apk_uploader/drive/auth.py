import asyncio
import logging
from typing import Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from ..config import GoogleDriveConfig
from ..errors import AuthenticationError
from ..models import AuthorizationRecord, CredentialBundle
from .credentials import CredentialStore

logger = logging.getLogger(__name__)


class Authenticator:
    """Load or request authorization to call the Drive API"""

    def __init__(self, config: GoogleDriveConfig, store: CredentialStore):
        self.config = config
        self.store = store

    async def authorize(self) -> Credentials:
        """Return credentials from the saved record, running the consent flow if there is none.

        A saved record is trusted as-is: an expired or revoked refresh token
        only shows up on the first Drive call.
        """
        record = self.store.load()
        if record:
            logger.info("Using saved Google Drive authorization")
            return Credentials.from_authorized_user_info(record.model_dump(), self.config.scopes)

        bundle = await self.store.fetch_bundle()
        credentials = await self._run_consent_flow(bundle)

        if credentials:
            self.store.save(self._to_record(bundle, credentials))
        return credentials

    async def _run_consent_flow(self, bundle: CredentialBundle) -> Optional[Credentials]:
        logger.info("Starting OAuth2 flow for Google Drive...")
        try:
            flow = InstalledAppFlow.from_client_config(bundle.model_dump(exclude_none=True), self.config.scopes)
            return await asyncio.to_thread(flow.run_local_server, port=0)
        except Exception as e:
            logger.error(f"OAuth2 consent flow failed: {e}")
            raise AuthenticationError(f"OAuth2 consent flow failed: {e}") from e

    @staticmethod
    def _to_record(bundle: CredentialBundle, credentials: Credentials) -> AuthorizationRecord:
        if not credentials.refresh_token:
            raise AuthenticationError("Consent flow returned no refresh token")
        return AuthorizationRecord(
            type="authorized_user",
            client_id=bundle.client_id,
            client_secret=bundle.client_secret,
            refresh_token=credentials.refresh_token,
        )
