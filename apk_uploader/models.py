from pydantic import BaseModel
from typing import Any, Dict, Optional


class AuthorizationRecord(BaseModel):
    """Token material in the format google-auth reads back with from_authorized_user_info"""

    type: str = "authorized_user"
    client_id: str
    client_secret: str
    refresh_token: str


class CredentialBundle(BaseModel):
    """OAuth client descriptor as downloaded from the Cloud Console"""

    installed: Optional[Dict[str, Any]] = None
    web: Optional[Dict[str, Any]] = None

    def client_config(self) -> Dict[str, Any]:
        key = self.installed or self.web
        if not key:
            raise ValueError("Credential bundle has neither an 'installed' nor a 'web' client")
        return key

    @property
    def client_id(self) -> str:
        return self.client_config()["client_id"]

    @property
    def client_secret(self) -> str:
        return self.client_config()["client_secret"]


class UploadResult(BaseModel):
    id: str
    name: Optional[str] = None
    web_content_link: Optional[str] = None
    web_view_link: Optional[str] = None
    created: bool = False
