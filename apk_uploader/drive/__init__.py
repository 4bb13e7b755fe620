from .credentials import CredentialStore
from .auth import Authenticator
from .client import DriveClient
from .uploader import UploadOrchestrator

__all__ = ["CredentialStore", "Authenticator", "DriveClient", "UploadOrchestrator"]
