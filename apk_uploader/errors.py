"""Exception classes raised by the uploader.

Everything derives from UploaderError so the upload orchestrator can log
one failure kind without knowing which step produced it.
"""

from typing import Any, Dict, Optional


class UploaderError(Exception):
    """Base exception for all uploader errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CredentialBundleError(UploaderError):
    """The OAuth client descriptor could not be downloaded or parsed."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        details: Dict[str, Any] = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code


class AuthenticationError(UploaderError):
    """The interactive consent flow failed or returned no usable token."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, {"requires_reauth": True})


class DriveError(UploaderError):
    """A Drive API call failed.

    Carries the HTTP status reported by the client library when one is
    available.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        details: Dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code
