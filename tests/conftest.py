"""Shared fixtures for the uploader tests."""

import itertools
import re

import pytest

from apk_uploader.config import BuildConfig, GoogleDriveConfig, Settings, UploadConfig

BUNDLE_URL = "https://example.test/credentials.json"

CLIENT_BUNDLE = {
    "installed": {
        "client_id": "test_client_id.apps.googleusercontent.com",
        "client_secret": "test_client_secret",
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
        "redirect_uris": ["http://localhost"],
    }
}


class FakeRequest:
    """Stands in for a googleapiclient HttpRequest."""

    def __init__(self, action):
        self._action = action

    def execute(self):
        return self._action()


class FakeFiles:
    """In-memory files() resource understanding the queries the client sends."""

    def __init__(self):
        self.items = []
        self.calls = []
        self._ids = itertools.count(1)

    def _matches(self, item, q):
        name = re.search(r"name='((?:[^'\\]|\\.)*)'", q)
        if name and item["name"] != name.group(1).replace("\\'", "'").replace("\\\\", "\\"):
            return False
        parent = re.search(r"'([^']+)' in parents", q)
        if parent and parent.group(1) not in item.get("parents", []):
            return False
        mime = re.search(r"mimeType='([^']+)'", q)
        if mime and item.get("mimeType") != mime.group(1):
            return False
        if "trashed=false" in q and item.get("trashed"):
            return False
        return True

    def list(self, q, spaces=None, fields=None):
        self.calls.append(("list", {"q": q, "spaces": spaces, "fields": fields}))
        return FakeRequest(
            lambda: {"files": [{"id": i["id"], "name": i["name"]} for i in self.items if self._matches(i, q)]}
        )

    def create(self, body, media_body=None, fields=None, supportsAllDrives=None):
        self.calls.append(("create", {"body": body, "media_body": media_body, "fields": fields}))

        def action():
            item = dict(body, id=f"id-{next(self._ids)}")
            self.items.append(item)
            return {
                "id": item["id"],
                "name": item["name"],
                "webContentLink": f"https://drive.google.com/uc?id={item['id']}&export=download",
            }

        return FakeRequest(action)

    def update(self, fileId, media_body=None, fields=None):
        self.calls.append(("update", {"fileId": fileId, "media_body": media_body, "fields": fields}))

        def action():
            item = next(i for i in self.items if i["id"] == fileId)
            return {
                "id": item["id"],
                "name": item["name"],
                "webContentLink": f"https://drive.google.com/uc?id={item['id']}&export=download",
            }

        return FakeRequest(action)

    def calls_named(self, name):
        return [kwargs for call, kwargs in self.calls if call == name]


class FakeDriveService:
    def __init__(self):
        self._files = FakeFiles()

    def files(self):
        return self._files


@pytest.fixture
def drive_service():
    """An empty in-memory Drive."""
    return FakeDriveService()


@pytest.fixture
def drive_config(tmp_path):
    return GoogleDriveConfig(
        credentials_file=str(tmp_path / "config" / "credentials.json"),
        token_file=str(tmp_path / "config" / "token.json"),
        credentials_url=BUNDLE_URL,
    )


@pytest.fixture
def settings(tmp_path, drive_config):
    return Settings(
        google_drive=drive_config,
        upload=UploadConfig(),
        build=BuildConfig(),
    )


@pytest.fixture
def artifact_path(tmp_path):
    """Where the release APK lands for a build run in tmp_path (not created)."""
    return tmp_path / "build" / "app" / "outputs" / "flutter-apk" / "app-release.apk"
