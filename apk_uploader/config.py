import os
import yaml
from pathlib import Path
from pydantic import BaseModel, Field, field_validator
from typing import Optional

# Relative token and client file paths resolve against the package directory.
PROGRAM_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = str(PROGRAM_DIR / "config" / "settings.yaml")


class GoogleDriveConfig(BaseModel):
    credentials_file: str = Field(default="config/credentials.json", validate_default=True)
    token_file: str = Field(default="config/token.json", validate_default=True)
    credentials_url: str = "https://drive.google.com/uc?id=1deJqUyasbYFygEUd1Ex90q8HWY9JujQs"
    # If modifying these scopes, delete the token file.
    scopes: list[str] = ["https://www.googleapis.com/auth/drive"]
    download_timeout: float = 30.0

    @field_validator("credentials_file", "token_file", mode="after")
    @classmethod
    def anchor_to_program_dir(cls, v: str) -> str:
        """Resolve relative paths against the program directory instead of the cwd"""
        path = Path(v).expanduser()
        if not path.is_absolute():
            path = PROGRAM_DIR / path
        return str(path)


class UploadConfig(BaseModel):
    folder_name: str = "shared-app"
    file_name: str = "androidapp.apk"
    mime_type: str = "application/vnd.android.package-archive"


class BuildConfig(BaseModel):
    executable: str = "flutter"
    base_args: list[str] = ["run", "--release"]
    artifact_path: str = "build/app/outputs/flutter-apk/app-release.apk"
    marker: str = "Built"
    propagate_exit_code: bool = False

    def resolve_artifact(self, cwd: Optional[Path] = None) -> Path:
        """Artifact location relative to the directory the build runs in"""
        return (cwd or Path.cwd()) / self.artifact_path


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    google_drive: GoogleDriveConfig = Field(default_factory=GoogleDriveConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Settings":
        """Load settings from YAML file with environment variable overrides"""
        config_path = config_path or os.getenv("APK_UPLOADER_CONFIG", DEFAULT_CONFIG_PATH)
        if os.path.exists(config_path):
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        else:
            data = {}

        # Environment variable overrides
        if folder_name := os.getenv("DRIVE_FOLDER_NAME"):
            data.setdefault("upload", {})["folder_name"] = folder_name
        if credentials_url := os.getenv("DRIVE_CREDENTIALS_URL"):
            data.setdefault("google_drive", {})["credentials_url"] = credentials_url
        if propagate := os.getenv("BUILD_PROPAGATE_EXIT_CODE"):
            data.setdefault("build", {})["propagate_exit_code"] = propagate.lower() in ("1", "true", "yes")
        if level := os.getenv("LOG_LEVEL"):
            data.setdefault("logging", {})["level"] = level.upper()

        return cls(**data)
