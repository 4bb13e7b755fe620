"""Build a Flutter release APK and publish it to a shared Google Drive folder."""

__version__ = "1.0.0"
