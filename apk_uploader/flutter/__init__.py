from .runner import BuildRunner

__all__ = ["BuildRunner"]
