"""File scope component: which files on disk belong to a project."""

from .file_set import FileSet

__all__ = ["FileSet"]
