"""Manuscripts feature exceptions."""
from __future__ import annotations


class ManuscriptsError(Exception):
    """Base exception for the manuscripts feature."""


class InputError(ManuscriptsError):
    """Raised when caller input is rejected before any state change."""


class UnsupportedFileTypeError(InputError):
    """Raised for uploads whose extension is not txt, md or docx."""


class ExtractionError(ManuscriptsError):
    """Raised when text cannot be extracted from an uploaded file."""


class StorageError(ManuscriptsError):
    """Raised when raw files or metadata cannot be read or written."""


class PersistenceError(StorageError):
    """Raised when the metadata document could not be written."""


class StorageMigrationError(StorageError):
    """Raised when relocating the data directory did not complete."""


class ProjectNotFoundError(ManuscriptsError, LookupError):
    """Raised when a project id does not resolve."""


class BranchNotFoundError(ManuscriptsError, LookupError):
    """Raised when a branch id does not resolve within a project."""


class VersionNotFoundError(ManuscriptsError, LookupError):
    """Raised when a version id is not part of the branch."""
