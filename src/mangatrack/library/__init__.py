"""Library backend collaborator."""

from .client import LibraryBackend, LibraryClient, LibraryRequestError, ProgressUpdate

__all__ = ["LibraryBackend", "LibraryClient", "LibraryRequestError", "ProgressUpdate"]
