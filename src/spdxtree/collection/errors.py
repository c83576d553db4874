"""Errors raised while collecting file information."""

from __future__ import annotations

from pathlib import Path


class CollectionError(Exception):
    """Base exception for file collection operations."""


class UnsupportedDigestAlgorithmError(CollectionError):
    """Raised when the runtime cannot provide the required digest algorithm."""


class FileReadError(CollectionError):
    """Raised when a file (or directory listing) cannot be read."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class CollectionFailure(CollectionError):
    """Raised when a tree collection is aborted by an underlying failure."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class CollectionCancelled(CollectionError):
    """Raised when a cancellation signal is observed between files."""


__all__ = [
    "CollectionError",
    "UnsupportedDigestAlgorithmError",
    "FileReadError",
    "CollectionFailure",
    "CollectionCancelled",
]
