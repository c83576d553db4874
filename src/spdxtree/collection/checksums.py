"""Streaming content checksums."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

from .errors import FileReadError, UnsupportedDigestAlgorithmError

SHA1_ALGORITHM = "sha1"
DEFAULT_CHUNK_SIZE = 64 * 1024


def new_digest():
    """Return a fresh SHA-1 accumulator.

    Raises:
        UnsupportedDigestAlgorithmError: If the interpreter cannot provide SHA-1.
    """
    try:
        return hashlib.new(SHA1_ALGORITHM, usedforsecurity=False)
    except ValueError as exc:
        raise UnsupportedDigestAlgorithmError(
            f"Digest algorithm {SHA1_ALGORITHM!r} is not available: {exc}"
        ) from exc


class ChecksumComputer:
    """Compute SHA-1 checksums of file content without loading whole files."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        # Fail at construction rather than on the first file.
        new_digest()

    def digest_stream(self, stream: BinaryIO) -> str:
        """Return the lowercase hex SHA-1 of everything remaining in ``stream``."""
        digest = new_digest()
        for chunk in iter(lambda: stream.read(self.chunk_size), b""):
            digest.update(chunk)
        return digest.hexdigest()

    def compute(self, path: Path) -> str:
        """Return the lowercase hex SHA-1 of the file at ``path``.

        Raises:
            FileReadError: If the file cannot be opened or read.
        """
        try:
            with path.open("rb") as stream:
                return self.digest_stream(stream)
        except OSError as exc:
            raise FileReadError(f"Unable to read {path}: {exc}", path=path) from exc


__all__ = ["SHA1_ALGORITHM", "DEFAULT_CHUNK_SIZE", "ChecksumComputer", "new_digest"]
