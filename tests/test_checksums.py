"""Tests for streaming file checksums."""

import io
from pathlib import Path
from typing import BinaryIO

import pytest

from spdxtree.collection import checksums
from spdxtree.collection.checksums import ChecksumComputer
from spdxtree.collection.errors import FileReadError, UnsupportedDigestAlgorithmError

HELLO_SHA1 = "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"


def test_compute_matches_known_digest(tmp_path: Path) -> None:
    path = tmp_path / "a.txt"
    path.write_bytes(b"hello")

    assert ChecksumComputer().compute(path) == HELLO_SHA1


def test_compute_is_deterministic_and_independent_of_previous_files(tmp_path: Path) -> None:
    first = tmp_path / "first.bin"
    first.write_bytes(b"hello")
    second = tmp_path / "second.bin"
    second.write_bytes(b"x" * 10_000)

    hasher = ChecksumComputer()
    before = hasher.compute(first)
    hasher.compute(second)

    assert hasher.compute(first) == before == HELLO_SHA1


def test_small_chunks_produce_same_digest() -> None:
    content = bytes(range(256)) * 50
    whole = ChecksumComputer().digest_stream(io.BytesIO(content))

    assert ChecksumComputer(chunk_size=7).digest_stream(io.BytesIO(content)) == whole


def test_empty_content_digest() -> None:
    digest = ChecksumComputer().digest_stream(io.BytesIO(b""))

    assert digest == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def test_missing_file_raises_file_read_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.txt"

    with pytest.raises(FileReadError) as excinfo:
        ChecksumComputer().compute(missing)

    assert excinfo.value.path == missing


def test_read_failure_releases_stream(tmp_path: Path) -> None:
    path = tmp_path / "a.txt"
    path.write_bytes(b"hello")
    seen: list[BinaryIO] = []

    class FailingComputer(ChecksumComputer):
        def digest_stream(self, stream: BinaryIO) -> str:  # type: ignore[override]
            seen.append(stream)
            raise OSError("disk went away")

    with pytest.raises(FileReadError):
        FailingComputer().compute(path)

    assert seen and seen[0].closed


def test_missing_algorithm_fails_at_construction(monkeypatch: pytest.MonkeyPatch) -> None:
    def _unavailable(name: str, *args: object, **kwargs: object) -> None:
        raise ValueError(f"unsupported hash type {name}")

    monkeypatch.setattr(checksums.hashlib, "new", _unavailable)

    with pytest.raises(UnsupportedDigestAlgorithmError):
        ChecksumComputer()


def test_chunk_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ChecksumComputer(chunk_size=0)
