"""Tests for the package verification code."""

import itertools

import pytest
from pydantic import ValidationError

from spdxtree.collection import (
    EMPTY_VERIFICATION_CODE,
    CollectionResult,
    FileCategory,
    FileIdentity,
    compute_verification_code,
)
from spdxtree.config.models import DefaultFileInformation

HELLO_SHA1 = "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"
WORLD_SHA1 = "7c211433f02071597741e6ff5a8ea34789abbf43"
INFO = DefaultFileInformation()


def _identity(path: str, checksum: str) -> FileIdentity:
    return FileIdentity(path=path, category=FileCategory.OTHER, checksum=checksum, metadata=INFO)


def test_empty_set_is_digest_of_empty_bytes() -> None:
    code = compute_verification_code([], [])

    assert code.value == EMPTY_VERIFICATION_CODE == "da39a3ee5e6b4b0d3255bfef95601890afd80709"
    assert code.excluded_paths == ()


def test_single_file_hashes_its_checksum_text() -> None:
    code = compute_verification_code([_identity("a.txt", HELLO_SHA1)])

    assert code.value == "9cf5caf6c36f5cccde8c73fad8894c958f4983da"


def test_two_files_sorted_then_concatenated() -> None:
    code = compute_verification_code(
        [_identity("a.txt", HELLO_SHA1), _identity("b.java", WORLD_SHA1)]
    )

    assert code.value == "163fc59f1d66d9237bab8ad77cd27a31c3f8e67c"


def test_order_independence() -> None:
    identities = [
        _identity("a", HELLO_SHA1),
        _identity("b", WORLD_SHA1),
        _identity("c", "0" * 40),
        _identity("d", "f" * 40),
    ]
    values = {
        compute_verification_code(permutation).value
        for permutation in itertools.permutations(identities)
    }

    assert len(values) == 1


def test_excluding_a_path_changes_value() -> None:
    identities = [_identity("a.txt", HELLO_SHA1), _identity("b.java", WORLD_SHA1)]

    full = compute_verification_code(identities)
    partial = compute_verification_code(identities, ["b.java"])

    assert partial.value != full.value
    assert partial.value == "9cf5caf6c36f5cccde8c73fad8894c958f4983da"
    assert partial.excluded_paths == ("b.java",)


def test_excluding_a_duplicate_checksum_still_changes_value() -> None:
    identities = [_identity("a.txt", HELLO_SHA1), _identity("copy.txt", HELLO_SHA1)]

    assert (
        compute_verification_code(identities, ["copy.txt"]).value
        != compute_verification_code(identities).value
    )


def test_excluded_paths_keep_order_without_duplicates() -> None:
    code = compute_verification_code([], ["z.spdx", "a.spdx", "z.spdx"])

    assert code.excluded_paths == ("z.spdx", "a.spdx")


def test_recomputation_is_stable() -> None:
    identities = [_identity("a.txt", HELLO_SHA1), _identity("b.java", WORLD_SHA1)]

    assert compute_verification_code(identities) == compute_verification_code(identities)


def test_checksum_must_be_lowercase_sha1_hex() -> None:
    with pytest.raises(ValidationError):
        _identity("a.txt", HELLO_SHA1.upper())
    with pytest.raises(ValidationError):
        _identity("a.txt", "abc")


def test_collection_result_requires_verification_code() -> None:
    with pytest.raises(ValidationError):
        CollectionResult(files={})

    result = CollectionResult(verification_code=compute_verification_code([]))
    assert result.verification_code.value == EMPTY_VERIFICATION_CODE
