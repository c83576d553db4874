"""Data models produced by a collection run."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from spdxtree.config.models import DefaultFileInformation

CHECKSUM_PATTERN = r"^[0-9a-f]{40}$"


class FileCategory(str, Enum):
    """Coarse content category derived from a file extension."""

    SOURCE = "source"
    BINARY = "binary"
    ARCHIVE = "archive"
    OTHER = "other"


class FileIdentity(BaseModel):
    """Identity of one collected file.

    Attributes:
        path: Path relative to the collection root, using forward slashes.
        category: Category derived from the file extension.
        checksum: Lowercase hex SHA-1 of the file content.
        metadata: Default attribution record shared by every file of the run.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    category: FileCategory
    checksum: str = Field(pattern=CHECKSUM_PATTERN)
    metadata: DefaultFileInformation

    @property
    def license_references(self) -> List[str]:
        """Return the licenses seen in this file."""
        return [self.metadata.declared_license]


class VerificationCode(BaseModel):
    """Aggregate checksum over the checksums of a set of files."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(pattern=CHECKSUM_PATTERN)
    excluded_paths: Tuple[str, ...] = ()


class CollectionResult(BaseModel):
    """Everything a collection run hands to the document assembly layer.

    Attributes:
        files: Collected identities keyed by their relative path.
        verification_code: Aggregate verification code for ``files``.
        license_references: Distinct licenses seen across all files, sorted.
        errors: Per-file failures recorded in best-effort mode.
    """

    verification_code: VerificationCode
    files: Dict[str, FileIdentity] = Field(default_factory=dict)
    license_references: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


__all__ = [
    "CHECKSUM_PATTERN",
    "FileCategory",
    "FileIdentity",
    "VerificationCode",
    "CollectionResult",
]
