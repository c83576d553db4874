"""Configuration models describing spdxtree settings."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOASSERTION = "NOASSERTION"


class SpdxTreeBaseModel(BaseModel):
    """Shared configuration for spdxtree Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class ProjectAssociation(SpdxTreeBaseModel):
    """Project a file is an artifact of (a DOAP project reference).

    Attributes:
        name: Project name.
        home_page: Project home page URL.
        uri: Optional URI identifying the project description.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    home_page: Optional[str] = None
    uri: Optional[str] = None


class DefaultFileInformation(SpdxTreeBaseModel):
    """Attribution record applied verbatim to every collected file.

    Attributes:
        declared_license: License expression found in (or declared for) each file.
        concluded_license: License concluded for each file.
        license_comment: Free-text comment about the licensing.
        copyright: Copyright text.
        notice: Notice text.
        comment: Free-text comment for each file.
        contributors: Names of file contributors.
        artifact_of: Projects the files are artifacts of.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    declared_license: str = NOASSERTION
    concluded_license: str = NOASSERTION
    license_comment: Optional[str] = None
    copyright: str = NOASSERTION
    notice: Optional[str] = None
    comment: Optional[str] = None
    contributors: List[str] = Field(default_factory=list)
    artifact_of: List[ProjectAssociation] = Field(default_factory=list)

    @field_validator("contributors", mode="before")
    @classmethod
    def _single_contributor(cls, value: Any) -> Any:
        return [value] if isinstance(value, str) else value


class CollectionOptions(SpdxTreeBaseModel):
    """Options governing how a file tree is collected.

    Attributes:
        exclude_patterns: Regular expressions matched against base names.
        follow_symlinks: Whether symbolic links are followed during traversal.
        fail_fast: Abort the run on the first unreadable file when True.
        chunk_size_kb: Read size used while hashing file content.
        spdx_file_name: Manifest file name excluded from the verification code.
    """

    exclude_patterns: List[str] = Field(default_factory=list)
    follow_symlinks: bool = True
    fail_fast: bool = True
    chunk_size_kb: int = Field(default=64, gt=0)
    spdx_file_name: Optional[str] = None

    @field_validator("exclude_patterns", mode="before")
    @classmethod
    def _single_pattern(cls, value: Any) -> Any:
        return [value] if isinstance(value, str) else value

    @field_validator("exclude_patterns")
    @classmethod
    def _validate_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid exclude pattern {pattern!r}: {exc}") from exc
        return value


class ClassificationSettings(SpdxTreeBaseModel):
    """Extension-to-category mapping overrides.

    Attributes:
        table_path: Optional YAML file replacing the built-in extension table.
        extensions: Extra extensions per category merged into the table.
    """

    table_path: Optional[str] = None
    extensions: Dict[Literal["source", "binary", "archive"], List[str]] = Field(
        default_factory=dict
    )


class LoggingSettings(SpdxTreeBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; enables a rotating file handler.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3


class CLIOptions(SpdxTreeBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class SpdxTreeConfig(SpdxTreeBaseModel):
    """Top-level configuration struct for spdxtree.

    Attributes:
        collection: Tree collection settings.
        default_file_information: Metadata attached to every collected file.
        classification: Extension table overrides.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    collection: CollectionOptions = Field(default_factory=CollectionOptions)
    default_file_information: DefaultFileInformation = Field(
        default_factory=DefaultFileInformation
    )
    classification: ClassificationSettings = Field(default_factory=ClassificationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "NOASSERTION",
    "SpdxTreeBaseModel",
    "ProjectAssociation",
    "DefaultFileInformation",
    "CollectionOptions",
    "ClassificationSettings",
    "LoggingSettings",
    "CLIOptions",
    "SpdxTreeConfig",
]
