"""Extension-based file classification.

The mapping from extensions to categories is data: the built-in table below can
be replaced by a YAML file and extended from configuration without code changes.
A table file is a mapping of category name to a list of extensions::

    source: [java, py, rs]
    binary: [exe, dll]
    archive: [zip, tar]
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

import yaml

from spdxtree.config.exceptions import ConfigError

from .models import FileCategory

DEFAULT_EXTENSION_TABLE: dict[FileCategory, frozenset[str]] = {
    FileCategory.SOURCE: frozenset(
        {
            "C", "H", "JAVA", "CS", "JS", "HH", "CC", "CPP", "CXX", "HPP", "ASP",
            "BAS", "BAT", "HTM", "HTML", "LSP", "PAS", "XML", "ADA", "VB", "ASM",
            "CBL", "COB", "F77", "M3", "MK", "MKE", "RMK", "MOD", "PL", "PM",
            "PRO", "REX", "SM", "ST", "SNO", "PY", "PHP", "CSS", "XSL", "XSLT",
            "SH", "XSD", "RB", "RBX", "RHTML", "RUBY",
        }
    ),
    FileCategory.BINARY: frozenset({"EXE", "DLL", "JAR", "CLASS", "SO", "A"}),
    FileCategory.ARCHIVE: frozenset({"ZIP", "EAR", "TAR", "GZ", "TGZ", "BZ2", "RPM"}),
}

# An extension listed under several categories resolves to the first one here.
_PRECEDENCE = (FileCategory.SOURCE, FileCategory.BINARY, FileCategory.ARCHIVE)


def extension_of(name: str) -> str:
    """Return the text after the last dot of ``name``.

    Names without a dot, or whose only dot is the first character (``.bashrc``),
    have no extension and yield an empty string.
    """
    last_dot = name.rfind(".")
    if last_dot < 1:
        return ""
    return name[last_dot + 1 :]


class ExtensionClassifier:
    """Map file extensions to a ``FileCategory`` case-insensitively."""

    def __init__(self, table: Mapping[FileCategory, Iterable[str]] | None = None) -> None:
        table = DEFAULT_EXTENSION_TABLE if table is None else table
        self._lookup: dict[str, FileCategory] = {}
        for category in reversed(_PRECEDENCE):
            for extension in table.get(category, ()):
                self._lookup[extension.lstrip(".").upper()] = category

    @classmethod
    def from_settings(
        cls,
        table_path: str | Path | None = None,
        extensions: Mapping[str, Iterable[str]] | None = None,
    ) -> "ExtensionClassifier":
        """Build a classifier from an optional table file plus extra extensions.

        Args:
            table_path: YAML table replacing the built-in one when given.
            extensions: Additional extensions per category name.

        Returns:
            ExtensionClassifier: Classifier over the merged table.

        Raises:
            ConfigError: If the table file cannot be read or is malformed.
        """
        if table_path is not None:
            table = load_extension_table(Path(table_path))
        else:
            table = {category: set(values) for category, values in DEFAULT_EXTENSION_TABLE.items()}
        for name, values in (extensions or {}).items():
            category = _parse_category(name)
            table.setdefault(category, set()).update(values)
        return cls(table)

    def classify(self, extension: str | None) -> FileCategory:
        """Return the category for ``extension``; unknown or empty yields OTHER."""
        if not extension:
            return FileCategory.OTHER
        return self._lookup.get(extension.upper(), FileCategory.OTHER)

    def classify_name(self, name: str) -> FileCategory:
        """Return the category for a file name based on its extension."""
        return self.classify(extension_of(name))


def load_extension_table(path: Path) -> dict[FileCategory, set[str]]:
    """Load an extension table from a YAML mapping of category to extensions."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigError(f"Unable to read extension table {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse extension table {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Extension table {path} must contain a mapping at the top level.")

    table: dict[FileCategory, set[str]] = {}
    for name, values in raw.items():
        category = _parse_category(str(name))
        if not isinstance(values, list):
            raise ConfigError(f"Extensions for {name!r} in {path} must be a list.")
        table[category] = {str(value).lstrip(".") for value in values}
    return table


def _parse_category(name: str) -> FileCategory:
    try:
        category = FileCategory(name.lower())
    except ValueError as exc:
        raise ConfigError(f"Unknown file category {name!r}.") from exc
    if category is FileCategory.OTHER:
        raise ConfigError("The 'other' category is implicit and cannot list extensions.")
    return category


__all__ = [
    "DEFAULT_EXTENSION_TABLE",
    "ExtensionClassifier",
    "extension_of",
    "load_extension_table",
]
