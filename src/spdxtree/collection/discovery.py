"""File tree discovery with base-name exclusion."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from re import Pattern
from typing import Callable, Iterable, Iterator

from .errors import FileReadError

LOGGER = logging.getLogger(__name__)


def compile_patterns(patterns: Iterable[str | Pattern[str]]) -> tuple[Pattern[str], ...]:
    """Compile exclusion patterns, passing pre-compiled ones through."""
    return tuple(
        pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
        for pattern in patterns
    )


@dataclass(frozen=True)
class DiscoveredFile:
    """A plain file that survived exclusion filtering."""

    path: Path
    relative: str


class TreeScanner:
    """Walk a directory tree, skipping any node whose base name is excluded.

    A pattern must match the whole base name; a matching directory prunes its
    entire subtree. Traversal is iterative and remembers every directory it has
    entered by device and inode, so symlink loops are visited once.
    """

    def __init__(
        self,
        exclude_patterns: Iterable[str | Pattern[str]] = (),
        *,
        follow_symlinks: bool = True,
    ) -> None:
        self.exclude_patterns = compile_patterns(exclude_patterns)
        self.follow_symlinks = follow_symlinks

    def is_excluded(self, name: str) -> bool:
        """Return True when ``name`` fully matches any exclusion pattern."""
        return any(pattern.fullmatch(name) for pattern in self.exclude_patterns)

    def scan(
        self,
        root: Path,
        *,
        on_error: Callable[[FileReadError], None] | None = None,
    ) -> Iterator[DiscoveredFile]:
        """Yield non-excluded files under ``root`` in directory-listing order.

        Sockets, FIFOs and device nodes are skipped. A dangling symlink is still
        yielded so the failure to read it surfaces when it is hashed.

        Args:
            root: Directory (or single file) to scan.
            on_error: Receives unreadable directories; when omitted the error is
                raised and the scan stops.

        Raises:
            FileReadError: If a directory cannot be listed and ``on_error`` is None.
        """
        root = root.expanduser()
        if self.is_excluded(root.name):
            LOGGER.debug("Skipping excluded root %s", root)
            return
        if not root.is_dir():
            if root.exists() and not root.is_file():
                LOGGER.debug("Skipping %s: not a regular file or directory", root)
                return
            yield DiscoveredFile(path=root, relative=root.name)
            return

        visited: set[tuple[int, int]] = set()
        # (path, relative name, is_directory); children are pushed in reverse so
        # they pop in listing order and each subtree is finished before its sibling.
        stack: list[tuple[Path, str, bool]] = [(root, "", True)]
        while stack:
            path, relative, is_directory = stack.pop()
            if not is_directory:
                yield DiscoveredFile(path=path, relative=relative)
                continue

            try:
                info = path.stat()
                identity = (info.st_dev, info.st_ino)
                if identity in visited:
                    LOGGER.warning("Skipping %s: directory already visited (symlink loop)", path)
                    continue
                visited.add(identity)
                with os.scandir(path) as entries:
                    children = list(entries)
            except OSError as exc:
                error = FileReadError(f"Unable to list {path}: {exc}", path=path)
                if on_error is None:
                    raise error from exc
                on_error(error)
                continue

            prefix = f"{relative}/" if relative else ""
            pending: list[tuple[Path, str, bool]] = []
            for entry in children:
                if self.is_excluded(entry.name):
                    LOGGER.debug("Excluded %s", entry.path)
                    continue
                if not self.follow_symlinks and entry.is_symlink():
                    continue
                is_dir = entry.is_dir()
                if not is_dir and not entry.is_file() and not _is_dangling(entry):
                    # sockets, FIFOs and device nodes have no content to hash
                    LOGGER.debug("Skipping %s: not a regular file or directory", entry.path)
                    continue
                pending.append((Path(entry.path), prefix + entry.name, is_dir))
            stack.extend(reversed(pending))


def _is_dangling(entry: os.DirEntry[str]) -> bool:
    return entry.is_symlink() and not os.path.exists(entry.path)


__all__ = ["DiscoveredFile", "TreeScanner", "compile_patterns"]
