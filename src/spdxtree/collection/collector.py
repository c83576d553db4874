"""Collect file identities for one or more trees."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable

from spdxtree.config.models import CollectionOptions, DefaultFileInformation

from .checksums import ChecksumComputer
from .classifier import ExtensionClassifier, extension_of
from .discovery import TreeScanner
from .errors import CollectionCancelled, CollectionFailure, FileReadError
from .models import CollectionResult, FileIdentity, VerificationCode
from .verification import compute_verification_code

LOGGER = logging.getLogger(__name__)


class FileCollector:
    """Build a path-keyed map of file identities and its verification code.

    By default the first unreadable file or directory aborts the whole run and
    nothing from that tree is added. With ``fail_fast=False`` unreadable entries
    are recorded in ``errors`` and skipped.
    """

    def __init__(
        self,
        scanner: TreeScanner,
        classifier: ExtensionClassifier,
        hasher: ChecksumComputer,
        default_information: DefaultFileInformation,
        *,
        fail_fast: bool = True,
    ) -> None:
        self.scanner = scanner
        self.classifier = classifier
        self.hasher = hasher
        self.default_information = default_information
        self.fail_fast = fail_fast
        self.files: dict[str, FileIdentity] = {}
        self.errors: list[str] = []

    @classmethod
    def from_options(
        cls,
        options: CollectionOptions,
        default_information: DefaultFileInformation,
        classifier: ExtensionClassifier | None = None,
    ) -> "FileCollector":
        """Create a collector configured from ``CollectionOptions``."""
        return cls(
            scanner=TreeScanner(
                options.exclude_patterns, follow_symlinks=options.follow_symlinks
            ),
            classifier=classifier or ExtensionClassifier(),
            hasher=ChecksumComputer(chunk_size=options.chunk_size_kb * 1024),
            default_information=default_information,
            fail_fast=options.fail_fast,
        )

    def collect(
        self,
        root: Path,
        *,
        prefix: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> dict[str, FileIdentity]:
        """Collect every non-excluded file under ``root``.

        Identities are keyed by their path relative to ``root``, optionally under
        ``prefix``. They are merged into ``self.files``, together with any
        best-effort errors, only once the whole tree has been processed.

        Args:
            root: Directory (or single file) to collect.
            prefix: Directory name prepended to every key, so several roots
                sharing relative paths can be collected into one run.
            cancel_event: Checked between files; when set the run stops.

        Returns:
            dict[str, FileIdentity]: Identities discovered under ``root``.

        Raises:
            CollectionFailure: If an entry cannot be read in fail-fast mode, or a
                key was already collected from an earlier root.
            CollectionCancelled: If ``cancel_event`` was set during the walk.
        """
        lead = f"{prefix.strip('/')}/" if prefix else ""
        collected: dict[str, FileIdentity] = {}
        errors: list[str] = []

        def _record(error: FileReadError) -> None:
            LOGGER.warning("Skipping unreadable entry: %s", error)
            errors.append(str(error))

        try:
            for discovered in self.scanner.scan(
                root, on_error=None if self.fail_fast else _record
            ):
                if cancel_event is not None and cancel_event.is_set():
                    raise CollectionCancelled(f"Collection of {root} cancelled.")
                key = lead + discovered.relative
                if key in self.files:
                    raise CollectionFailure(
                        f"Collection of {root} aborted: {key} was already collected "
                        "from another root; collect it under a distinct prefix.",
                        path=discovered.path,
                    )
                try:
                    checksum = self.hasher.compute(discovered.path)
                except FileReadError as exc:
                    if self.fail_fast:
                        raise
                    _record(exc)
                    continue
                collected[key] = FileIdentity(
                    path=key,
                    category=self.classifier.classify(extension_of(discovered.path.name)),
                    checksum=checksum,
                    metadata=self.default_information,
                )
                LOGGER.debug("Collected %s (%s)", key, checksum)
        except FileReadError as exc:
            raise CollectionFailure(
                f"Collection of {root} aborted: {exc}", path=exc.path
            ) from exc

        self.files.update(collected)
        self.errors.extend(errors)
        LOGGER.info("Collected %d files from %s", len(collected), root)
        return collected

    def license_references(self) -> list[str]:
        """Return the distinct licenses seen across all collected files."""
        seen = {
            reference
            for identity in self.files.values()
            for reference in identity.license_references
        }
        return sorted(seen)

    def verification_code(self, excluded_names: Iterable[str] = ()) -> VerificationCode:
        """Compute the verification code for everything collected so far.

        Args:
            excluded_names: Paths to leave out, typically the manifest file itself.
                Only names that were actually collected are excluded and reported.

        Returns:
            VerificationCode: Aggregate over the collected identities.
        """
        normalized = (name[2:] if name.startswith("./") else name for name in excluded_names)
        excluded = [name for name in normalized if name in self.files]
        code = compute_verification_code(self.files.values(), excluded)
        LOGGER.info("Verification code %s over %d files", code.value, len(self.files))
        return code

    def result(self, excluded_names: Iterable[str] = ()) -> CollectionResult:
        """Return the collected files, verification code, and licenses."""
        return CollectionResult(
            files=dict(self.files),
            verification_code=self.verification_code(excluded_names),
            license_references=self.license_references(),
            errors=list(self.errors),
        )


def collect_tree(
    root: Path,
    *,
    exclude_patterns: Iterable[str] = (),
    default_information: DefaultFileInformation | None = None,
    excluded_names: Iterable[str] = (),
    fail_fast: bool = True,
    cancel_event: threading.Event | None = None,
) -> CollectionResult:
    """Collect ``root`` and return its identities and verification code in one call."""
    collector = FileCollector(
        scanner=TreeScanner(exclude_patterns),
        classifier=ExtensionClassifier(),
        hasher=ChecksumComputer(),
        default_information=default_information or DefaultFileInformation(),
        fail_fast=fail_fast,
    )
    collector.collect(root, cancel_event=cancel_event)
    return collector.result(excluded_names)


__all__ = ["FileCollector", "collect_tree"]
