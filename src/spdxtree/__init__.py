"""Deterministic file manifests and SPDX package verification codes."""

from importlib import metadata as _metadata

from spdxtree.collection import (
    CollectionResult,
    FileCategory,
    FileCollector,
    FileIdentity,
    VerificationCode,
    collect_tree,
    compute_verification_code,
)

__all__ = [
    "__version__",
    "CollectionResult",
    "FileCategory",
    "FileCollector",
    "FileIdentity",
    "VerificationCode",
    "collect_tree",
    "compute_verification_code",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("spdxtree")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
