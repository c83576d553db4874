"""File collection: classification, checksums, traversal, and verification codes."""

from .checksums import ChecksumComputer
from .classifier import ExtensionClassifier, extension_of
from .collector import FileCollector, collect_tree
from .discovery import DiscoveredFile, TreeScanner
from .errors import (
    CollectionCancelled,
    CollectionError,
    CollectionFailure,
    FileReadError,
    UnsupportedDigestAlgorithmError,
)
from .models import CollectionResult, FileCategory, FileIdentity, VerificationCode
from .verification import EMPTY_VERIFICATION_CODE, compute_verification_code

__all__ = [
    "ChecksumComputer",
    "ExtensionClassifier",
    "extension_of",
    "FileCollector",
    "collect_tree",
    "DiscoveredFile",
    "TreeScanner",
    "CollectionError",
    "CollectionCancelled",
    "CollectionFailure",
    "FileReadError",
    "UnsupportedDigestAlgorithmError",
    "CollectionResult",
    "FileCategory",
    "FileIdentity",
    "VerificationCode",
    "EMPTY_VERIFICATION_CODE",
    "compute_verification_code",
]
