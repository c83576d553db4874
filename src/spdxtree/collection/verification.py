"""Package verification code calculation.

The verification code is the SHA-1 of the concatenation of every included file
checksum, sorted ascending, so the value does not depend on discovery order.
"""

from __future__ import annotations

from typing import Iterable

from .checksums import new_digest
from .models import FileIdentity, VerificationCode

EMPTY_VERIFICATION_CODE = "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def compute_verification_code(
    identities: Iterable[FileIdentity],
    excluded: Iterable[str] = (),
) -> VerificationCode:
    """Compute the verification code over ``identities`` minus ``excluded`` paths.

    Args:
        identities: File identities taking part in the calculation.
        excluded: Paths left out of the aggregate; reported in the result in the
            order given, without duplicates.

    Returns:
        VerificationCode: Aggregate value and the excluded paths.
    """
    excluded_paths = tuple(dict.fromkeys(excluded))
    skip = set(excluded_paths)
    checksums = sorted(identity.checksum for identity in identities if identity.path not in skip)

    digest = new_digest()
    for checksum in checksums:
        digest.update(checksum.encode("utf-8"))
    return VerificationCode(value=digest.hexdigest(), excluded_paths=excluded_paths)


__all__ = ["EMPTY_VERIFICATION_CODE", "compute_verification_code"]
