# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Package verification code calculation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .checksums import convert_checksum_to_string, new_hasher
from .constants import SHA1_ALGORITHM
from .models import FileRecord, PackageVerificationCode


def include_in_verification_code(name: str, excluded_file_names: Iterable[str]) -> bool:
    """Return ``True`` when ``name`` is not listed in ``excluded_file_names``."""

    return all(excluded != name for excluded in excluded_file_names)


def compute_verification_code(
    records: Iterable[FileRecord],
    excluded_file_names: Sequence[str] = (),
) -> PackageVerificationCode:
    """Calculate the SPDX package verification code for ``records``.

    The SHA-1 checksums of every included file are sorted as plain strings and
    their UTF-8 bytes are fed, without separators, into one SHA-1 digest, so
    the result depends only on the set of files and never on scan order.

    Args:
        records: Collected file records.
        excluded_file_names: SPDX file names left out of the calculation,
            typically the SPDX document itself.

    Returns:
        PackageVerificationCode: Hex digest together with the excluded names.

    Raises:
        MissingDigestAlgorithmError: If the runtime cannot provide SHA-1.
    """

    excluded = tuple(excluded_file_names)
    checksums = sorted(
        record.sha1 for record in records if include_in_verification_code(record.name, excluded)
    )
    hasher = new_hasher(SHA1_ALGORITHM)
    for checksum in checksums:
        hasher.update(checksum.encode("utf-8"))
    return PackageVerificationCode(
        value=convert_checksum_to_string(hasher.digest()),
        excluded_file_names=excluded,
    )


__all__ = ["compute_verification_code", "include_in_verification_code"]
