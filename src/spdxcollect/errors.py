# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised while collecting SPDX file information."""

from __future__ import annotations

from enum import Enum


class CollectionErrorKind(str, Enum):
    """Enumerate the failure categories surfaced by the file collector."""

    UNSUPPORTED_ALGORITHM = "unsupported-algorithm"
    IO_FAILURE = "io-failure"
    INVALID_LICENSE_STRING = "invalid-license-string"
    RECORD_CONSTRUCTION = "record-construction-failure"
    MISSING_DIGEST_ALGORITHM = "missing-digest-algorithm"


class SpdxCollectionError(RuntimeError):
    """Raised when SPDX file information cannot be collected."""

    kind: CollectionErrorKind = CollectionErrorKind.RECORD_CONSTRUCTION

    def __init__(self, message: str, *, kind: CollectionErrorKind | None = None) -> None:
        """Create the error with ``message`` and an optional explicit ``kind``."""

        super().__init__(message)
        if kind is not None:
            self.kind = kind


class UnsupportedAlgorithmError(SpdxCollectionError):
    """Raised when an optional checksum algorithm is outside the allow-list."""

    kind = CollectionErrorKind.UNSUPPORTED_ALGORITHM


class ChecksumIOError(SpdxCollectionError):
    """Raised when a file cannot be read while computing a checksum."""

    kind = CollectionErrorKind.IO_FAILURE


class InvalidLicenseStringError(SpdxCollectionError):
    """Raised when a license expression string fails to parse."""

    kind = CollectionErrorKind.INVALID_LICENSE_STRING


class RecordConstructionError(SpdxCollectionError):
    """Raised when a file, snippet, or relationship record fails validation."""

    kind = CollectionErrorKind.RECORD_CONSTRUCTION


class MissingDigestAlgorithmError(SpdxCollectionError):
    """Raised when the runtime cannot provide a required digest implementation."""

    kind = CollectionErrorKind.MISSING_DIGEST_ALGORITHM


class SourceScanError(RuntimeError):
    """Raised by embedded-license scanners when a source file cannot be scanned."""


class ConfigError(Exception):
    """Raised when collector configuration input is invalid."""


__all__ = (
    "ChecksumIOError",
    "CollectionErrorKind",
    "ConfigError",
    "InvalidLicenseStringError",
    "MissingDigestAlgorithmError",
    "RecordConstructionError",
    "SourceScanError",
    "SpdxCollectionError",
    "UnsupportedAlgorithmError",
)
