# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""SPDX file collection: checksums, file types, licenses, and verification codes."""

from __future__ import annotations

from typing import Final

from .builder import BuiltFile, FileRecordBuilder
from .checksums import file_checksum, generate_optional_checksum, generate_sha1
from .classifier import ExtensionClassifier, FileType, load_classifier, load_default_classifier
from .collector import SpdxFileCollector
from .config import CollectorSettings, load_settings
from .entries import FileEntry, file_set_entries
from .errors import (
    ChecksumIOError,
    CollectionErrorKind,
    ConfigError,
    InvalidLicenseStringError,
    MissingDigestAlgorithmError,
    RecordConstructionError,
    SourceScanError,
    SpdxCollectionError,
    UnsupportedAlgorithmError,
)
from .expressions import (
    ConjunctiveLicenseSet,
    DisjunctiveLicenseSet,
    LicenseExpression,
    LicenseId,
    WithException,
    parse_license_expression,
)
from .models import (
    DefaultFileInformation,
    FileRecord,
    PackageRef,
    PackageVerificationCode,
    Relationship,
    RelationshipType,
    SnippetInfo,
    SnippetRange,
    SnippetRecord,
)
from .paths import convert_file_path_to_spdx_file_name
from .resolver import resolve_file_information
from .scanner import EmbeddedLicenseScanner, SpdxSourceFileParser
from .verification import compute_verification_code

__version__ = "0.1.0"

__all__: Final[tuple[str, ...]] = (
    "BuiltFile",
    "ChecksumIOError",
    "CollectionErrorKind",
    "CollectorSettings",
    "ConfigError",
    "ConjunctiveLicenseSet",
    "DefaultFileInformation",
    "DisjunctiveLicenseSet",
    "EmbeddedLicenseScanner",
    "ExtensionClassifier",
    "FileEntry",
    "FileRecord",
    "FileRecordBuilder",
    "FileType",
    "InvalidLicenseStringError",
    "LicenseExpression",
    "LicenseId",
    "MissingDigestAlgorithmError",
    "PackageRef",
    "PackageVerificationCode",
    "RecordConstructionError",
    "Relationship",
    "RelationshipType",
    "SnippetInfo",
    "SnippetRange",
    "SnippetRecord",
    "SourceScanError",
    "SpdxCollectionError",
    "SpdxFileCollector",
    "SpdxSourceFileParser",
    "UnsupportedAlgorithmError",
    "WithException",
    "compute_verification_code",
    "convert_file_path_to_spdx_file_name",
    "file_checksum",
    "file_set_entries",
    "generate_optional_checksum",
    "generate_sha1",
    "load_classifier",
    "load_default_classifier",
    "load_settings",
    "parse_license_expression",
    "resolve_file_information",
)
