# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collection session accumulating SPDX records for a package."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Mapping
from os import PathLike
from pathlib import Path

from .builder import FileRecordBuilder
from .classifier import ExtensionClassifier, load_default_classifier
from .config import CollectorSettings, load_settings
from .entries import FileEntry
from .expressions import LicenseExpression, LicenseParser, parse_license_expression
from .models import (
    DefaultFileInformation,
    FileRecord,
    PackageVerificationCode,
    RelationshipType,
    SnippetRecord,
    SpdxElement,
)
from .paths import path_segments
from .resolver import resolve_or_default
from .scanner import EmbeddedLicenseScanner, SpdxSourceFileParser
from .verification import compute_verification_code

LOGGER = logging.getLogger(__name__)

_Pathish = str | PathLike[str] | Path


def _path_key(path: _Pathish) -> Path:
    """Return the absolute, normalised key identifying a physical file."""

    return Path(os.path.abspath(path))


def _normalise_overrides(
    overrides: Mapping[str, DefaultFileInformation] | None,
) -> dict[str, DefaultFileInformation]:
    """Return ``overrides`` keyed by ``/`` separated paths without ``./`` or trailing slashes."""

    if not overrides:
        return {}
    return {"/".join(path_segments(path)): information for path, information in overrides.items()}


class SpdxFileCollector:
    """Collect SPDX file information for one package.

    A collector instance is one scan session. Records are keyed by absolute
    source path, so collecting the same file again is a no-op.
    """

    def __init__(
        self,
        *,
        settings: CollectorSettings | None = None,
        classifier: ExtensionClassifier | None = None,
        scanner: EmbeddedLicenseScanner | None = None,
        parser: LicenseParser | None = None,
    ) -> None:
        self._settings = settings if settings is not None else CollectorSettings()
        license_parser = parser if parser is not None else parse_license_expression
        self._builder = FileRecordBuilder(
            classifier=classifier if classifier is not None else load_default_classifier(),
            scanner=scanner if scanner is not None else SpdxSourceFileParser(parser=license_parser),
            parser=license_parser,
            max_source_file_length=self._settings.max_source_file_length,
            optional_checksums=self._settings.optional_checksums,
        )
        self._files: dict[Path, FileRecord] = {}
        self._snippets: list[SnippetRecord] = []
        self._licenses: set[LicenseExpression] = set()
        self._lock = threading.RLock()

    @classmethod
    def for_project(
        cls,
        root: Path,
        *,
        classifier: ExtensionClassifier | None = None,
        scanner: EmbeddedLicenseScanner | None = None,
        parser: LicenseParser | None = None,
    ) -> SpdxFileCollector:
        """Create a collector using the ``[tool.spdxcollect]`` settings of ``root``.

        Raises:
            ConfigError: If the project settings are invalid.
        """

        return cls(settings=load_settings(root), classifier=classifier, scanner=scanner, parser=parser)

    @property
    def settings(self) -> CollectorSettings:
        """Return the settings this session was created with."""

        return self._settings

    @property
    def files(self) -> tuple[FileRecord, ...]:
        """Return every file record collected so far."""

        with self._lock:
            return tuple(self._files.values())

    @property
    def snippets(self) -> tuple[SnippetRecord, ...]:
        """Return snippet records in the order they were collected."""

        with self._lock:
            return tuple(self._snippets)

    @property
    def license_info_from_files(self) -> frozenset[LicenseExpression]:
        """Return the distinct license expressions used by collected files."""

        with self._lock:
            return frozenset(self._licenses)

    def get_file(self, path: _Pathish) -> FileRecord | None:
        """Return the record collected for the file at ``path``, if any."""

        with self._lock:
            return self._files.get(_path_key(path))

    def collect_files(
        self,
        entries: Iterable[FileEntry],
        default_information: DefaultFileInformation,
        package: SpdxElement,
        *,
        path_specific_information: Mapping[str, DefaultFileInformation] | None = None,
        relationship_type: RelationshipType | None = None,
    ) -> None:
        """Collect SPDX information for every entry.

        The first failing file aborts the call; records collected before the
        failure are kept.

        Args:
            entries: Files to collect.
            default_information: Package wide default file information.
            package: Package the files belong to.
            path_specific_information: Overrides keyed by relative file or
                directory path; the closest match to a file wins.
            relationship_type: Relationship from each file to ``package``;
                defaults to the configured relationship type.

        Raises:
            SpdxCollectionError: If any file cannot be collected.
        """

        overrides = _normalise_overrides(path_specific_information)
        for entry in entries:
            information = resolve_or_default(entry.lookup_path, overrides, default_information)
            self.collect_file(entry, information, package, relationship_type=relationship_type)

    def collect_file(
        self,
        entry: FileEntry,
        information: DefaultFileInformation,
        package: SpdxElement,
        *,
        relationship_type: RelationshipType | None = None,
    ) -> FileRecord:
        """Collect one file, reusing the existing record when already collected.

        Args:
            entry: File to collect.
            information: Default information resolved for the file.
            package: Package the file belongs to.
            relationship_type: Relationship from the file to ``package``.

        Returns:
            FileRecord: The new record, or the record from an earlier scan.

        Raises:
            SpdxCollectionError: If the file cannot be collected.
        """

        key = _path_key(entry.source)
        kind = relationship_type if relationship_type is not None else self._settings.relationship_type
        with self._lock:
            existing = self._files.get(key)
            if existing is not None:
                LOGGER.debug("Skipping %s; already collected", key)
                return existing
            built = self._builder.build(key, entry.output_path, information, package, kind)
            self._files[key] = built.record
            self._snippets.extend(built.snippets)
            self._licenses.update(built.licenses)
            return built.record

    def verification_code(self, spdx_file_path: _Pathish | None = None) -> PackageVerificationCode:
        """Compute the package verification code over all collected files.

        Args:
            spdx_file_path: Path of the SPDX document; when it was collected,
                its file name is excluded from the calculation.

        Returns:
            PackageVerificationCode: Verification code and excluded file names.
        """

        excluded = list(self._settings.excluded_file_names)
        with self._lock:
            if spdx_file_path is not None:
                document = self._files.get(_path_key(spdx_file_path))
                if document is not None and document.name not in excluded:
                    excluded.append(document.name)
            records = tuple(self._files.values())
        return compute_verification_code(records, excluded)


__all__ = ["SpdxFileCollector"]
