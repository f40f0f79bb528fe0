# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build immutable SPDX file and snippet records for collected files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from .checksums import generate_optional_checksum, generate_sha1
from .classifier import ExtensionClassifier, FileType
from .constants import (
    CHECKSUM_CHUNK_SIZE,
    EMBEDDED_LICENSE_COMMENT_PREFIX,
    LICENSE_COMMENT_SEPARATOR,
    MAXIMUM_SOURCE_FILE_LENGTH,
    NOASSERTION,
)
from .errors import InvalidLicenseStringError, RecordConstructionError, SourceScanError
from .expressions import LicenseExpression, LicenseParser, conjunction, parse_license_expression
from .models import (
    DefaultFileInformation,
    FileRecord,
    Relationship,
    RelationshipType,
    SnippetInfo,
    SnippetRange,
    SnippetRecord,
    SpdxElement,
)
from .paths import convert_file_path_to_spdx_file_name, file_extension
from .scanner import EmbeddedLicenseScanner, SpdxSourceFileParser

LOGGER = logging.getLogger(__name__)

_NEWLINE: Final[bytes] = b"\n"


@dataclass(slots=True)
class _FileRecordDraft:
    """Accumulate file record fields before freezing them into a ``FileRecord``."""

    name: str
    file_types: tuple[FileType, ...]
    sha1: str
    checksums: dict[str, str] = field(default_factory=dict)
    license_concluded: LicenseExpression | None = None
    license_declared: LicenseExpression | None = None
    license_comment: str | None = None
    copyright_text: str = NOASSERTION
    notice_text: str = ""
    comment: str = ""
    contributors: tuple[str, ...] = ()
    relationships: list[Relationship] = field(default_factory=list)

    def append_license_comment(self, text: str) -> None:
        """Append ``text`` to the license comment, separating it from existing text."""

        if self.license_comment:
            self.license_comment = f"{self.license_comment}{LICENSE_COMMENT_SEPARATOR}{text}"
        else:
            self.license_comment = text

    def finalize(self) -> FileRecord:
        """Return the frozen record.

        Raises:
            ValidationError: If the accumulated fields do not form a valid record.
        """

        declared = () if self.license_declared is None else (self.license_declared,)
        return FileRecord(
            name=self.name,
            file_types=self.file_types,
            sha1=self.sha1,
            checksums=tuple(self.checksums.items()),
            license_concluded=self.license_concluded,
            license_info_in_file=declared,
            license_comment=self.license_comment,
            copyright_text=self.copyright_text,
            notice_text=self.notice_text,
            comment=self.comment,
            contributors=self.contributors,
            relationships=tuple(self.relationships),
        )


@dataclass(frozen=True, slots=True)
class BuiltFile:
    """Result of building one file: its record, snippets, and licenses used."""

    record: FileRecord
    snippets: tuple[SnippetRecord, ...]
    licenses: tuple[LicenseExpression, ...]


def _distinct(expressions: Iterable[LicenseExpression]) -> tuple[LicenseExpression, ...]:
    """Return ``expressions`` with duplicates removed, preserving order."""

    distinct: list[LicenseExpression] = []
    for expression in expressions:
        if expression not in distinct:
            distinct.append(expression)
    return tuple(distinct)


def count_lines(path: Path) -> int:
    """Count lines in ``path`` using bounded chunked reads.

    A trailing fragment without a final newline counts as a line.
    """

    lines = 0
    last_byte = _NEWLINE
    with path.open("rb") as stream:
        while chunk := stream.read(CHECKSUM_CHUNK_SIZE):
            lines += chunk.count(_NEWLINE)
            last_byte = chunk[-1:]
    if last_byte != _NEWLINE:
        lines += 1
    return lines


@dataclass(slots=True)
class FileRecordBuilder:
    """Combine checksums, classification, and license data into file records."""

    classifier: ExtensionClassifier
    scanner: EmbeddedLicenseScanner = field(default_factory=SpdxSourceFileParser)
    parser: LicenseParser = parse_license_expression
    max_source_file_length: int = MAXIMUM_SOURCE_FILE_LENGTH
    optional_checksums: tuple[str, ...] = ()

    def build(
        self,
        source: Path,
        output_path: str,
        information: DefaultFileInformation,
        package: SpdxElement,
        relationship_type: RelationshipType,
    ) -> BuiltFile:
        """Build the SPDX record for ``source``.

        Args:
            source: Absolute path of the file on disk.
            output_path: Path of the file relative to the output archive root.
            information: Resolved default information for the file.
            package: Package the file belongs to.
            relationship_type: Relationship from the file to ``package``.

        Returns:
            BuiltFile: File record, bound snippet records and distinct licenses.

        Raises:
            SpdxCollectionError: If checksums, license parsing or record
                construction fail.
        """

        name = convert_file_path_to_spdx_file_name(output_path)
        file_types = (self.classifier.classify(file_extension(source)),)
        draft = _FileRecordDraft(
            name=name,
            file_types=file_types,
            sha1=generate_sha1(source),
            license_comment=information.license_comment,
        )
        for algorithm in self.optional_checksums:
            draft.checksums[algorithm] = generate_optional_checksum(source, algorithm)

        embedded = self._embedded_licenses(source, file_types)
        if embedded:
            license_info = conjunction(embedded)
            draft.license_declared = license_info
            draft.license_concluded = license_info
            draft.append_license_comment(f"{EMBEDDED_LICENSE_COMMENT_PREFIX}{license_info}")
        else:
            draft.license_declared = self._parse_license(information.declared_license, context=name)
            draft.license_concluded = self._parse_license(information.concluded_license, context=name)

        draft.copyright_text = information.copyright
        draft.notice_text = information.notice
        draft.comment = information.comment
        draft.contributors = information.contributors
        draft.relationships.append(self._relationship(package, relationship_type))

        try:
            record = draft.finalize()
        except ValidationError as exc:
            LOGGER.error("Spdx exception creating file %s: %s", name, exc)
            raise RecordConstructionError(f"Error creating SPDX file: {exc}") from exc

        snippets = tuple(self._build_snippets(information.snippets, record, source))
        licenses = _distinct((*record.license_info_in_file, record.license_concluded))
        return BuiltFile(record=record, snippets=snippets, licenses=licenses)

    def _embedded_licenses(self, source: Path, file_types: tuple[FileType, ...]) -> list[LicenseExpression]:
        """Return licenses declared inside ``source`` when it is a small source file."""

        if FileType.SOURCE not in file_types:
            return []
        try:
            size = source.stat().st_size
        except OSError as exc:
            LOGGER.warning("Unable to determine the size of %s; skipping SPDX license scan: %s", source, exc)
            return []
        if size >= self.max_source_file_length:
            LOGGER.debug("Skipping SPDX license scan of %s (%d bytes)", source, size)
            return []
        try:
            return list(self.scanner.scan(source))
        except SourceScanError as exc:
            LOGGER.error("Error parsing for SPDX license ID's in %s: %s", source, exc)
            return []

    def _parse_license(self, text: str, *, context: str) -> LicenseExpression:
        """Parse ``text`` with the configured parser, naming ``context`` on failure."""

        try:
            return self.parser(text)
        except InvalidLicenseStringError as exc:
            LOGGER.error("Invalid license string for %s: %s", context, exc)
            raise InvalidLicenseStringError(f"{context}: {exc}") from exc

    def _relationship(self, package: SpdxElement, relationship_type: RelationshipType) -> Relationship:
        """Create the relationship from a file to its owning ``package``."""

        try:
            return Relationship(
                related_spdx_element=getattr(package, "spdx_id", None),
                relationship_type=relationship_type,
            )
        except ValidationError as exc:
            LOGGER.error("Spdx exception creating file relationship: %s", exc)
            raise RecordConstructionError(f"Error creating SPDX file relationship: {exc}") from exc

    def _build_snippets(
        self,
        snippets: Iterable[SnippetInfo],
        record: FileRecord,
        source: Path,
    ) -> list[SnippetRecord]:
        """Convert snippet descriptors into records bound to ``record``."""

        built: list[SnippetRecord] = []
        bounds: tuple[int, int] | None = None
        for snippet in snippets:
            if bounds is None:
                bounds = self._file_bounds(source)
            built.append(self._build_snippet(snippet, record, bounds))
        return built

    def _file_bounds(self, source: Path) -> tuple[int, int]:
        """Return the byte size and line count snippet ranges are checked against."""

        try:
            return source.stat().st_size, count_lines(source)
        except OSError as exc:
            raise RecordConstructionError(f"Error creating SPDX snippet information for {source}: {exc}") from exc

    def _build_snippet(
        self,
        snippet: SnippetInfo,
        record: FileRecord,
        bounds: tuple[int, int],
    ) -> SnippetRecord:
        """Convert one snippet descriptor.

        Raises:
            InvalidLicenseStringError: If a snippet license string does not parse.
            RecordConstructionError: If ranges or other fields are invalid.
        """

        try:
            concluded = self.parser(snippet.concluded_license)
            in_snippet = self.parser(snippet.license_info_in_snippet)
        except InvalidLicenseStringError as exc:
            LOGGER.error("Invalid license string creating snippet %s: %s", snippet.name, exc)
            raise InvalidLicenseStringError(
                "Error processing SPDX snippet information.  Invalid license string specified in snippet "
                f"{snippet.name}: {exc}",
            ) from exc
        byte_size, line_count = bounds
        try:
            byte_range = SnippetRange.parse(snippet.byte_range)
            _check_within(byte_range, byte_size, unit="byte")
            line_range = None
            if snippet.line_range is not None:
                line_range = SnippetRange.parse(snippet.line_range)
                _check_within(line_range, line_count, unit="line")
            return SnippetRecord(
                name=snippet.name,
                comment=snippet.comment,
                license_concluded=concluded,
                license_info_in_snippet=(in_snippet,),
                copyright_text=snippet.copyright_text,
                license_comment=snippet.license_comment,
                snippet_from_file=record.name,
                byte_range=byte_range,
                line_range=line_range,
            )
        except ValueError as exc:
            LOGGER.error("Error creating SPDX snippet %s: %s", snippet.name, exc)
            raise RecordConstructionError(f"Error creating SPDX snippet information for {snippet.name}: {exc}") from exc


def _check_within(snippet_range: SnippetRange, limit: int, *, unit: str) -> None:
    """Ensure ``snippet_range`` ends inside a file of ``limit`` units.

    Raises:
        ValueError: If the range ends past ``limit``.
    """

    if snippet_range.end > limit:
        raise ValueError(f"{unit} range {snippet_range} extends beyond the file ({limit} {unit}s)")


__all__ = ["BuiltFile", "FileRecordBuilder", "count_lines"]
