# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Immutable SPDX records produced and consumed by the file collector."""

from __future__ import annotations

import re
from abc import abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Final, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .classifier import FileType
from .constants import NOASSERTION, SPDX_FILE_NAME_PREFIX
from .expressions import LicenseExpression

_SHA1_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-f]{40}$")
_HEX_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-f]+$")
_SPDX_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^SPDXRef-[A-Za-z0-9.\-]+$")
_RANGE_SEPARATOR: Final[str] = ":"


class RelationshipType(str, Enum):
    """Enumerate SPDX relationship types usable between a file and its package."""

    GENERATED_FROM = "GENERATED_FROM"
    CONTAINS = "CONTAINS"
    CONTAINED_BY = "CONTAINED_BY"
    DESCRIBES = "DESCRIBES"
    DESCRIBED_BY = "DESCRIBED_BY"
    DEPENDS_ON = "DEPENDS_ON"
    DEPENDENCY_OF = "DEPENDENCY_OF"
    GENERATES = "GENERATES"
    DISTRIBUTION_ARTIFACT = "DISTRIBUTION_ARTIFACT"
    OTHER = "OTHER"


@runtime_checkable
class SpdxElement(Protocol):
    """Expose the identifier of an SPDX element a file can relate to."""

    @property
    @abstractmethod
    def spdx_id(self) -> str:
        """Return the element's SPDX identifier (``SPDXRef-...``)."""


class PackageRef(BaseModel):
    """Lightweight handle to the package that owns collected files."""

    model_config = ConfigDict(frozen=True)

    spdx_id: str
    name: str = ""


class Relationship(BaseModel):
    """Typed link from a file record to another SPDX element."""

    model_config = ConfigDict(frozen=True)

    related_spdx_element: str
    relationship_type: RelationshipType
    comment: str = ""

    @field_validator("related_spdx_element")
    @classmethod
    def _check_spdx_id(cls, value: str) -> str:
        """Ensure the related element carries a well-formed SPDX identifier."""

        if not _SPDX_ID_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a valid SPDX element identifier")
        return value


class SnippetRange(BaseModel):
    """Inclusive start/end pointer pair inside a file."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> SnippetRange:
        """Reject ranges whose start lies after their end."""

        if self.start > self.end:
            raise ValueError(f"range start {self.start} is after range end {self.end}")
        return self

    @classmethod
    def parse(cls, text: str) -> SnippetRange:
        """Parse a ``start:end`` range string.

        Raises:
            ValueError: If ``text`` is not two integers separated by ``:``.
        """

        start_text, separator, end_text = text.strip().partition(_RANGE_SEPARATOR)
        if not separator:
            raise ValueError(f"range '{text}' must have the form start:end")
        try:
            start, end = int(start_text), int(end_text)
        except ValueError as exc:
            raise ValueError(f"range '{text}' must contain integer offsets") from exc
        return cls(start=start, end=end)

    def __str__(self) -> str:
        return f"{self.start}{_RANGE_SEPARATOR}{self.end}"


class SnippetInfo(BaseModel):
    """Snippet descriptor supplied alongside default file information."""

    model_config = ConfigDict(frozen=True)

    name: str
    comment: str | None = None
    concluded_license: str = NOASSERTION
    license_info_in_snippet: str = NOASSERTION
    copyright_text: str = NOASSERTION
    license_comment: str | None = None
    byte_range: str
    line_range: str | None = None


class DefaultFileInformation(BaseModel):
    """Default SPDX field values applied to files under a package or path."""

    model_config = ConfigDict(frozen=True)

    declared_license: str = NOASSERTION
    concluded_license: str = NOASSERTION
    copyright: str = NOASSERTION
    notice: str = ""
    comment: str = ""
    license_comment: str | None = None
    contributors: tuple[str, ...] = Field(default_factory=tuple)
    snippets: tuple[SnippetInfo, ...] = Field(default_factory=tuple)


class FileRecord(BaseModel):
    """SPDX file information for one collected file."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    file_types: tuple[FileType, ...] = Field(min_length=1)
    sha1: str
    checksums: tuple[tuple[str, str], ...] = Field(default_factory=tuple)
    license_concluded: LicenseExpression
    license_info_in_file: tuple[LicenseExpression, ...] = Field(min_length=1)
    license_comment: str | None = None
    copyright_text: str = NOASSERTION
    notice_text: str = ""
    comment: str = ""
    contributors: tuple[str, ...] = Field(default_factory=tuple)
    relationships: tuple[Relationship, ...] = Field(default_factory=tuple)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        """Ensure the file name is an SPDX relative name."""

        if "\\" in value:
            raise ValueError(f"file name '{value}' must not contain backslashes")
        if not value.startswith(SPDX_FILE_NAME_PREFIX):
            raise ValueError(f"file name '{value}' must start with '{SPDX_FILE_NAME_PREFIX}'")
        return value

    @field_validator("sha1")
    @classmethod
    def _check_sha1(cls, value: str) -> str:
        """Ensure the SHA-1 checksum is 40 lowercase hex characters."""

        if not _SHA1_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a lowercase hex SHA-1 checksum")
        return value

    @field_validator("checksums", mode="before")
    @classmethod
    def _freeze_checksums(cls, value: object) -> object:
        """Accept ``algorithm -> digest`` mappings by converting them to pairs."""

        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @field_validator("checksums")
    @classmethod
    def _check_checksums(cls, value: tuple[tuple[str, str], ...]) -> tuple[tuple[str, str], ...]:
        """Ensure optional checksum values are lowercase hex strings, one per algorithm.

        Args:
            value: ``(algorithm, digest)`` pairs in computation order.

        Returns:
            tuple[tuple[str, str], ...]: The validated pairs.
        """

        seen: set[str] = set()
        for algorithm, digest in value:
            if algorithm in seen:
                raise ValueError(f"duplicate {algorithm} checksum")
            seen.add(algorithm)
            if not _HEX_PATTERN.match(digest):
                raise ValueError(f"{algorithm} checksum '{digest}' is not lowercase hex")
        return value

    def checksum(self, algorithm: str) -> str | None:
        """Return the optional ``algorithm`` digest, or ``None`` when it was not computed."""

        for name, digest in self.checksums:
            if name == algorithm:
                return digest
        return None

    def is_source(self) -> bool:
        """Return ``True`` when the file was classified as source."""

        return FileType.SOURCE in self.file_types


class SnippetRecord(BaseModel):
    """SPDX snippet information bound to a collected file."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    comment: str | None = None
    license_concluded: LicenseExpression
    license_info_in_snippet: tuple[LicenseExpression, ...] = Field(min_length=1)
    copyright_text: str = NOASSERTION
    license_comment: str | None = None
    snippet_from_file: str
    byte_range: SnippetRange
    line_range: SnippetRange | None = None


class PackageVerificationCode(BaseModel):
    """Digest over all included file checksums of a package."""

    model_config = ConfigDict(frozen=True)

    value: str
    excluded_file_names: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("value")
    @classmethod
    def _check_value(cls, value: str) -> str:
        """Ensure the verification code is a lowercase hex SHA-1 digest."""

        if not _SHA1_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a lowercase hex SHA-1 digest")
        return value


__all__ = [
    "DefaultFileInformation",
    "FileRecord",
    "PackageRef",
    "PackageVerificationCode",
    "Relationship",
    "RelationshipType",
    "SnippetInfo",
    "SnippetRange",
    "SnippetRecord",
    "SpdxElement",
]
