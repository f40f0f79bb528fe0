# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Map file extensions to coarse SPDX file types."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Final

LOGGER = logging.getLogger(__name__)

RESOURCES_DIR: Final[Path] = Path(__file__).resolve().parent / "resources"
FILE_TYPES_RESOURCE: Final[str] = "file_types.toml"
SOURCE_KEY: Final[str] = "source"
BINARY_KEY: Final[str] = "binary"
ARCHIVE_KEY: Final[str] = "archive"


class FileType(str, Enum):
    """Enumerate the SPDX file types assigned by extension."""

    SOURCE = "SOURCE"
    BINARY = "BINARY"
    ARCHIVE = "ARCHIVE"
    OTHER = "OTHER"


def _normalise_extensions(values: Iterable[str]) -> frozenset[str]:
    """Return upper-cased, trimmed extensions with any leading dot removed."""

    normalised = (value.strip().lstrip(".").upper() for value in values)
    return frozenset(value for value in normalised if value)


@dataclass(frozen=True, slots=True)
class ExtensionClassifier:
    """Immutable extension tables used to classify collected files."""

    source_extensions: frozenset[str] = field(default_factory=frozenset)
    binary_extensions: frozenset[str] = field(default_factory=frozenset)
    archive_extensions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_extensions(
        cls,
        *,
        source: Iterable[str] = (),
        binary: Iterable[str] = (),
        archive: Iterable[str] = (),
    ) -> ExtensionClassifier:
        """Build a classifier from raw extension lists.

        Args:
            source: Extensions classified as source files.
            binary: Extensions classified as binary files.
            archive: Extensions classified as archives.

        Returns:
            ExtensionClassifier: Classifier with case-normalised tables.
        """

        return cls(
            source_extensions=_normalise_extensions(source),
            binary_extensions=_normalise_extensions(binary),
            archive_extensions=_normalise_extensions(archive),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> ExtensionClassifier:
        """Build a classifier from a parsed ``file_types`` table.

        Raises:
            ValueError: If any table is not a list of strings.
        """

        tables: dict[str, tuple[str, ...]] = {}
        for key in (SOURCE_KEY, BINARY_KEY, ARCHIVE_KEY):
            raw = data.get(key, ())
            if isinstance(raw, str) or not isinstance(raw, Iterable):
                raise ValueError(f"'{key}' must be a list of extensions")
            values = tuple(raw)
            if not all(isinstance(value, str) for value in values):
                raise ValueError(f"'{key}' must only contain strings")
            tables[key] = values
        return cls.from_extensions(
            source=tables[SOURCE_KEY],
            binary=tables[BINARY_KEY],
            archive=tables[ARCHIVE_KEY],
        )

    def classify(self, extension: str | None) -> FileType:
        """Return the file type for ``extension`` (case-insensitive).

        Args:
            extension: File extension without the leading dot.

        Returns:
            FileType: Matching type, or ``FileType.OTHER`` when unknown or empty.
        """

        if not extension:
            return FileType.OTHER
        upper_extension = extension.upper()
        if upper_extension in self.source_extensions:
            return FileType.SOURCE
        if upper_extension in self.binary_extensions:
            return FileType.BINARY
        if upper_extension in self.archive_extensions:
            return FileType.ARCHIVE
        return FileType.OTHER


def load_classifier(resource: str = FILE_TYPES_RESOURCE) -> ExtensionClassifier:
    """Load extension tables from a resource bundled with the package.

    Any failure is logged and results in an empty classifier, which maps every
    extension to ``FileType.OTHER``.
    """

    try:
        with (RESOURCES_DIR / resource).open("rb") as handle:
            return ExtensionClassifier.from_mapping(tomllib.load(handle))
    except (OSError, tomllib.TOMLDecodeError, ValueError) as exc:
        LOGGER.warning(
            "Error reading file type tables from %s; all file types will be mapped to OTHER: %s",
            resource,
            exc,
        )
        return ExtensionClassifier()


@lru_cache(maxsize=1)
def load_default_classifier() -> ExtensionClassifier:
    """Return the process-wide default classifier, loading it on first use."""

    return load_classifier()


__all__ = [
    "ExtensionClassifier",
    "FileType",
    "load_classifier",
    "load_default_classifier",
]
