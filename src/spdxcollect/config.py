# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Collector settings and their loading from ``pyproject.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import MAXIMUM_SOURCE_FILE_LENGTH, OPTIONAL_CHECKSUM_ALGORITHMS
from .errors import ConfigError
from .models import RelationshipType
from .paths import convert_file_path_to_spdx_file_name

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "spdxcollect"


class CollectorSettings(BaseModel):
    """Tunable behaviour of a file collection session."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_source_file_length: int = Field(default=MAXIMUM_SOURCE_FILE_LENGTH, gt=0)
    optional_checksums: tuple[str, ...] = Field(default_factory=tuple)
    relationship_type: RelationshipType = RelationshipType.GENERATED_FROM
    excluded_file_names: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("optional_checksums")
    @classmethod
    def _check_algorithms(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Reject optional checksum algorithms outside the supported list.

        Args:
            value: Requested algorithm names.

        Returns:
            tuple[str, ...]: Requested names with duplicates removed.
        """

        unsupported = [algorithm for algorithm in value if algorithm not in OPTIONAL_CHECKSUM_ALGORITHMS]
        if unsupported:
            raise ValueError(
                f"unsupported checksum algorithm(s) {', '.join(unsupported)}; "
                f"expected any of {', '.join(OPTIONAL_CHECKSUM_ALGORITHMS)}",
            )
        return tuple(dict.fromkeys(value))

    @field_validator("excluded_file_names")
    @classmethod
    def _normalise_excluded(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Convert excluded names to SPDX file names so they match collected records.

        Args:
            value: Configured names, with or without the ``./`` prefix.

        Returns:
            tuple[str, ...]: ``./`` prefixed, forward-slash names without duplicates.
        """

        return tuple(dict.fromkeys(convert_file_path_to_spdx_file_name(name) for name in value))


def settings_from_mapping(data: Mapping[str, Any]) -> CollectorSettings:
    """Validate ``data`` into collector settings.

    Raises:
        ConfigError: If ``data`` contains unknown keys or invalid values.
    """

    normalised = {str(key).replace("-", "_"): value for key, value in data.items()}
    try:
        return CollectorSettings.model_validate(normalised)
    except ValidationError as exc:
        raise ConfigError(f"Invalid spdxcollect settings: {exc}") from exc


def load_settings(root: Path) -> CollectorSettings:
    """Load the ``[tool.spdxcollect]`` table from ``root/pyproject.toml``.

    Args:
        root: Project directory containing ``pyproject.toml``.

    Returns:
        CollectorSettings: Parsed settings, or defaults when the file or table is absent.

    Raises:
        ConfigError: If the file cannot be parsed or the table is invalid.
    """

    pyproject = root / PYPROJECT_FILENAME
    if not pyproject.is_file():
        return CollectorSettings()
    try:
        with pyproject.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read {pyproject}: {exc}") from exc
    tool_table = data.get(PYPROJECT_TOOL_KEY, {})
    section = tool_table.get(PYPROJECT_SECTION_KEY) if isinstance(tool_table, Mapping) else None
    if section is None:
        return CollectorSettings()
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {pyproject} must be a table")
    return settings_from_mapping(section)


__all__ = ["CollectorSettings", "load_settings", "settings_from_mapping"]
