# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve path specific default file information."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .models import DefaultFileInformation
from .paths import path_segments

LOGGER = logging.getLogger(__name__)


def resolve_file_information(
    relative_path: str,
    overrides: Mapping[str, DefaultFileInformation] | None,
) -> DefaultFileInformation | None:
    """Return the most specific override applying to ``relative_path``.

    The exact path is tried first, then each enclosing directory from the
    closest to the outermost. The first match wins.

    Args:
        relative_path: ``/`` separated path of the file relative to the project.
        overrides: Mapping of file or directory paths to override information.

    Returns:
        DefaultFileInformation | None: Matching override, or ``None`` when no
        path applies and the package default should be used.
    """

    if not overrides:
        return None
    LOGGER.debug("Checking for file path %s", relative_path)
    segments = path_segments(relative_path)
    for count in range(len(segments), 0, -1):
        candidate = "/".join(segments[:count])
        information = overrides.get(candidate)
        if information is None:
            continue
        if count == len(segments):
            LOGGER.debug("Found file path %s", candidate)
        else:
            LOGGER.debug("Found directory %s containing file path %s", candidate, relative_path)
        return information
    return None


def resolve_or_default(
    relative_path: str,
    overrides: Mapping[str, DefaultFileInformation] | None,
    default: DefaultFileInformation,
) -> DefaultFileInformation:
    """Return the override for ``relative_path`` or ``default`` when none applies."""

    information = resolve_file_information(relative_path, overrides)
    return default if information is None else information


__all__ = ["resolve_file_information", "resolve_or_default"]
