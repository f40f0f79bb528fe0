# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for turning filesystem paths into SPDX file names."""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .constants import SPDX_FILE_NAME_PREFIX

_Pathish = str | PathLike[str] | Path


def convert_file_path_to_spdx_file_name(file_path: _Pathish) -> str:
    """Return the SPDX file name for a system specific relative path.

    Backslashes become forward slashes and ``./`` is prepended when absent, so
    applying the conversion twice yields the same value.

    Args:
        file_path: Path relative to the root of the output archive.

    Returns:
        str: Forward-slash separated name prefixed with ``./``.
    """

    result = str(file_path).replace("\\", "/")
    if not result.startswith(SPDX_FILE_NAME_PREFIX):
        result = SPDX_FILE_NAME_PREFIX + result
    return result


def strip_spdx_prefix(name: str) -> str:
    """Return ``name`` with backslashes normalised and any leading ``./`` removed."""

    result = name.replace("\\", "/")
    while result.startswith(SPDX_FILE_NAME_PREFIX):
        result = result[len(SPDX_FILE_NAME_PREFIX) :]
    return result


def path_segments(relative_path: str) -> tuple[str, ...]:
    """Split ``relative_path`` into its non-empty ``/`` separated segments.

    Args:
        relative_path: Relative path using either separator, optionally prefixed with ``./``.

    Returns:
        tuple[str, ...]: Ordered path segments without ``.`` or empty entries.
    """

    normalised = strip_spdx_prefix(relative_path)
    return tuple(segment for segment in normalised.split("/") if segment and segment != ".")


def file_extension(path: _Pathish) -> str:
    """Return the extension of the file name in ``path`` without the dot.

    Names without a dot, or whose only dot is the leading character (for
    example ``.gitignore``), have no extension.
    """

    name = Path(path).name
    last_dot = name.rfind(".")
    if last_dot < 1:
        return ""
    return name[last_dot + 1 :]


__all__ = [
    "convert_file_path_to_spdx_file_name",
    "file_extension",
    "path_segments",
    "strip_spdx_prefix",
]
