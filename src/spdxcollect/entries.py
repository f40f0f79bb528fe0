# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Input descriptors for files handed to the collector."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .paths import strip_spdx_prefix


@dataclass(frozen=True, slots=True)
class FileEntry:
    """One file to collect.

    Attributes:
        source: Absolute path of the file on disk.
        output_path: Path of the file relative to the root of the output archive.
        relative_path: Path used to look up path specific information; defaults
            to ``output_path`` without any ``./`` prefix.
    """

    source: Path
    output_path: str
    relative_path: str | None = None

    @property
    def lookup_path(self) -> str:
        """Return the ``/`` separated path used for override resolution."""

        if self.relative_path is not None:
            return strip_spdx_prefix(self.relative_path)
        return strip_spdx_prefix(self.output_path)


def _relative_posix(path: Path, base_dir: Path) -> str:
    """Return ``path`` relative to ``base_dir`` as a POSIX string."""

    try:
        return path.relative_to(base_dir).as_posix()
    except ValueError:
        return Path(os.path.relpath(path, base_dir)).as_posix()


def file_set_entries(
    directory: Path,
    included_files: Iterable[str | Path],
    *,
    base_dir: Path,
    output_directory: str | None = None,
) -> list[FileEntry]:
    """Build entries for files already selected from ``directory``.

    Args:
        directory: Directory the included file names are relative to.
        included_files: Relative names of the selected files.
        base_dir: Project base directory; override lookups are relative to it.
        output_directory: Archive directory the files are placed under. When
            omitted the output path is the path relative to ``base_dir``.

    Returns:
        list[FileEntry]: Entries in the order of ``included_files``.
    """

    base = base_dir.absolute()
    entries: list[FileEntry] = []
    for included in included_files:
        source = (directory / included).absolute()
        relative = _relative_posix(source, base)
        if output_directory:
            output_path = f"{output_directory.rstrip('/')}/{Path(included).as_posix()}"
        else:
            output_path = relative
        entries.append(FileEntry(source=source, output_path=output_path, relative_path=relative))
    return entries


__all__ = ["FileEntry", "file_set_entries"]
