# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich rendering of collection results."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .classifier import FileType
from .collector import SpdxFileCollector
from .models import FileRecord, PackageVerificationCode


@dataclass(slots=True)
class CollectionSnapshot:
    """Aggregated figures displayed in the collection summary panel."""

    files_count: int
    snippets_count: int
    licenses_count: int
    type_counts: dict[FileType, int]
    verification_code: PackageVerificationCode


def compute_collection_snapshot(
    collector: SpdxFileCollector,
    spdx_file_path: str | PathLike[str] | Path | None = None,
) -> CollectionSnapshot:
    """Collect the figures required to render the summary panel.

    Args:
        collector: Session whose results are summarised.
        spdx_file_path: Optional SPDX document path excluded from the verification code.

    Returns:
        CollectionSnapshot: Aggregated collection figures.
    """

    files = collector.files
    type_counts: Counter[FileType] = Counter(file_type for record in files for file_type in record.file_types)
    return CollectionSnapshot(
        files_count=len(files),
        snippets_count=len(collector.snippets),
        licenses_count=len(collector.license_info_from_files),
        type_counts={file_type: type_counts.get(file_type, 0) for file_type in FileType},
        verification_code=collector.verification_code(spdx_file_path),
    )


def create_files_table(records: Sequence[FileRecord], *, color: bool) -> Table:
    """Create a table listing collected files sorted by SPDX name."""

    table = Table(box=box.SIMPLE, pad_edge=False, expand=False)
    header_style = "bold cyan" if color else None
    table.add_column("File", style=header_style, no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("SHA-1", no_wrap=True)
    table.add_column("Concluded license")
    for record in sorted(records, key=lambda item: item.name):
        table.add_row(
            record.name,
            ", ".join(file_type.value for file_type in record.file_types),
            record.sha1,
            str(record.license_concluded),
        )
    return table


def create_summary_panel(snapshot: CollectionSnapshot, *, color: bool) -> Panel:
    """Create a Rich panel displaying collection statistics.

    Args:
        snapshot: Aggregated figures for the session.
        color: Whether colour styling should be applied.

    Returns:
        Panel: Rich panel containing the formatted figures.
    """

    table = Table(show_header=False, box=box.SIMPLE, pad_edge=False, expand=False)
    label_style = "yellow" if color else None
    value_style = "orange1" if color else None

    def styled(value: str, style: str | None) -> Text:
        """Return a Rich text entry styled when necessary."""

        return Text(value, style=style) if style else Text(value)

    table.add_column(style=label_style, justify="left", no_wrap=True)
    table.add_column(style=value_style, justify="right", no_wrap=True)
    table.add_row(styled("Files", label_style), styled(str(snapshot.files_count), value_style))
    for file_type, count in snapshot.type_counts.items():
        table.add_row(styled(f"- {file_type.value.lower()}", label_style), styled(str(count), value_style))
    table.add_row(styled("Snippets", label_style), styled(str(snapshot.snippets_count), value_style))
    table.add_row(styled("Licenses", label_style), styled(str(snapshot.licenses_count), value_style))
    table.add_row(
        styled("Verification code", label_style),
        styled(snapshot.verification_code.value, value_style),
    )
    excluded = snapshot.verification_code.excluded_file_names
    if excluded:
        table.add_row(styled("- excluded", label_style), styled(", ".join(excluded), value_style))

    title = "[yellow]spdx files[/yellow]" if color else "spdx files"
    panel = Panel.fit(table, title=title, padding=(0, 1))
    if color:
        panel.border_style = "yellow"
    return panel


def emit_collection_summary(
    collector: SpdxFileCollector,
    *,
    console: Console | None = None,
    color: bool = False,
    show_files: bool = True,
    spdx_file_path: str | PathLike[str] | Path | None = None,
) -> CollectionSnapshot:
    """Print the file table and summary panel for ``collector``.

    Returns:
        CollectionSnapshot: The figures that were rendered.
    """

    target = console if console is not None else Console(color_system="auto" if color else None)
    snapshot = compute_collection_snapshot(collector, spdx_file_path)
    if show_files:
        target.print(create_files_table(collector.files, color=color))
    target.print(create_summary_panel(snapshot, color=color))
    return snapshot


__all__ = [
    "CollectionSnapshot",
    "compute_collection_snapshot",
    "create_files_table",
    "create_summary_panel",
    "emit_collection_summary",
]
