# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the rich collection summary."""

from __future__ import annotations

import io
from collections.abc import Callable

from rich.console import Console

from spdxcollect.classifier import FileType
from spdxcollect.collector import SpdxFileCollector
from spdxcollect.entries import FileEntry
from spdxcollect.models import DefaultFileInformation, PackageRef
from spdxcollect.reporting import compute_collection_snapshot, emit_collection_summary


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None, force_terminal=False), buffer


def test_snapshot_counts_types_and_licenses(
    collector: SpdxFileCollector,
    write_file: Callable[[str, str], FileEntry],
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    collector.collect_files(
        [
            write_file("src/Main.java", "// SPDX-License-Identifier: MIT\n"),
            write_file("lib/demo.jar", "jar"),
            write_file("README", "readme"),
        ],
        default_information,
        package,
    )

    snapshot = compute_collection_snapshot(collector)

    assert snapshot.files_count == 3
    assert snapshot.snippets_count == 0
    assert snapshot.licenses_count == 2
    assert snapshot.type_counts == {
        FileType.SOURCE: 1,
        FileType.BINARY: 0,
        FileType.ARCHIVE: 1,
        FileType.OTHER: 1,
    }
    assert snapshot.verification_code == collector.verification_code()


def test_emit_collection_summary_renders_files_and_panel(
    collector: SpdxFileCollector,
    write_file: Callable[[str, str], FileEntry],
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entry = write_file("src/Main.java", "class Main {}\n")
    record = collector.collect_file(entry, default_information, package)
    console, buffer = _console()

    snapshot = emit_collection_summary(collector, console=console)

    output = buffer.getvalue()
    assert "spdx files" in output
    assert "./src/Main.java" in output
    assert record.sha1 in output
    assert "Apache-2.0" in output
    assert snapshot.verification_code.value in output


def test_emit_collection_summary_can_hide_file_table(
    collector: SpdxFileCollector,
    write_file: Callable[[str, str], FileEntry],
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entry = write_file("doc.spdx", "SPDXVersion: SPDX-2.3\n")
    collector.collect_file(entry, default_information, package)
    console, buffer = _console()

    emit_collection_summary(collector, console=console, show_files=False, spdx_file_path=entry.source)

    output = buffer.getvalue()
    assert "Concluded license" not in output
    assert "./doc.spdx" in output
