# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from spdxcollect.classifier import ExtensionClassifier
from spdxcollect.collector import SpdxFileCollector
from spdxcollect.entries import FileEntry
from spdxcollect.models import DefaultFileInformation, PackageRef


@pytest.fixture
def classifier() -> ExtensionClassifier:
    """Return a small classifier covering the extensions used in tests."""
    return ExtensionClassifier.from_extensions(
        source=("java", "py", "c", "h"),
        binary=("class", "so"),
        archive=("jar", "zip"),
    )


@pytest.fixture
def package() -> PackageRef:
    """Return the package handle files are related to."""
    return PackageRef(spdx_id="SPDXRef-Package", name="demo")


@pytest.fixture
def default_information() -> DefaultFileInformation:
    """Return package wide defaults licensed under Apache-2.0."""
    return DefaultFileInformation(
        declared_license="Apache-2.0",
        concluded_license="Apache-2.0",
        copyright="Copyright (c) 2025 Demo Authors",
        notice="Demo notice",
        comment="Demo file",
        contributors=("Alice", "Bob"),
    )


@pytest.fixture
def collector(classifier: ExtensionClassifier) -> SpdxFileCollector:
    """Return a fresh collection session."""
    return SpdxFileCollector(classifier=classifier)


@pytest.fixture
def write_file(tmp_path: Path):
    """Return a helper writing ``content`` under ``tmp_path`` and building its entry."""

    def _write(relative: str, content: str | bytes) -> FileEntry:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return FileEntry(source=path, output_path=relative)

    return _write
