# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for extension based file type classification."""

from __future__ import annotations

import logging

import pytest

from spdxcollect.classifier import (
    ExtensionClassifier,
    FileType,
    load_classifier,
    load_default_classifier,
)


def test_classify_is_case_insensitive(classifier: ExtensionClassifier) -> None:
    assert classifier.classify("java") is FileType.SOURCE
    assert classifier.classify("JAVA") is FileType.SOURCE
    assert classifier.classify("Class") is FileType.BINARY
    assert classifier.classify("zip") is FileType.ARCHIVE


@pytest.mark.parametrize("extension", ["", None, "unknown"])
def test_unrecognised_extensions_are_other(classifier: ExtensionClassifier, extension: str | None) -> None:
    assert classifier.classify(extension) is FileType.OTHER


def test_from_extensions_normalises_values() -> None:
    classifier = ExtensionClassifier.from_extensions(source=(" .Py ", ""), binary=(".SO",))

    assert classifier.source_extensions == frozenset({"PY"})
    assert classifier.classify("py") is FileType.SOURCE
    assert classifier.classify("so") is FileType.BINARY


def test_from_mapping_rejects_non_list_tables() -> None:
    with pytest.raises(ValueError):
        ExtensionClassifier.from_mapping({"source": "java"})


def test_empty_classifier_maps_everything_to_other() -> None:
    classifier = ExtensionClassifier()

    assert classifier.classify("java") is FileType.OTHER
    assert classifier.classify("jar") is FileType.OTHER


def test_default_tables_load_from_package_resource() -> None:
    classifier = load_default_classifier()

    assert classifier.classify("java") is FileType.SOURCE
    assert classifier.classify("py") is FileType.SOURCE
    assert classifier.classify("class") is FileType.BINARY
    assert classifier.classify("jar") is FileType.ARCHIVE
    assert classifier.classify("txt") is FileType.OTHER
    assert load_default_classifier() is classifier


def test_missing_table_resource_degrades_to_other(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="spdxcollect.classifier"):
        classifier = load_classifier("no-such-table.toml")

    assert classifier == ExtensionClassifier()
    assert classifier.classify("java") is FileType.OTHER
    assert "all file types will be mapped to OTHER" in caplog.text
