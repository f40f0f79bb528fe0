# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the file collection session."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

import pytest
from pydantic import ValidationError

from spdxcollect.classifier import ExtensionClassifier
from spdxcollect.collector import SpdxFileCollector
from spdxcollect.config import CollectorSettings
from spdxcollect.entries import FileEntry
from spdxcollect.errors import ChecksumIOError, CollectionErrorKind, InvalidLicenseStringError
from spdxcollect.expressions import LicenseId
from spdxcollect.models import DefaultFileInformation, PackageRef, RelationshipType, SnippetInfo

WriteFile = Callable[[str, str | bytes], FileEntry]


def test_collect_files_builds_one_record_per_file(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entries = [
        write_file("src/Main.java", "// SPDX-License-Identifier: MIT\nclass Main {}\n"),
        write_file("README.txt", "readme\n"),
    ]

    collector.collect_files(entries, default_information, package)

    names = sorted(record.name for record in collector.files)
    assert names == ["./README.txt", "./src/Main.java"]
    assert collector.license_info_from_files == frozenset({LicenseId("MIT"), LicenseId("Apache-2.0")})
    for record in collector.files:
        (relationship,) = record.relationships
        assert relationship.relationship_type is RelationshipType.GENERATED_FROM


def test_collecting_the_same_file_twice_is_a_no_op(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entry = write_file("src/Main.java", "class Main {}\n")
    first = collector.collect_file(entry, default_information, package)
    other_information = DefaultFileInformation(declared_license="MIT", concluded_license="MIT")

    second = collector.collect_file(entry, other_information, package)
    collector.collect_files([entry], other_information, package)

    assert second is first
    assert len(collector.files) == 1
    assert collector.get_file(entry.source) is first
    assert collector.license_info_from_files == frozenset({LicenseId("Apache-2.0")})


def test_path_specific_information_uses_closest_match(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entries = [
        write_file("src/vendor/lib.c", "int lib;\n"),
        write_file("src/vendor/special/one.c", "int one;\n"),
        write_file("src/app.c", "int app;\n"),
    ]
    overrides = {
        "./src/vendor/": DefaultFileInformation(declared_license="MIT", concluded_license="MIT"),
        "src/vendor/special/one.c": DefaultFileInformation(
            declared_license="BSD-2-Clause",
            concluded_license="BSD-2-Clause",
        ),
    }

    collector.collect_files(entries, default_information, package, path_specific_information=overrides)

    concluded = {record.name: record.license_concluded for record in collector.files}
    assert concluded == {
        "./src/vendor/lib.c": LicenseId("MIT"),
        "./src/vendor/special/one.c": LicenseId("BSD-2-Clause"),
        "./src/app.c": LicenseId("Apache-2.0"),
    }


def test_failure_aborts_but_keeps_earlier_records(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
    tmp_path: Path,
) -> None:
    good = write_file("good.txt", "good\n")
    missing = FileEntry(source=tmp_path / "missing.txt", output_path="missing.txt")
    never = write_file("never.txt", "never\n")

    with pytest.raises(ChecksumIOError) as excinfo:
        collector.collect_files([good, missing, never], default_information, package)

    assert excinfo.value.kind is CollectionErrorKind.IO_FAILURE
    assert [record.name for record in collector.files] == ["./good.txt"]


def test_invalid_override_license_aborts_collection(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entry = write_file("docs/guide.txt", "guide\n")
    overrides = {"docs": DefaultFileInformation(declared_license="MIT OR", concluded_license="MIT")}

    with pytest.raises(InvalidLicenseStringError):
        collector.collect_files([entry], default_information, package, path_specific_information=overrides)

    assert collector.files == ()


def test_relationship_type_can_be_overridden(
    classifier: ExtensionClassifier,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    collector = SpdxFileCollector(
        settings=CollectorSettings(relationship_type=RelationshipType.CONTAINED_BY),
        classifier=classifier,
    )
    configured = collector.collect_file(write_file("a.txt", "a\n"), default_information, package)
    explicit = collector.collect_file(
        write_file("b.txt", "b\n"),
        default_information,
        package,
        relationship_type=RelationshipType.DESCRIBED_BY,
    )

    assert configured.relationships[0].relationship_type is RelationshipType.CONTAINED_BY
    assert explicit.relationships[0].relationship_type is RelationshipType.DESCRIBED_BY


def test_optional_checksums_follow_settings(
    classifier: ExtensionClassifier,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    collector = SpdxFileCollector(settings=CollectorSettings(optional_checksums=("SHA-256",)), classifier=classifier)

    record = collector.collect_file(write_file("a.txt", "a\n"), default_information, package)

    assert [algorithm for algorithm, _ in record.checksums] == ["SHA-256"]


def test_collected_records_cannot_be_modified(
    classifier: ExtensionClassifier,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    collector = SpdxFileCollector(settings=CollectorSettings(optional_checksums=("SHA-256",)), classifier=classifier)
    collector.collect_file(write_file("a.bin", b"\x00\x01"), default_information, package)
    (record,) = collector.files
    digest = record.checksum("SHA-256")

    with pytest.raises(TypeError):
        record.checksums[0] = ("SHA-256", "0")  # type: ignore[index]
    with pytest.raises(ValidationError):
        record.checksums = ()  # type: ignore[misc]

    assert collector.files[0].checksum("SHA-256") == digest
    assert hash(record) == hash(collector.files[0])
    assert {record} == set(collector.files)


def test_snippets_accumulate_across_files(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    package: PackageRef,
) -> None:
    information = DefaultFileInformation(snippets=(SnippetInfo(name="head", byte_range="0:1"),))

    collector.collect_files([write_file("a.txt", "a\n"), write_file("b.txt", "b\n")], information, package)

    assert sorted(snippet.snippet_from_file for snippet in collector.snippets) == ["./a.txt", "./b.txt"]


def test_verification_code_is_independent_of_scan_order(
    classifier: ExtensionClassifier,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entries = [write_file(f"file{index}.txt", f"content {index}\n") for index in range(5)]
    forward = SpdxFileCollector(classifier=classifier)
    backward = SpdxFileCollector(classifier=classifier)

    forward.collect_files(entries, default_information, package)
    backward.collect_files(reversed(entries), default_information, package)

    assert forward.verification_code() == backward.verification_code()


def test_verification_code_excludes_spdx_document(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    code_entry = write_file("src/a.c", "int a;\n")
    document = write_file("demo.spdx", "SPDXVersion: SPDX-2.3\n")
    collector.collect_files([code_entry], default_information, package)
    without_document = collector.verification_code()

    collector.collect_files([document], default_information, package)
    excluded = collector.verification_code(document.source)

    assert excluded.value == without_document.value
    assert excluded.excluded_file_names == ("./demo.spdx",)
    assert collector.verification_code().value != without_document.value


def test_verification_code_ignores_uncollected_document(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
    tmp_path: Path,
) -> None:
    collector.collect_files([write_file("a.txt", "a\n")], default_information, package)

    code = collector.verification_code(tmp_path / "never-collected.spdx")

    assert code.excluded_file_names == ()


def test_configured_exclusions_apply(
    classifier: ExtensionClassifier,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    collector = SpdxFileCollector(
        settings=CollectorSettings(excluded_file_names=("./b.txt",)),
        classifier=classifier,
    )
    reference = SpdxFileCollector(classifier=classifier)
    collector.collect_files([write_file("a.txt", "a\n"), write_file("b.txt", "b\n")], default_information, package)
    reference.collect_files([write_file("a.txt", "a\n")], default_information, package)

    code = collector.verification_code()

    assert code.value == reference.verification_code().value
    assert code.excluded_file_names == ("./b.txt",)


def test_configured_exclusions_match_names_without_prefix(
    classifier: ExtensionClassifier,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    collector = SpdxFileCollector(
        settings=CollectorSettings(excluded_file_names=("package.spdx", "docs\\notes.txt")),
        classifier=classifier,
    )
    reference = SpdxFileCollector(classifier=classifier)
    entries = [write_file("a.txt", "a\n"), write_file("package.spdx", "doc\n"), write_file("docs/notes.txt", "n\n")]
    collector.collect_files(entries, default_information, package)
    reference.collect_files(entries[:1], default_information, package)

    code = collector.verification_code()

    assert code.value == reference.verification_code().value
    assert code.excluded_file_names == ("./package.spdx", "./docs/notes.txt")


def test_concurrent_collection_keeps_one_record_per_file(
    collector: SpdxFileCollector,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    entries = [write_file(f"f{index}.txt", f"{index}\n") for index in range(20)]

    threads = [
        threading.Thread(target=collector.collect_files, args=(entries, default_information, package))
        for _ in range(4)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(collector.files) == 20


def test_for_project_reads_pyproject_settings(
    tmp_path: Path,
    classifier: ExtensionClassifier,
    write_file: WriteFile,
    default_information: DefaultFileInformation,
    package: PackageRef,
) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.spdxcollect]\nmax-source-file-length = 8\noptional-checksums = ["SHA-256"]\n',
        encoding="utf-8",
    )
    collector = SpdxFileCollector.for_project(tmp_path, classifier=classifier)

    record = collector.collect_file(
        write_file("Main.java", "// SPDX-License-Identifier: MIT\n"),
        default_information,
        package,
    )

    assert collector.settings.max_source_file_length == 8
    assert record.license_concluded == LicenseId("Apache-2.0")
    assert [algorithm for algorithm, _ in record.checksums] == ["SHA-256"]
