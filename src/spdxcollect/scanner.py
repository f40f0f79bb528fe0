# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Embedded SPDX license identifier scanning for source files."""

from __future__ import annotations

import re
from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .constants import SPDX_TAG_LABEL
from .errors import InvalidLicenseStringError, SourceScanError
from .expressions import LicenseExpression, LicenseParser, parse_license_expression

SPDX_TAG_PREFIX: Final[str] = f"{SPDX_TAG_LABEL.lower()}:"
HTML_COMMENT_START: Final[str] = "<!--"
HTML_COMMENT_END: Final[str] = "-->"
C_BLOCK_COMMENT_START: Final[str] = "/*"
C_BLOCK_COMMENT_END: Final[str] = "*/"
COMMENT_PREFIXES: Final[tuple[str, ...]] = (
    "#",
    "//",
    C_BLOCK_COMMENT_START,
    "*",
    "--",
    ";",
    "%",
    "'",
    "!",
    HTML_COMMENT_START,
    "..",
    "REM ",
)
_TRAILING_DELIMITERS: Final[tuple[str, ...]] = (C_BLOCK_COMMENT_END, HTML_COMMENT_END, '"', "'")

_SPDX_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"{SPDX_TAG_LABEL}:\s*(?P<expression>.+)$",
    re.IGNORECASE,
)


@runtime_checkable
class EmbeddedLicenseScanner(Protocol):
    """Extract license expressions declared inside a source file."""

    @abstractmethod
    def scan(self, path: Path) -> list[LicenseExpression]:
        """Return the license expressions declared in ``path``.

        Args:
            path: Source file to scan.

        Returns:
            list[LicenseExpression]: Declared expressions in file order, possibly empty.

        Raises:
            SourceScanError: If the file cannot be read or a declaration is malformed.
        """


def _comment_payload(line: str) -> str | None:
    """Return the comment payload extracted from ``line`` when possible.

    Args:
        line: Source line inspected for a comment payload.

    Returns:
        str | None: Text following the comment prefix, or ``None`` for non-comment lines.
    """

    stripped = line.lstrip()
    if not stripped:
        return None
    for prefix in COMMENT_PREFIXES:
        if not stripped.startswith(prefix):
            continue
        return stripped[len(prefix) :].lstrip()
    return None


def _strip_trailing_delimiters(expression: str) -> str:
    """Remove comment terminators and quotes trailing an identifier expression.

    Args:
        expression: Text captured after ``SPDX-License-Identifier:``.

    Returns:
        str: Expression without trailing ``*/``, ``-->`` or quote characters.
    """

    result = expression.strip()
    changed = True
    while changed and result:
        changed = False
        for delimiter in _TRAILING_DELIMITERS:
            if result.endswith(delimiter):
                result = result[: -len(delimiter)].rstrip()
                changed = True
    return result


def extract_license_identifiers(content: str) -> list[str]:
    """Return raw ``SPDX-License-Identifier`` expressions found in comment lines.

    Args:
        content: Source text to search.

    Returns:
        list[str]: Expression strings in the order they appear, duplicates removed.
    """

    expressions: list[str] = []
    for line in content.splitlines():
        payload = _comment_payload(line)
        if payload is None:
            stripped = line.lstrip()
            if not stripped.lower().startswith(SPDX_TAG_PREFIX):
                continue
            payload = stripped
        match = _SPDX_PATTERN.search(payload)
        if not match:
            continue
        candidate = _strip_trailing_delimiters(match.group("expression"))
        if candidate and candidate not in expressions:
            expressions.append(candidate)
    return expressions


@dataclass(slots=True)
class SpdxSourceFileParser:
    """Default scanner reading ``SPDX-License-Identifier`` comment markers."""

    parser: LicenseParser = parse_license_expression
    encoding: str = "utf-8"

    def scan(self, path: Path) -> list[LicenseExpression]:
        """Return the license expressions declared in ``path``.

        Raises:
            SourceScanError: If ``path`` cannot be read or an identifier does not parse.
        """

        try:
            content = path.read_text(encoding=self.encoding, errors="replace")
        except OSError as exc:
            raise SourceScanError(f"Unable to read {path} for SPDX license identifiers: {exc}") from exc
        licenses: list[LicenseExpression] = []
        for text in extract_license_identifiers(content):
            try:
                expression = self.parser(text)
            except InvalidLicenseStringError as exc:
                raise SourceScanError(f"{path}: {exc}") from exc
            if expression not in licenses:
                licenses.append(expression)
        return licenses


__all__ = [
    "EmbeddedLicenseScanner",
    "SpdxSourceFileParser",
    "extract_license_identifiers",
]
