# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""SPDX license expression values and a small expression parser."""

from __future__ import annotations

import re
from abc import abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import ClassVar, Final, Protocol, runtime_checkable

from .errors import InvalidLicenseStringError

_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s*(\(|\)|[^\s()]+)")
_LICENSE_ID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:DocumentRef-[A-Za-z0-9.\-]+:)?LicenseRef-[A-Za-z0-9.\-]+$|^[A-Za-z0-9][A-Za-z0-9.\-]*$",
)
_EXCEPTION_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.\-]*$")

AND_OPERATOR: Final[str] = "AND"
OR_OPERATOR: Final[str] = "OR"
WITH_OPERATOR: Final[str] = "WITH"
_OPERATORS: Final[frozenset[str]] = frozenset({AND_OPERATOR, OR_OPERATOR, WITH_OPERATOR})


class LicenseExpression:
    """Base class for parsed SPDX license expressions."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class LicenseId(LicenseExpression):
    """A single license identifier, optionally with the ``+`` (or later) suffix."""

    identifier: str
    or_later: bool = False

    def __str__(self) -> str:
        return f"{self.identifier}+" if self.or_later else self.identifier


@dataclass(frozen=True, slots=True)
class WithException(LicenseExpression):
    """A license identifier qualified by a license exception."""

    license: LicenseId
    exception: str

    def __str__(self) -> str:
        return f"{self.license} {WITH_OPERATOR} {self.exception}"


@dataclass(frozen=True, slots=True, eq=False)
class _LicenseSet(LicenseExpression):
    """Shared behaviour for conjunctive and disjunctive license sets.

    Members keep their first-seen order for rendering while equality and
    hashing ignore order and duplicates.
    """

    members: tuple[LicenseExpression, ...]
    operator: ClassVar[str] = ""

    @classmethod
    def of(cls, expressions: Iterable[LicenseExpression]) -> _LicenseSet:
        """Return a set flattened over nested sets of the same kind with duplicates dropped."""

        flattened: list[LicenseExpression] = []
        for expression in expressions:
            nested = expression.members if type(expression) is cls else (expression,)
            for member in nested:
                if member not in flattened:
                    flattened.append(member)
        return cls(tuple(flattened))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return frozenset(self.members) == frozenset(other.members)

    def __hash__(self) -> int:
        return hash((type(self).__name__, frozenset(self.members)))

    def __str__(self) -> str:
        joined = f" {self.operator} ".join(str(member) for member in self.members)
        return f"({joined})"


@dataclass(frozen=True, slots=True, eq=False)
class ConjunctiveLicenseSet(_LicenseSet):
    """All member licenses apply (``AND``)."""

    operator: ClassVar[str] = AND_OPERATOR


@dataclass(frozen=True, slots=True, eq=False)
class DisjunctiveLicenseSet(_LicenseSet):
    """Any one of the member licenses may be chosen (``OR``)."""

    operator: ClassVar[str] = OR_OPERATOR


def conjunction(expressions: Sequence[LicenseExpression]) -> LicenseExpression:
    """Return the ``AND`` of ``expressions``, collapsing a single member to itself."""

    license_set = ConjunctiveLicenseSet.of(expressions)
    if len(license_set.members) == 1:
        return license_set.members[0]
    return license_set


@runtime_checkable
class LicenseParser(Protocol):
    """Turn a literal license expression string into a structured expression."""

    @abstractmethod
    def __call__(self, text: str) -> LicenseExpression:
        """Parse ``text``.

        Args:
            text: License expression string such as ``MIT OR Apache-2.0``.

        Returns:
            LicenseExpression: Structured expression.

        Raises:
            InvalidLicenseStringError: If ``text`` is malformed.
        """


class _ExpressionReader:
    """Recursive descent reader over tokenised expression text."""

    def __init__(self, text: str) -> None:
        """Tokenise ``text`` and position the reader at the first token.

        Args:
            text: Raw license expression.

        Raises:
            InvalidLicenseStringError: If ``text`` contains an untokenisable character.
        """

        self._text = text
        self._tokens = self._tokenise(text)
        self._position = 0

    def _tokenise(self, text: str) -> list[str]:
        """Split ``text`` into parentheses and whitespace separated words.

        Args:
            text: Raw license expression.

        Returns:
            list[str]: Tokens in source order.
        """

        tokens: list[str] = []
        position = 0
        stripped_end = len(text.rstrip())
        while position < stripped_end:
            match = _TOKEN_PATTERN.match(text, position)
            if match is None:
                raise self._error("unexpected character")
            tokens.append(match.group(1))
            position = match.end()
        return tokens

    def _error(self, reason: str) -> InvalidLicenseStringError:
        """Return an error naming the expression text and ``reason``."""

        return InvalidLicenseStringError(f"Invalid license expression '{self._text}': {reason}")

    def _peek(self) -> str | None:
        """Return the current token without consuming it, or ``None`` at the end."""

        return self._tokens[self._position] if self._position < len(self._tokens) else None

    def _peek_operator(self) -> str | None:
        """Return the upper-cased operator at the current position, if any."""

        token = self._peek()
        if token is not None and token.upper() in _OPERATORS:
            return token.upper()
        return None

    def _advance(self) -> str:
        """Consume and return the current token.

        Raises:
            InvalidLicenseStringError: If the expression ended early.
        """

        token = self._peek()
        if token is None:
            raise self._error("unexpected end of expression")
        self._position += 1
        return token

    def read(self) -> LicenseExpression:
        """Parse the whole token stream.

        Returns:
            LicenseExpression: Parsed expression.

        Raises:
            InvalidLicenseStringError: If the stream is empty or has trailing tokens.
        """

        if not self._tokens:
            raise self._error("expression is empty")
        expression = self._read_or()
        if self._peek() is not None:
            raise self._error(f"unexpected token '{self._peek()}'")
        return expression

    def _read_or(self) -> LicenseExpression:
        """Read ``OR`` separated operands, the loosest binding level."""

        operands = [self._read_and()]
        while self._peek_operator() == OR_OPERATOR:
            self._advance()
            operands.append(self._read_and())
        if len(operands) == 1:
            return operands[0]
        return DisjunctiveLicenseSet.of(operands)

    def _read_and(self) -> LicenseExpression:
        """Read ``AND`` separated operands."""

        operands = [self._read_with()]
        while self._peek_operator() == AND_OPERATOR:
            self._advance()
            operands.append(self._read_with())
        if len(operands) == 1:
            return operands[0]
        return ConjunctiveLicenseSet.of(operands)

    def _read_with(self) -> LicenseExpression:
        """Read a primary optionally qualified by ``WITH <exception>``.

        Raises:
            InvalidLicenseStringError: If ``WITH`` follows a compound expression
                or names an invalid exception.
        """

        primary = self._read_primary()
        if self._peek_operator() != WITH_OPERATOR:
            return primary
        self._advance()
        if not isinstance(primary, LicenseId):
            raise self._error("WITH must follow a single license identifier")
        exception = self._advance()
        if not _EXCEPTION_ID_PATTERN.match(exception) or exception.upper() in _OPERATORS:
            raise self._error(f"invalid license exception '{exception}'")
        return WithException(license=primary, exception=exception)

    def _read_primary(self) -> LicenseExpression:
        """Read a parenthesised expression or a single license identifier.

        Returns:
            LicenseExpression: Grouped expression or ``LicenseId``.

        Raises:
            InvalidLicenseStringError: If parentheses are unbalanced or the
                identifier is malformed.
        """

        token = self._advance()
        if token == "(":
            expression = self._read_or()
            if self._advance() != ")":
                raise self._error("missing closing parenthesis")
            return expression
        if token == ")" or token.upper() in _OPERATORS:
            raise self._error(f"unexpected token '{token}'")
        or_later = token.endswith("+")
        identifier = token[:-1] if or_later else token
        if not _LICENSE_ID_PATTERN.match(identifier):
            raise self._error(f"invalid license identifier '{token}'")
        return LicenseId(identifier=identifier, or_later=or_later)


def parse_license_expression(text: str) -> LicenseExpression:
    """Parse an SPDX license expression string.

    Operators are matched case-insensitively; ``AND`` binds tighter than
    ``OR`` and ``WITH`` binds tighter than both.

    Args:
        text: Expression such as ``(MIT OR Apache-2.0) AND BSD-3-Clause``.

    Returns:
        LicenseExpression: Parsed expression.

    Raises:
        InvalidLicenseStringError: If ``text`` is empty or malformed.
    """

    return _ExpressionReader(text).read()


__all__ = [
    "ConjunctiveLicenseSet",
    "DisjunctiveLicenseSet",
    "LicenseExpression",
    "LicenseId",
    "LicenseParser",
    "WithException",
    "conjunction",
    "parse_license_expression",
]
