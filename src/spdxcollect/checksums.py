# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Streaming file checksum helpers used for SPDX file records."""

from __future__ import annotations

import hashlib
import logging
from abc import abstractmethod
from collections.abc import Buffer
from os import PathLike
from pathlib import Path
from typing import Final, Protocol

from .constants import CHECKSUM_CHUNK_SIZE, OPTIONAL_CHECKSUM_ALGORITHMS, SHA1_ALGORITHM
from .errors import ChecksumIOError, MissingDigestAlgorithmError, UnsupportedAlgorithmError

LOGGER = logging.getLogger(__name__)

_Pathish = str | PathLike[str] | Path

_HASHLIB_NAMES: Final[dict[str, str]] = {
    SHA1_ALGORITHM: "sha1",
    "SHA-224": "sha224",
    "SHA-256": "sha256",
    "SHA-384": "sha384",
    "SHA-512": "sha512",
    "MD2": "md2",
    "MD4": "md4",
    "MD5": "md5",
    "MD6": "md6",
}


class DigestHasher(Protocol):
    """Incremental message digest as returned by ``hashlib.new``."""

    @abstractmethod
    def update(self, data: Buffer, /) -> None:
        """Feed ``data`` into the digest."""

    @abstractmethod
    def digest(self) -> bytes:
        """Return the digest of all data fed so far."""


def convert_checksum_to_string(digest_bytes: bytes) -> str:
    """Return the SPDX representation of ``digest_bytes`` (lowercase hex)."""

    return digest_bytes.hex()


def new_hasher(algorithm: str) -> DigestHasher:
    """Allocate a fresh hasher for the SPDX ``algorithm`` name.

    Args:
        algorithm: SPDX algorithm label such as ``SHA-1`` or ``SHA-256``.

    Returns:
        DigestHasher: Newly created hash object with no prior state.

    Raises:
        MissingDigestAlgorithmError: If the runtime cannot provide ``algorithm``.
    """

    hashlib_name = _HASHLIB_NAMES.get(algorithm)
    if hashlib_name is None:
        raise MissingDigestAlgorithmError(f"No digest implementation is known for {algorithm}")
    try:
        return hashlib.new(hashlib_name)
    except ValueError as exc:
        raise MissingDigestAlgorithmError(
            f"Unable to create the message digest for {algorithm}: {exc}",
        ) from exc


def file_checksum(path: _Pathish, algorithm: str) -> str:
    """Stream ``path`` through ``algorithm`` and return the hex digest.

    The file is read in fixed-size chunks into a single reusable buffer so
    memory use stays bounded regardless of file size.

    Args:
        path: File whose contents are hashed.
        algorithm: ``SHA-1`` or one of the optional checksum algorithms.

    Returns:
        str: Lowercase hexadecimal digest.

    Raises:
        UnsupportedAlgorithmError: If ``algorithm`` is not accepted.
        MissingDigestAlgorithmError: If the runtime lacks the algorithm.
        ChecksumIOError: If the file cannot be opened or read.
    """

    if algorithm != SHA1_ALGORITHM and algorithm not in OPTIONAL_CHECKSUM_ALGORITHMS:
        raise UnsupportedAlgorithmError(f"{algorithm} algorithm is not supported for creating file checksums.")
    hasher = new_hasher(algorithm)
    buffer = bytearray(CHECKSUM_CHUNK_SIZE)
    view = memoryview(buffer)
    try:
        with Path(path).open("rb") as stream:
            while count := stream.readinto(buffer):
                hasher.update(view[:count])
    except OSError as exc:
        error = f"IO error while calculating the {algorithm} checksum"
        LOGGER.warning("%s for %s", error, path)
        raise ChecksumIOError(f"{error}: {exc}") from exc
    return convert_checksum_to_string(hasher.digest())


def generate_sha1(path: _Pathish) -> str:
    """Return the mandatory SHA-1 checksum for ``path``."""

    return file_checksum(path, SHA1_ALGORITHM)


def generate_optional_checksum(path: _Pathish, algorithm: str) -> str:
    """Return an optional checksum for ``path``.

    Args:
        path: File whose contents are hashed.
        algorithm: One of ``SHA-224``, ``SHA-256``, ``SHA-384``, ``SHA-512``,
            ``MD2``, ``MD4``, ``MD5`` or ``MD6`` (case-sensitive).

    Returns:
        str: Lowercase hexadecimal digest.

    Raises:
        UnsupportedAlgorithmError: If ``algorithm`` is outside the allow-list;
            raised before the file is opened.
    """

    if algorithm not in OPTIONAL_CHECKSUM_ALGORITHMS:
        raise UnsupportedAlgorithmError(f"{algorithm} algorithm is not supported for creating file checksums.")
    return file_checksum(path, algorithm)


__all__ = [
    "DigestHasher",
    "convert_checksum_to_string",
    "file_checksum",
    "generate_optional_checksum",
    "generate_sha1",
    "new_hasher",
]
