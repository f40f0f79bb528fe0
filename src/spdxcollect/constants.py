# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core constants shared by the SPDX file collector."""

from __future__ import annotations

from typing import Final

SHA1_ALGORITHM: Final[str] = "SHA-1"

OPTIONAL_CHECKSUM_ALGORITHMS: Final[tuple[str, ...]] = (
    "SHA-224",
    "SHA-256",
    "SHA-384",
    "SHA-512",
    "MD2",
    "MD4",
    "MD5",
    "MD6",
)

CHECKSUM_CHUNK_SIZE: Final[int] = 2048

MAXIMUM_SOURCE_FILE_LENGTH: Final[int] = 300_000

SPDX_FILE_NAME_PREFIX: Final[str] = "./"
SPDX_TAG_LABEL: Final[str] = "SPDX-License-Identifier"
LICENSE_COMMENT_SEPARATOR: Final[str] = ";  "
EMBEDDED_LICENSE_COMMENT_PREFIX: Final[str] = f"This file contains {SPDX_TAG_LABEL}s for "

NOASSERTION: Final[str] = "NOASSERTION"
NONE_LICENSE: Final[str] = "NONE"

__all__ = [
    "CHECKSUM_CHUNK_SIZE",
    "EMBEDDED_LICENSE_COMMENT_PREFIX",
    "LICENSE_COMMENT_SEPARATOR",
    "MAXIMUM_SOURCE_FILE_LENGTH",
    "NOASSERTION",
    "NONE_LICENSE",
    "OPTIONAL_CHECKSUM_ALGORITHMS",
    "SHA1_ALGORITHM",
    "SPDX_FILE_NAME_PREFIX",
    "SPDX_TAG_LABEL",
]
