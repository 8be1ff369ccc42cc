# src/zipserve/services/file_service.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import logging
from pathlib import Path, PurePosixPath
from typing import List, NamedTuple

import aiofiles.os

from ..core.exceptions import DirectoryReadError, InvalidInputError

log = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Something unexpected happened, please re-check your input"
ROOT_READ_MESSAGE = "Could not read the root directory"


class ResolvedEntry(NamedTuple):
    """An entry reference that has been confined to the served root."""

    name: str
    path: Path


def extract_basename(raw_ref: str) -> str:
    """
    Returns the last path component of a client supplied reference.

    Any directory part, '..' segment or leading slash is dropped; backslashes
    count as separators too. Names that cannot be joined under the root
    ('', '.', '..', anything with a NUL byte) are rejected.
    """
    try:
        name = PurePosixPath(raw_ref.replace("\\", "/")).name
    except (TypeError, AttributeError) as e:
        raise InvalidInputError(INVALID_INPUT_MESSAGE) from e

    if not name or name in (".", "..") or "\x00" in name:
        raise InvalidInputError(INVALID_INPUT_MESSAGE)
    return name


class FileService:
    """Read-only access to the served root: path resolution and listing."""

    def __init__(self, root_directory: Path):
        self.root = Path(root_directory)

    def resolve_entry(self, raw_ref: str) -> ResolvedEntry:
        """Maps the part of the URL after /zip to a path directly under the root."""
        name = extract_basename(raw_ref)
        path = self.root / name
        if path.parent != self.root:
            log.warning(f"Rejected entry reference escaping the root: {raw_ref!r}")
            raise InvalidInputError(INVALID_INPUT_MESSAGE)
        return ResolvedEntry(name=name, path=path)

    async def list_root(self) -> List[str]:
        """Names of the root's immediate entries, in enumeration order."""
        try:
            return await aiofiles.os.listdir(self.root)
        except OSError as e:
            log.error(f"Failed to list {self.root}: {e}")
            raise DirectoryReadError(ROOT_READ_MESSAGE) from e
