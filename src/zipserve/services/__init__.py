# src/zipserve/services/__init__.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from .archive_service import ArchiveStreamer, ArchiveTarget, EntryKind
from .file_service import FileService, ResolvedEntry

__all__ = [
    "ArchiveStreamer",
    "ArchiveTarget",
    "EntryKind",
    "FileService",
    "ResolvedEntry",
]
