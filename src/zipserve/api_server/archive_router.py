"""
ZipServe - Directory Archive Server - Listing and Download API Module
Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..core.constants import ZIP_ROUTE_PREFIX
from ..services.archive_service import ArchiveStreamer
from ..services.file_service import FileService
from .responses import (archive_headers, listing_json_response,
                        listing_page_response)

log = logging.getLogger(__name__)

router = APIRouter()


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_archive_streamer(request: Request) -> ArchiveStreamer:
    return request.app.state.archive_streamer


@router.get("/")
async def html_listing(files: FileService = Depends(get_file_service)):
    names = await files.list_root()
    return listing_page_response(names)


@router.get("/list")
async def json_listing(files: FileService = Depends(get_file_service)):
    names = await files.list_root()
    return listing_json_response(names)


@router.get(ZIP_ROUTE_PREFIX + "{entry_ref:path}")
async def download_archive(
    entry_ref: str,
    files: FileService = Depends(get_file_service),
    streamer: ArchiveStreamer = Depends(get_archive_streamer),
):
    """
    Streams a ZIP of one root entry. Resolution and the stat happen before
    the response starts, so their errors still turn into a 500.
    """
    entry = files.resolve_entry(entry_ref)
    target = await streamer.prepare(entry)
    log.info(f"Streaming {target.kind.value} '{target.name}' as {target.name}.zip")
    return StreamingResponse(
        streamer.stream(target),
        media_type="application/zip",
        headers=archive_headers(target.name),
    )
