# src/zipserve/api_server/responses.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import html
import urllib.parse
from typing import Dict, Iterable

from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

PAGE_TEMPLATE = (
    '<html><head><title>List of available archives</title>'
    '<meta name="viewport" content="width=device-width"></head>'
    '<body><ul>{items}</ul></body>'
    '</html>'
)
ITEM_TEMPLATE = '<li><a href="./zip/{href}">{label}</a></li>'


def build_listing_page(names: Iterable[str]) -> str:
    """One link per entry, pointing at its /zip download."""
    items = "".join(
        ITEM_TEMPLATE.format(
            href=urllib.parse.quote(name, safe=""),
            label=html.escape(name),
        )
        for name in names
    )
    return PAGE_TEMPLATE.format(items=items)


def listing_page_response(names: Iterable[str]) -> HTMLResponse:
    return HTMLResponse(build_listing_page(names))


def listing_json_response(names: Iterable[str]) -> JSONResponse:
    return JSONResponse(list(names))


def content_disposition(name: str) -> str:
    filename = f"{name}.zip"
    if filename.isascii() and filename.isprintable():
        return f"attachment; filename={filename}"
    encoded_filename = urllib.parse.quote(filename, safe='')
    return f"attachment; filename*=UTF-8''{encoded_filename}"


def archive_headers(name: str) -> Dict[str, str]:
    return {"Content-Disposition": content_disposition(name)}


def error_response(error: Exception) -> PlainTextResponse:
    return PlainTextResponse(f"Request failed: {error}.\n", status_code=500)


def not_found_response() -> PlainTextResponse:
    return PlainTextResponse("404 Not Found\n", status_code=404)


def method_not_allowed_response() -> PlainTextResponse:
    return PlainTextResponse("Method not supported\n", status_code=405)
