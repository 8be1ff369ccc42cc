# src/zipserve/api_server/routing.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from enum import Enum
from typing import NamedTuple, Optional

from starlette.types import ASGIApp, Receive, Scope, Send

from ..core.constants import ZIP_ROUTE_PREFIX
from .responses import method_not_allowed_response


class RouteKind(str, Enum):
    METHOD_NOT_ALLOWED = "method_not_allowed"
    HTML_LISTING = "html_listing"
    JSON_LISTING = "json_listing"
    ARCHIVE = "archive"
    NOT_FOUND = "not_found"


class RouteMatch(NamedTuple):
    kind: RouteKind
    entry_ref: Optional[str] = None


def match_route(method: str, path: str) -> RouteMatch:
    """
    The dispatch table, in precedence order. Pure: no I/O, one answer per
    (method, path). The FastAPI routes registered in archive_router.py follow it.
    """
    if method != "GET":
        return RouteMatch(RouteKind.METHOD_NOT_ALLOWED)
    if path == "/":
        return RouteMatch(RouteKind.HTML_LISTING)
    if path == "/list":
        return RouteMatch(RouteKind.JSON_LISTING)
    if path[:len(ZIP_ROUTE_PREFIX)] == ZIP_ROUTE_PREFIX:
        return RouteMatch(RouteKind.ARCHIVE, path[len(ZIP_ROUTE_PREFIX):])
    return RouteMatch(RouteKind.NOT_FOUND)


class GetOnlyMiddleware:
    """Answers 405 to every non-GET request before routing happens."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] == "http":
            route = match_route(scope["method"], scope["path"])
            if route.kind is RouteKind.METHOD_NOT_ALLOWED:
                response = method_not_allowed_response()
                await response(scope, receive, send)
                return
        await self.app(scope, receive, send)
