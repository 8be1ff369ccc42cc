# filename: src/zipserve/api_server/api.py
"""
ZipServe - Directory Archive Server - Main API Module
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

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.config import ServerConfig
from ..core.exceptions import ZipServeError
from ..core.version import __app_name__, __version__
from ..services.archive_service import ArchiveStreamer
from ..services.file_service import FileService
from .archive_router import router as archive_router
from .responses import (error_response, method_not_allowed_response,
                        not_found_response)
from .routing import GetOnlyMiddleware

log = logging.getLogger(__name__)


async def handle_service_error(request: Request, exc: ZipServeError):
    log.warning(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(exc)


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return method_not_allowed_response()
    # Anything routing could not place is a plain 404.
    return not_found_response()


# --- FastAPI App Factory ---
def create_api_app(config: ServerConfig) -> FastAPI:
    app = FastAPI(
        title=f"{__app_name__} API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.config = config
    app.state.file_service = FileService(config.root_directory)
    app.state.archive_streamer = ArchiveStreamer()

    app.add_middleware(GetOnlyMiddleware)
    app.add_exception_handler(ZipServeError, handle_service_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)

    app.include_router(archive_router)
    log.debug(f"API app created for root {config.root_directory}")
    return app
