# src/zipserve/core/server_controller.py
"""
ZipServe - Directory Archive Server - Server Controller
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

import uvicorn

from ..api_server.api import create_api_app
from .config import ServerConfig

log = logging.getLogger(__name__)


class ServerController:
    """Manages the lifecycle of the HTTP server."""

    def __init__(self, config: ServerConfig):
        self.config = config
        self.server = None
        self.status = "stopped"

    def get_status(self):
        return {
            "status": self.status,
            "port": self.config.port,
            "root_directory": str(self.config.root_directory),
        }

    def build_server(self) -> uvicorn.Server:
        app = create_api_app(self.config)
        uvicorn_config = uvicorn.Config(
            app=app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level,
            # Keep the handlers installed by setup_logging().
            log_config=None,
        )
        return uvicorn.Server(uvicorn_config)

    def run(self):
        """Serves in the foreground until uvicorn receives SIGINT/SIGTERM."""
        self.server = self.build_server()
        self.status = "running"
        log.info(f"server started on {self.config.port}, serving {self.config.root_directory}")
        try:
            self.server.run()
        finally:
            self.status = "stopped"
            self.server = None
            log.info("Server stopped.")
