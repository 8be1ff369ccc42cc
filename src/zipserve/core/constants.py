# filename: src/zipserve/core/constants.py
"""
ZipServe - Directory Archive Server - Constants Module
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

# --- Core Application Settings ---
DEFAULT_PORT = 8000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_ROOT_DIRECTORY = "."
DEFAULT_LOG_LEVEL = "info"

# --- File Names ---
CONFIG_FILENAME = "config.json"

# --- Streaming ---
DOWNLOAD_CHUNK_SIZE = 65536  # 64KB, same as a file read chunk
STREAM_QUEUE_DEPTH = 16  # chunks buffered between the zip writer and the response
SINK_POLL_INTERVAL = 0.25  # seconds a blocked writer waits before re-checking for abort

# --- Routes ---
ZIP_ROUTE_PREFIX = "/zip"
