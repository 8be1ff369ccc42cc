# filename: src/zipserve/main.py
#!/usr/bin/env python3
"""
ZipServe - Directory Archive Server
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

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core import constants
from .core.config import load_config
from .core.exceptions import ConfigurationError
from .core.logging_config import parse_log_level, setup_logging
from .core.server_controller import ServerController
from .core.version import __app_name__, __version__


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zipserve",
        description="Serve a directory for browsing and streamed ZIP download.",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help=f"JSON config file (default: ./{constants.CONFIG_FILENAME} if present)")
    parser.add_argument("--root", default=None, help="directory to serve")
    parser.add_argument("--port", type=int, default=None, help="port to listen on")
    parser.add_argument("--host", default=None, help="address to bind")
    parser.add_argument("--log-level", default=None, help="debug, info, warning, error")
    parser.add_argument("--log-file", type=Path, default=None, help="also log to this rotating file")
    parser.add_argument("--version", action="version", version=f"{__app_name__} v{__version__}")
    return parser


def find_config_file(requested: Optional[Path]) -> Optional[Path]:
    """An explicit --config wins; otherwise ./config.json is used when it exists."""
    if requested is not None:
        return requested
    default = Path(constants.CONFIG_FILENAME)
    return default if default.is_file() else None


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for ZipServe."""
    args = build_arg_parser().parse_args(argv)

    try:
        setup_logging(args.log_level or constants.DEFAULT_LOG_LEVEL, args.log_file)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1
    log = logging.getLogger(__name__)

    try:
        config = load_config(
            find_config_file(args.config),
            overrides={
                "server_port": args.port,
                "root_directory": args.root,
                "host": args.host,
                "log_level": args.log_level,
            },
        )
    except ConfigurationError as e:
        log.error(f"Configuration error: {e}")
        return 1

    logging.getLogger().setLevel(parse_log_level(config.log_level))
    log.info(f"Starting {__app_name__} v{__version__}")

    try:
        ServerController(config).run()
    except Exception as e:
        log.critical(f"Failed to start {__app_name__}: {e}")
        print(f"ERROR: Could not start {__app_name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
