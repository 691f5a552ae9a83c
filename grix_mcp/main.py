from __future__ import annotations

import sys

from dotenv import load_dotenv

from grix_mcp.config import load_settings
from grix_mcp.domain import ConfigurationError
from grix_mcp.infra import get_logger
from grix_mcp.runtime.app import run_main


def main() -> None:
    load_dotenv()
    log = get_logger("grix-mcp")
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        log.error("startup: %s", exc)
        sys.exit(1)

    try:
        run_main(settings)
    except KeyboardInterrupt:
        log.info("interrupted")


if __name__ == "__main__":
    main()
