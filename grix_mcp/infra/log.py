from __future__ import annotations

import logging
import sys


FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    # stdout carries the MCP stdio transport; everything goes to stderr.
    log = logging.getLogger(name)
    log.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(FORMAT))
        log.addHandler(handler)
        log.propagate = False
    return log
