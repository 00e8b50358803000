"""Console logging for the CLI. Library code only calls logging.getLogger(__name__)."""

from __future__ import annotations

import logging
import sys

NOISY_LOGGERS = ("httpx", "httpcore")


class _ThirdPartyFilter(logging.Filter):
    """Keep our own records; let third-party records through only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("task_tracker"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: int = logging.WARNING) -> None:
    """Install a single stderr handler. Call once, before the first log call."""
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    handler.addFilter(_ThirdPartyFilter())
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.captureWarnings(True)
