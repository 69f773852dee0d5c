"""Console/file logging for training progress."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Mapping

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(
    name: str = "sigmoidnet",
    *,
    filename: str | Path | None = None,
    stdout: bool = True,
    level: int = logging.INFO,
) -> logging.Logger:
    """Return the ``name`` logger with stream and/or file handlers attached.

    Handlers are only attached once per logger, so repeated calls are cheap.
    """

    logger = logging.getLogger(name)
    logger.setLevel(level)
    if getattr(logger, "_sigmoidnet_configured", False):
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    if filename is not None:
        fhandler = logging.FileHandler(filename, mode="w")
        fhandler.setFormatter(formatter)
        logger.addHandler(fhandler)
    if stdout:
        shandler = logging.StreamHandler(sys.stderr)
        shandler.setFormatter(formatter)
        logger.addHandler(shandler)
    logger._sigmoidnet_configured = True  # type: ignore[attr-defined]
    return logger


class LoggingCallback:
    """Trainer callback that writes one progress line per report."""

    def __init__(self, logger: logging.Logger | None = None, total: int | None = None):
        self.logger = logger or get_logger()
        self.total = total

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        if self.total:
            prefix = "(%0*d / %d)" % (len(str(self.total)), step, self.total)
        else:
            prefix = "(%d)" % step
        self.logger.info(
            "%s cost=%.6g learning_rate=%.4g accepted=%d rejected=%d",
            prefix,
            metrics.get("cost", float("nan")),
            metrics.get("learning_rate", float("nan")),
            int(metrics.get("accepted_steps", 0)),
            int(metrics.get("rejected_steps", 0)),
        )

    __call__ = on_step


__all__ = ["DATE_FORMAT", "LOG_FORMAT", "LoggingCallback", "get_logger"]
