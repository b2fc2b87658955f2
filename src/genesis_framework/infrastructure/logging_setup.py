"""structlog setup for agents, the inspection API and the demo scripts.

Runtime events and stdlib records (uvicorn, asyncio) share one processor
chain, so the ``agent``/``cycle`` context bound by a running cycle shows up
on every line emitted while it runs, whichever logger emitted it.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

import structlog


_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]

_stdlib_handler: Optional[logging.Handler] = None


class _StdoutHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stdout`` is at emit time."""

    @property
    def stream(self) -> TextIO:
        return sys.stdout

    @stream.setter
    def stream(self, value: TextIO) -> None:
        pass


def _renderer(json_logs: bool) -> Any:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """(Re)configure structlog and route stdlib logging through it.

    The last call wins. Loggers are not cached on first use, so module-level
    loggers pick up a new level or renderer immediately.
    """
    global _stdlib_handler

    normalized = str(level or "INFO").upper()
    log_level = getattr(logging, normalized, logging.INFO)
    renderer = _renderer(json_logs)

    handler: logging.Handler = logging.StreamHandler(stream) if stream is not None else _StdoutHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    if _stdlib_handler is not None:
        root.removeHandler(_stdlib_handler)
    root.addHandler(handler)
    root.setLevel(log_level)
    _stdlib_handler = handler

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=False,
    )
