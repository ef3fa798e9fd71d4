"""
Structured logging for the leaderboard service.

Every line is a structlog event routed through the stdlib root logger.
Request, board and contestant ids travel in context variables, so the
ranking code and the repositories log them without passing them around.
Lines that name both a board and a contestant also get an ``entry`` key
(``"<board_id>/<contestant_id>"``) to follow one entry across requests.
"""

import logging
import os
import sys
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, TypeVar

import structlog
from structlog.types import EventDict, Processor

from .config import get_settings

F = TypeVar("F", bound=Callable[..., Any])

# Path parameters copied onto request log lines
REQUEST_PATH_KEYS = ("board_id", "contestant_id")


def add_entry_key(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    board_id = event_dict.get("board_id")
    contestant_id = event_dict.get("contestant_id")
    if board_id is not None and contestant_id is not None:
        event_dict.setdefault("entry", f"{board_id}/{contestant_id}")
    return event_dict


def _json_output() -> bool:
    if get_settings().debug:
        return False
    return os.getenv("ENV", "development").lower() != "development"


def build_processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_entry_key,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(level: str = "INFO") -> None:
    """Set the root level and install the structlog pipeline. Calling it again only re-applies both."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(numeric_level)

    structlog.configure(
        processors=build_processors(_json_output()),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Attach ``values`` to every line logged inside the block, in this task or thread only."""
    with structlog.contextvars.bound_contextvars(**values):
        yield


def timed(operation: str) -> Callable[[F], F]:
    """
    Log the duration of every call at debug level.

    The event name is ``operation``, with ``outcome`` set to ``ok`` or to the
    name of the exception the call raised.
    """

    def decorator(func: F) -> F:
        logger = get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            outcome = "ok"
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                outcome = type(exc).__name__
                raise
            finally:
                logger.debug(
                    operation,
                    outcome=outcome,
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                )

        return wrapper  # type: ignore[return-value]

    return decorator


class RequestLoggingMiddleware:
    """
    ASGI middleware writing one ``request_complete`` line per HTTP request.

    Board and contestant ids from the matched route are added to the line.
    Client errors log at warning level and server errors at error level.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            # The router fills in path_params on the shared scope
            path_params = scope.get("path_params", {})
            route_keys = {k: path_params[k] for k in REQUEST_PATH_KEYS if k in path_params}

            if status_code >= 500:
                emit = self.logger.error
            elif status_code >= 400:
                emit = self.logger.warning
            else:
                emit = self.logger.info
            emit(
                "request_complete",
                method=scope["method"],
                path=scope["path"],
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
                **route_keys,
            )


# Lazy proxies; they pick up the configuration active at first use
api_logger = structlog.get_logger("api")
db_logger = structlog.get_logger("database")
ranking_logger = structlog.get_logger("ranking")


__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "timed",
    "RequestLoggingMiddleware",
    "api_logger",
    "db_logger",
    "ranking_logger",
]
