"""structlog setup for the API process and the operator CLI.

Every lifecycle operation runs inside ``challenge_context`` so the lines it
emits carry the operation name, the challenge id and the acting operator.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level}")
    return resolved


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    service_name: str = "challenge-admin",
) -> None:
    """
    Route structlog output to stdout.

    Args:
        level: Minimum level name, e.g. INFO or DEBUG
        json_format: JSON lines when True, coloured console output otherwise
        service_name: Value of the ``service`` key on every entry
    """
    numeric_level = _resolve_level(level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


@contextmanager
def challenge_context(
    operation: str,
    challenge_id: Optional[int] = None,
    actor: Optional[str] = None,
) -> Iterator[None]:
    """Bind the operation, challenge and actor to log lines emitted inside the block."""
    bound: dict[str, Any] = {"operation": operation}
    if challenge_id is not None:
        bound["challenge_id"] = challenge_id
    if actor:
        bound["actor"] = actor
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
