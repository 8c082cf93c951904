"""Structured logging configuration for propengine.

Engine modules emit events through get_logger(__name__) below: run
start/finish with the seed, falsifying examples, shrink summaries, and
per-case debug detail. configure_logging() renders those events AND stdlib
log records from the code under test through one ProcessorFormatter, so both
come out as the same JSON or console lines.

While a run is in progress the runner binds ``property_test`` and ``seed``
into structlog's context variables (see run_context()). Any record emitted
during the run, including stdlib records from user code, carries them, which
is what lets a CI failure be replayed from its log alone.

The engine never calls configure_logging() itself. Test harnesses or
applications call it once at startup.
"""

import logging
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

# Silenced to WARNING even in DEBUG mode; they drown out per-case engine events
_NOISY_LOGGERS: tuple[str, ...] = (
    "asyncio",
    "hypothesis",
)


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop the _record/_from_structlog bookkeeping ProcessorFormatter always adds."""
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _shared_processors() -> list[Any]:
    """Processors applied to every record, structlog or stdlib."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_processors(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _remove_internal_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        _remove_internal_fields,
        structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
    ]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    quiet_loggers: Sequence[str] = (),
) -> None:
    """Configure structlog and stdlib logging for propengine.

    Args:
        json_output: If True, output JSON. If False, human-readable.
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        quiet_loggers: Extra logger names (typically libraries used by the
            code under test) to hold at WARNING or above, like asyncio.
    """
    log_level = getattr(logging, level.upper())
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure logging; cached loggers would keep the old chain
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ProcessorFormatter(processors=_render_processors(json_output), foreign_pre_chain=shared))

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(log_level)

    # Never make a quiet logger less restrictive than the root level
    quiet_level = max(log_level, logging.WARNING)
    for logger_name in (*_NOISY_LOGGERS, *quiet_loggers):
        logging.getLogger(logger_name).setLevel(quiet_level)


@contextmanager
def run_context(test_name: str, seed: int) -> Iterator[None]:
    """Bind the running property's name and seed to every record in scope.

    Context variables are task-local, so concurrent runs gathered on one
    event loop each see only their own binding.
    """
    with structlog.contextvars.bound_contextvars(property_test=test_name, seed=seed):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module (typically ``__name__``)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
