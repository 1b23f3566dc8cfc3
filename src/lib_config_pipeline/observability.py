"""Structured logging for the bootstrap pipeline.

The library never configures logging itself: the ``lib_config_pipeline``
logger only carries a ``NullHandler`` until the host application attaches its
own handlers. Every record is emitted with ``extra={"context": {...}}`` where
the context always holds ``trace_id`` plus ``stage`` and ``path`` (the source
descriptor or ``None``).

Events by stage
---------------
resolve
    ``source_read`` (info, ``size``/``skipped``), ``source_failed`` (debug,
    ``error``), ``sources_exhausted`` (info, ``attempts``), plus the reader
    events ``config_file_read`` and ``config_http_read``.
decode
    ``config_decoded`` (info, ``keys``), ``config_document_parsed`` (debug) and
    ``config_decode_failed`` (error, ``format``/``error``).
args / env
    ``args_applied`` / ``env_applied`` (debug, ``keys`` written).
modes
    ``runtime_mode_detected``, ``mode_applied`` (debug, ``mode``),
    ``modes_skipped`` and the summary ``modes_applied`` (info).
help
    ``configuration_dumped`` (debug).
pipeline
    ``stage_completed`` after every stage and ``configuration_resolved`` once
    :func:`lib_config_pipeline.core.resolve_config` returns.

``registry_entry_registered`` carries ``kind``/``name`` and
``check_parameter_invalid`` carries ``check``/``parameter`` instead of a stage.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_config_pipeline_trace_id", default=None)
"""Identifier correlating all records of one bootstrap run."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_config_pipeline")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the ``lib_config_pipeline`` logger for handler attachment."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Set the trace identifier attached to later records; ``None`` clears it.

    :func:`~lib_config_pipeline.core.resolve_config` clears it on entry, so
    bind after that call returns or inside a custom stage.

    Examples
    --------
    >>> bind_trace_id('boot-1')
    >>> TRACE_ID.get()
    'boot-1'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(
    stage: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the ``stage``/``path`` fields of a pipeline event plus *payload*.

    Payload entries never override ``stage`` or ``path``.

    Examples
    --------
    >>> make_event('env', None, {'keys': ['server.port']})
    {'stage': 'env', 'path': None, 'keys': ['server.port']}
    >>> make_event('resolve', 'app.json', {'stage': 'ignored'})
    {'stage': 'resolve', 'path': 'app.json'}
    """

    event: dict[str, Any] = {"stage": stage, "path": path}
    for key, value in (payload or {}).items():
        event.setdefault(key, value)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    context = {"trace_id": TRACE_ID.get(), **fields}
    _LOGGER.log(level, message, extra={"context": context})
