"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by readers, decoders, the overlay
passes, and the composition root. The hierarchy lives in the domain layer so
every outer layer can raise and catch it without import cycles.

Contents
--------
* :class:`ConfigError` – umbrella base class for all pipeline failures.
* :class:`SourceUnreachable` – a single reader could not produce bytes.
* :class:`AllSourcesFailed` – every configured source failed; keeps each cause.
* :class:`UnknownContentType` – a file source has no extension to pick a decoder.
* :class:`DecodeFailure` – bytes were read but could not be parsed.
* :class:`MalformedCheckParameter` – a check factory rejected its parameter.
* :class:`UnknownCheckFunction` – no check function is registered under a name.
* :class:`ValidationError` – a typed accessor could not convert a stored value.

System Role
-----------
Readers raise :class:`SourceUnreachable`, which the source resolver recovers
from by trying the next descriptor. Every other error aborts the pipeline and
reaches the caller unchanged.
"""

from __future__ import annotations

from typing import Sequence


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_config_pipeline``.

    Why
    ----
    Provide a single catch-all type so bootstrap code can abort startup with one
    ``except ConfigError`` clause.
    """


class SourceUnreachable(ConfigError):
    """Raised by a reader when its source cannot be fetched.

    Typical Sources
    ---------------
    Missing or unreadable files, transport errors, non-2xx HTTP responses.
    """

    def __init__(self, descriptor: str, reason: str) -> None:
        super().__init__(f"{descriptor}: {reason}")
        self.descriptor = descriptor
        self.reason = reason


class AllSourcesFailed(ConfigError):
    """Raised when every source descriptor failed.

    What
    ----
    Retains each underlying :class:`SourceUnreachable` in :attr:`errors` (in
    descriptor order) so callers can tell which source failed and why.

    Examples
    --------
    >>> exc = AllSourcesFailed([SourceUnreachable("a.json", "missing"), SourceUnreachable("b.json", "denied")])
    >>> print(exc)
    all configuration sources failed: a.json: missing; b.json: denied
    >>> [error.descriptor for error in exc.errors]
    ['a.json', 'b.json']
    """

    def __init__(self, errors: Sequence[SourceUnreachable]) -> None:
        self.errors = list(errors)
        detail = "; ".join(str(error) for error in self.errors)
        super().__init__(f"all configuration sources failed: {detail}")


class UnknownContentType(ConfigError):
    """Raised when a file source has no extension to select a decoder from."""


class DecodeFailure(ConfigError):
    """Raised when configuration bytes cannot be parsed into a mapping.

    The parser's own message is embedded verbatim and the original exception is
    chained as ``__cause__``.
    """


class MalformedCheckParameter(ConfigError):
    """Raised when a check factory cannot compile its parameter.

    Factories themselves return ``None`` for bad parameters; this error is
    raised by :func:`lib_config_pipeline.application.checks.compile_check` so
    routing code can report the misconfiguration at startup.
    """


class UnknownCheckFunction(ConfigError):
    """Raised when a check expression names no registered predicate or factory."""


class ValidationError(ConfigError):
    """Signals that a stored value cannot be converted to the requested type."""
