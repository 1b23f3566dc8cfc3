"""Application-layer ports describing the pluggable functions.

Purpose
-------
Define the structural contracts that readers, decoders and check functions
must satisfy so the registry and the pipeline stages can work with any
implementation, built-in or caller supplied.

Contents
--------
* :class:`SourceReader` – turns a source descriptor into raw bytes.
* :class:`Decoder` – turns raw bytes into a mapping.
* :class:`CheckPredicate` – validates one string argument.
* :class:`CheckFactory` – compiles a parameter string into a predicate.
* :class:`PropertyAccessor` – the ``get``/``set`` contract stages rely on.

System Role
-----------
These protocols keep :mod:`lib_config_pipeline.application` independent from
the concrete adapters (filesystem, httpx, json/toml/yaml parsers).
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class SourceReader(Protocol):
    """Fetch the bytes behind a source descriptor.

    Implementations raise :class:`~lib_config_pipeline.domain.errors.SourceUnreachable`
    for recoverable failures so the resolver can try the next descriptor.
    """

    def __call__(self, descriptor: str) -> bytes:
        """Return the raw configuration bytes for *descriptor*."""


@runtime_checkable
class Decoder(Protocol):
    """Parse raw configuration bytes into a mapping or raise ``DecodeFailure``."""

    def __call__(self, payload: bytes) -> Mapping[str, object]:
        """Return the top-level document of *payload*."""


class CheckPredicate(Protocol):
    """Validate a single route parameter."""

    def __call__(self, argument: str) -> bool:
        """Return ``True`` when *argument* satisfies the constraint."""


class CheckFactory(Protocol):
    """Compile a parameter into a predicate, returning ``None`` when malformed."""

    def __call__(self, parameter: str) -> CheckPredicate | None:
        """Return a predicate for *parameter* or ``None``."""


@runtime_checkable
class PropertyAccessor(Protocol):
    """Minimal dotted-key contract every pipeline stage relies on."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at *key* or *default*."""

    def set(self, key: str, value: Any, *, layer: str = "runtime", path: str | None = None) -> None:
        """Store *value* at *key*."""
