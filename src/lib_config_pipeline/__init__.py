"""Public package surface for ``lib_config_pipeline``.

Bootstrap code usually needs only :func:`resolve_config`; the registry,
store and error types are re-exported for extensions and for typed access
to the resolved values.
"""

from __future__ import annotations

from .application.checks import compile_check
from .application.registry import Registry, RegistryKind
from .core import DEFAULT_STAGES, PipelineContext, build_registry, default_registry, resolve_config, run_pipeline
from .domain.errors import (
    AllSourcesFailed,
    ConfigError,
    DecodeFailure,
    MalformedCheckParameter,
    SourceUnreachable,
    UnknownCheckFunction,
    UnknownContentType,
    ValidationError,
)
from .domain.store import PropertyStore, SourceInfo
from .observability import bind_trace_id, get_logger

__all__ = [
    "AllSourcesFailed",
    "ConfigError",
    "DEFAULT_STAGES",
    "DecodeFailure",
    "MalformedCheckParameter",
    "PipelineContext",
    "PropertyStore",
    "Registry",
    "RegistryKind",
    "SourceInfo",
    "SourceUnreachable",
    "UnknownCheckFunction",
    "UnknownContentType",
    "ValidationError",
    "bind_trace_id",
    "build_registry",
    "compile_check",
    "default_registry",
    "get_logger",
    "resolve_config",
    "run_pipeline",
]
