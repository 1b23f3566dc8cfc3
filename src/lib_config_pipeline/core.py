"""Composition root for ``lib_config_pipeline``.

Purpose
-------
Provide the single entry point that wires the registry, readers, decoders and
overlay passes into the bootstrap pipeline, and fix the order in which the
passes run.

Contents
--------
* :func:`build_registry` / :func:`default_registry` – registries pre-loaded
  with the built-in readers, decoders and checks.
* :class:`PipelineContext` – everything a stage may read or mutate.
* :data:`DEFAULT_STAGES` – ordered ``(name, stage)`` pairs.
* :func:`run_pipeline` – execute stages over a context.
* :func:`resolve_config` – high-level API returning the resolved store.

Stage order
-----------
``resolve`` → ``decode`` → ``args`` → ``env`` → ``modes`` → ``help``. Later
stages overwrite earlier ones, so environment variables beat arguments and the
mode overlays (runtime mode last) beat everything.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence, TextIO

from .adapters.args.default import apply_args
from .adapters.decoders.structured import JSONDecoder, TOMLDecoder, YAMLDecoder
from .adapters.env.default import apply_env
from .adapters.readers.file import read_file
from .adapters.readers.http import read_http
from .adapters.runtime.default import detect_runtime_mode
from .application.checks import is_num, new_min_check, new_regexp_check
from .application.decode import decode_into
from .application.introspect import introspect
from .application.modes import apply_modes
from .application.registry import DEFAULT_READER, Registry, RegistryKind
from .application.resolve import CONFIG_KEY, resolve_sources
from .domain.store import PropertyStore
from .observability import bind_trace_id, log_debug, log_info, make_event

_DEFAULT_REGISTRY: Registry | None = None
_DEFAULT_REGISTRY_LOCK = threading.Lock()


def build_registry() -> Registry:
    """Return a new registry holding every built-in entry.

    Examples
    --------
    >>> registry = build_registry()
    >>> registry.names("reader")
    ['default', 'file', 'http', 'https']
    >>> registry.names("check_factory")
    ['min', 'regexp']
    """

    registry = Registry()
    registry.register(RegistryKind.READER, DEFAULT_READER, read_file)
    registry.register(RegistryKind.READER, "file", read_file)
    registry.register(RegistryKind.READER, "http", read_http)
    registry.register(RegistryKind.READER, "https", read_http)
    registry.register(RegistryKind.DECODER, ".json", JSONDecoder())
    registry.register(RegistryKind.DECODER, ".toml", TOMLDecoder())
    yaml_decoder = YAMLDecoder()
    registry.register(RegistryKind.DECODER, ".yaml", yaml_decoder)
    registry.register(RegistryKind.DECODER, ".yml", yaml_decoder)
    registry.register(RegistryKind.CHECK, "isnum", is_num)
    registry.register(RegistryKind.CHECK_FACTORY, "min", new_min_check)
    registry.register(RegistryKind.CHECK_FACTORY, "regexp", new_regexp_check)
    return registry


def default_registry() -> Registry:
    """Return the process-wide registry, creating it on first use.

    Extensions registered here are visible to every later
    :func:`resolve_config` call that does not pass its own registry.
    """

    global _DEFAULT_REGISTRY
    with _DEFAULT_REGISTRY_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = build_registry()
        return _DEFAULT_REGISTRY


@dataclass
class PipelineContext:
    """Inputs shared by all stages of one pipeline run.

    Attributes
    ----------
    store:
        Property store mutated in place by every stage.
    registry:
        Registry consulted for readers and decoders.
    argv:
        Argument tokens for the ``args`` stage; ``None`` means ``sys.argv[1:]``.
    environ:
        Environment for the ``env`` stage; ``None`` means ``os.environ``.
    runtime_mode:
        Mode appended last by the ``modes`` stage; ``None`` triggers detection.
    stream:
        Target of the ``help`` dump; ``None`` means standard output.
    """

    store: PropertyStore
    registry: Registry = field(default_factory=default_registry)
    argv: Sequence[str] | None = None
    environ: Mapping[str, str] | None = None
    runtime_mode: str | None = None
    stream: TextIO | None = None


Stage = Callable[[PipelineContext], object]


def _stage_resolve(context: PipelineContext) -> object:
    return resolve_sources(context.store, context.registry)


def _stage_decode(context: PipelineContext) -> object:
    return decode_into(context.store, context.registry)


def _stage_args(context: PipelineContext) -> object:
    return apply_args(context.store, context.argv)


def _stage_env(context: PipelineContext) -> object:
    return apply_env(context.store, context.environ)


def _stage_modes(context: PipelineContext) -> object:
    mode = context.runtime_mode if context.runtime_mode is not None else detect_runtime_mode()
    return apply_modes(context.store, mode)


def _stage_help(context: PipelineContext) -> object:
    return introspect(context.store, context.stream)


DEFAULT_STAGES: tuple[tuple[str, Stage], ...] = (
    ("resolve", _stage_resolve),
    ("decode", _stage_decode),
    ("args", _stage_args),
    ("env", _stage_env),
    ("modes", _stage_modes),
    ("help", _stage_help),
)


def run_pipeline(context: PipelineContext, stages: Sequence[tuple[str, Stage]] = DEFAULT_STAGES) -> PropertyStore:
    """Run *stages* in order over *context* and return its store.

    The first exception raised by a stage aborts the run and propagates
    unchanged; stages after it do not run.
    """

    for name, stage in stages:
        outcome = stage(context)
        log_debug("stage_completed", **make_event(name, None, {"outcome": repr(outcome)}))
    return context.store


def resolve_config(
    *,
    sources: Sequence[str] | None = None,
    store: PropertyStore | None = None,
    registry: Registry | None = None,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
    runtime_mode: str | None = None,
    stream: TextIO | None = None,
    stages: Sequence[tuple[str, Stage]] | None = None,
) -> PropertyStore:
    """Run the bootstrap pipeline and return the resolved property store.

    Parameters
    ----------
    sources:
        Source descriptors to store at ``keys.config`` before resolving. When
        omitted, whatever the store already holds there is used.
    store:
        Existing store to mutate (for pre-seeded defaults). A fresh one is
        created otherwise.
    registry:
        Registry to use; defaults to :func:`default_registry`.
    argv / environ / runtime_mode / stream:
        Overrides for the process state the stages would otherwise read.
    stages:
        Custom stage sequence; defaults to :data:`DEFAULT_STAGES`.

    Raises
    ------
    ConfigError
        ``AllSourcesFailed``, ``UnknownContentType`` or ``DecodeFailure`` from
        the stage that failed. Bootstrap code is expected to abort on it.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from pathlib import Path
    >>> tmp = TemporaryDirectory()
    >>> path = Path(tmp.name) / "app.json"
    >>> _ = path.write_text('{"server": {"port": 80}, "enable": ["dev"], "mods": {"dev": {"debug": true}}}')
    >>> store = resolve_config(
    ...     sources=[str(Path(tmp.name) / "missing.json"), str(path)],
    ...     argv=["--server.host=example.org"],
    ...     environ={"ENV_SERVER_PORT": "8080"},
    ...     runtime_mode="linux",
    ... )
    >>> store.get("server.port"), store.get("server.host"), store.get("debug")
    ('8080', 'example.org', True)
    >>> tmp.cleanup()
    """

    bind_trace_id(None)
    target = store if store is not None else PropertyStore()
    if sources is not None:
        target.set(CONFIG_KEY, list(sources), layer="defaults")
    context = PipelineContext(
        store=target,
        registry=registry if registry is not None else default_registry(),
        argv=argv,
        environ=environ,
        runtime_mode=runtime_mode,
        stream=stream,
    )
    run_pipeline(context, stages if stages is not None else DEFAULT_STAGES)
    log_info("configuration_resolved", **make_event("pipeline", target.get("keys.configpath"), {"keys": len(target)}))
    return target


__all__ = [
    "DEFAULT_STAGES",
    "PipelineContext",
    "Stage",
    "build_registry",
    "default_registry",
    "resolve_config",
    "run_pipeline",
]
