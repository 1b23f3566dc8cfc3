"""Mode overlay: merge named ``mods.<mode>`` subtrees onto the root.

The list of modes comes from ``enable``. The detected runtime mode (``docker``
or the operating system name) is always appended, so its overlay is applied
last and wins every conflict.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..domain.store import PropertyStore
from ..observability import log_debug, log_info, make_event
from .merge import merge_into

ENABLE_KEY = "enable"
MODS_KEY = "mods"


def mode_name(item: object) -> str:
    """Render one ``enable`` entry the way mode keys are written in config files.

    Booleans become ``true``/``false`` and whole floats lose their ``.0``, so
    YAML such as ``enable: [true, 1.0]`` selects ``mods.true`` and ``mods.1``.

    Examples
    --------
    >>> [mode_name(item) for item in ("dev", True, 2, 1.0, 1.5)]
    ['dev', 'true', '2', '1', '1.5']
    """

    if isinstance(item, str):
        return item
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, float) and item.is_integer() and abs(item) < 1e21:
        return str(int(item))
    return str(item)


def enabled_modes(store: PropertyStore, runtime_mode: str | None) -> list[str] | None:
    """Return the ordered modes to apply, or ``None`` when ``enable`` is not a list.

    Examples
    --------
    >>> enabled_modes(PropertyStore({"enable": ["dev", 2]}), "docker")
    ['dev', '2', 'docker']
    >>> enabled_modes(PropertyStore({"enable": "dev"}), "linux") is None
    True
    """

    value = store.get(ENABLE_KEY)
    if not isinstance(value, (list, tuple)):
        return None
    modes = [mode_name(item) for item in value]
    if runtime_mode:
        modes.append(runtime_mode)
    return modes


def apply_modes(store: PropertyStore, runtime_mode: str | None) -> list[str]:
    """Merge every enabled ``mods.<mode>`` subtree onto the root, in order.

    Returns the modes whose subtree was present and merged. Modes without a
    mapping under ``mods`` are skipped silently.

    Examples
    --------
    >>> store = PropertyStore({"enable": ["dev"], "x": 1, "mods": {"dev": {"x": 2}, "docker": {"x": 3}}})
    >>> apply_modes(store, "docker")
    ['dev', 'docker']
    >>> store.get("x")
    3
    """

    modes = enabled_modes(store, runtime_mode)
    if modes is None:
        log_debug("modes_skipped", **make_event("modes", None, {"reason": "enable is not a list"}))
        return []
    applied: list[str] = []
    for mode in modes:
        overlay = store.get(f"{MODS_KEY}.{mode}")
        if not isinstance(overlay, Mapping):
            continue
        merge_into(store, overlay, layer=f"{MODS_KEY}.{mode}")
        applied.append(mode)
        log_debug("mode_applied", **make_event("modes", None, {"mode": mode, "keys": len(overlay)}))
    log_info("modes_applied", **make_event("modes", None, {"requested": modes, "applied": applied}))
    return applied
