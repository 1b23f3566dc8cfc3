"""Built-in route parameter checks.

Purpose
-------
Provide the predicates and predicate factories an external router uses to
validate path parameters (``/users/{id|isnum}``, ``/page/{n|min:1}``). The
functions only validate strings; parsing route patterns is the router's job.

Contents
--------
* :func:`is_num` – accepts decimal integer strings.
* :func:`new_min_check` – factory for "integer at least ``n``" predicates.
* :func:`new_regexp_check` – factory for regular-expression predicates.
* :func:`compile_check` – resolve ``name`` or ``name:parameter`` against a
  registry and fail loudly when it cannot be compiled.

Factories never raise for a bad parameter: they return ``None`` and log a
``check_parameter_invalid`` event, leaving the decision to the caller.
"""

from __future__ import annotations

import re

from ..domain.errors import MalformedCheckParameter, UnknownCheckFunction
from ..observability import log_debug
from .ports import CheckPredicate
from .registry import Registry

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_int(text: str) -> int | None:
    """Parse a strict decimal integer: optional sign, ASCII digits, nothing else.

    Examples
    --------
    >>> _parse_int("+42"), _parse_int("-7"), _parse_int(" 7"), _parse_int("1_000")
    (42, -7, None, None)
    """

    if _INTEGER.fullmatch(text) is None:
        return None
    return int(text)


def is_num(argument: str) -> bool:
    """Return ``True`` when *argument* is a decimal integer.

    Examples
    --------
    >>> is_num("123"), is_num("-5"), is_num("12a"), is_num("")
    (True, True, False, False)
    """

    return _parse_int(argument) is not None


def new_min_check(parameter: str) -> CheckPredicate | None:
    """Return a predicate accepting integers ``>= parameter``.

    Examples
    --------
    >>> at_least_five = new_min_check("5")
    >>> at_least_five("10"), at_least_five("3"), at_least_five("abc")
    (True, False, False)
    >>> new_min_check("abc") is None
    True
    """

    threshold = _parse_int(parameter)
    if threshold is None:
        log_debug("check_parameter_invalid", check="min", parameter=parameter)
        return None

    def check_min(argument: str) -> bool:
        value = _parse_int(argument)
        return value is not None and value >= threshold

    return check_min


def new_regexp_check(parameter: str) -> CheckPredicate | None:
    """Return a predicate that searches *argument* for the pattern *parameter*.

    The match is partial: ``^`` and ``$`` must be written out to anchor it.

    Examples
    --------
    >>> digits = new_regexp_check(r"^[0-9]+$")
    >>> digits("2024"), digits("v2024")
    (True, False)
    >>> new_regexp_check("(") is None
    True
    """

    try:
        pattern = re.compile(parameter)
    except re.error as exc:
        log_debug("check_parameter_invalid", check="regexp", parameter=parameter, error=str(exc))
        return None

    def check_regexp(argument: str) -> bool:
        return pattern.search(argument) is not None

    return check_regexp


def compile_check(expression: str, registry: Registry) -> CheckPredicate:
    """Resolve a check *expression* to a predicate or raise.

    ``name`` looks up a plain predicate; ``name:parameter`` (split at the first
    colon) compiles the parameter with the factory ``name``.

    Raises
    ------
    UnknownCheckFunction
        When no predicate or factory is registered under the name.
    MalformedCheckParameter
        When the factory returned ``None`` for the parameter.

    Examples
    --------
    >>> from lib_config_pipeline.core import build_registry
    >>> compile_check("min:18", build_registry())("21")
    True
    >>> compile_check("min:eighteen", build_registry())
    Traceback (most recent call last):
    ...
    lib_config_pipeline.domain.errors.MalformedCheckParameter: check 'min' cannot compile parameter 'eighteen'
    """

    name, separator, parameter = expression.partition(":")
    if not separator:
        predicate = registry.check(name)
        if predicate is None:
            raise UnknownCheckFunction(f"no check function registered as {name!r}")
        return predicate
    factory = registry.check_factory(name)
    if factory is None:
        raise UnknownCheckFunction(f"no check factory registered as {name!r}")
    compiled = factory(parameter)
    if compiled is None:
        raise MalformedCheckParameter(f"check {name!r} cannot compile parameter {parameter!r}")
    return compiled
