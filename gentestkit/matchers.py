"""Argument matchers for mock expectations.

Each matcher yields an :class:`ArgPredicate`: a test that decides whether an
argument is acceptable, plus an optional description that explains a
mismatch in terms of the argument that was actually seen.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

__all__ = [
    "ArgPredicate",
    "describe_value",
    "to_arg_predicate",
    "any_value",
    "eq",
    "in_range",
    "not_",
    "ge",
    "le",
    "gt",
    "lt",
    "near",
    "str_contains",
    "starts_with",
    "ends_with",
    "any_of",
    "all_of",
]

DEFAULT_MISMATCH = "predicate mismatch"


@dataclass(frozen=True)
class ArgPredicate:
    """A test on a single argument with an optional mismatch description."""

    test: Callable[[Any], bool]
    describe: Optional[Callable[[Any], str]] = None

    def matches(self, value: Any) -> bool:
        """Return True when ``value`` satisfies the predicate."""
        return bool(self.test(value))

    def explain(self, value: Any) -> str:
        """Describe why ``value`` did not match."""
        return _describe_or(self, value, DEFAULT_MISMATCH)

    __call__ = matches


def _describe_or(predicate: ArgPredicate, value: Any, default: str) -> str:
    if predicate.describe is None:
        return default
    return predicate.describe(value)


def describe_value(value: Any) -> str:
    """Render a value for diagnostics, falling back to its type name."""
    if isinstance(value, str):
        return value
    if type(value).__str__ is object.__str__ and type(value).__repr__ is object.__repr__:
        return type(value).__qualname__
    return str(value)


def to_arg_predicate(predicate: Any) -> ArgPredicate:
    """Turn a matcher or a plain callable into an :class:`ArgPredicate`."""
    if isinstance(predicate, ArgPredicate):
        return predicate
    if callable(predicate):
        return ArgPredicate(test=predicate, describe=lambda _value: DEFAULT_MISMATCH)
    raise TypeError(f"cannot use {type(predicate).__qualname__} as an argument predicate")


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="surrogateescape")
    raise TypeError(f"expected a string argument, got {type(value).__qualname__}")


def any_value() -> ArgPredicate:
    """Match any argument."""
    return ArgPredicate(test=lambda _value: True)


def eq(expected: Any) -> ArgPredicate:
    """Match arguments equal to ``expected``."""
    return ArgPredicate(
        test=lambda a: a == expected,
        describe=lambda a: f"expected == {describe_value(expected)}, got {describe_value(a)}",
    )


def in_range(lo: Any, hi: Any) -> ArgPredicate:
    """Match arguments in the closed interval ``[lo, hi]``."""
    return ArgPredicate(
        test=lambda a: a >= lo and a <= hi,
        describe=lambda a: (
            f"expected in [{describe_value(lo)}, {describe_value(hi)}], got {describe_value(a)}"
        ),
    )


def not_(inner: Any) -> ArgPredicate:
    """Match arguments that ``inner`` rejects."""
    inner_pred = to_arg_predicate(inner)
    return ArgPredicate(
        test=lambda a: not inner_pred.matches(a),
        describe=lambda a: f"not({_describe_or(inner_pred, a, 'predicate matched')})",
    )


def _comparison(bound: Any, symbol: str, check: Callable[[Any, Any], bool]) -> ArgPredicate:
    return ArgPredicate(
        test=lambda a: check(a, bound),
        describe=lambda a: f"expected {symbol} {describe_value(bound)}, got {describe_value(a)}",
    )


def ge(bound: Any) -> ArgPredicate:
    """Match arguments ``>= bound``."""
    return _comparison(bound, ">=", lambda a, b: a >= b)


def le(bound: Any) -> ArgPredicate:
    """Match arguments ``<= bound``."""
    return _comparison(bound, "<=", lambda a, b: a <= b)


def gt(bound: Any) -> ArgPredicate:
    """Match arguments ``> bound``."""
    return _comparison(bound, ">", lambda a, b: a > b)


def lt(bound: Any) -> ArgPredicate:
    """Match arguments ``< bound``."""
    return _comparison(bound, "<", lambda a, b: a < b)


def near(expected: Any, eps: Any) -> ArgPredicate:
    """Match numbers within ``eps`` of ``expected`` (inclusive)."""
    return ArgPredicate(
        test=lambda a: abs(float(a) - float(expected)) <= float(eps),
        describe=lambda a: (
            f"expected near {describe_value(expected)} ± {describe_value(eps)}, "
            f"got {describe_value(a)}"
        ),
    )


def str_contains(needle: str) -> ArgPredicate:
    """Match strings containing ``needle``."""
    return ArgPredicate(
        test=lambda a: needle in _as_text(a),
        describe=lambda a: f"expected substring '{needle}', got '{_as_text(a)}'",
    )


def starts_with(prefix: str) -> ArgPredicate:
    """Match strings beginning with ``prefix``."""
    return ArgPredicate(
        test=lambda a: _as_text(a).startswith(prefix),
        describe=lambda a: f"expected prefix '{prefix}', got '{_as_text(a)}'",
    )


def ends_with(suffix: str) -> ArgPredicate:
    """Match strings ending with ``suffix``."""
    return ArgPredicate(
        test=lambda a: _as_text(a).endswith(suffix),
        describe=lambda a: f"expected suffix '{suffix}', got '{_as_text(a)}'",
    )


def _combined_description(header: str, subs: tuple[ArgPredicate, ...], value: Any) -> str:
    return header + "; ".join(_describe_or(sub, value, "predicate") for sub in subs)


def any_of(*args: Any) -> ArgPredicate:
    """Match arguments accepted by at least one of the given matchers."""
    subs = tuple(to_arg_predicate(arg) for arg in args)
    return ArgPredicate(
        test=lambda a: any(sub.matches(a) for sub in subs),
        describe=lambda a: _combined_description("expected any of: ", subs, a),
    )


def all_of(*args: Any) -> ArgPredicate:
    """Match arguments accepted by every one of the given matchers."""
    subs = tuple(to_arg_predicate(arg) for arg in args)
    return ArgPredicate(
        test=lambda a: all(sub.matches(a) for sub in subs),
        describe=lambda a: _combined_description("expected all of: ", subs, a),
    )