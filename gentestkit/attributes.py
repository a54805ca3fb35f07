"""Attribute records and validation of class- and namespace-level attributes.

Function-level validation lives in :mod:`gentestkit.validate`. This module
holds the data model it fills in, and the validators for fixture types and
suite namespaces.

Validators never raise on bad input. Each problem is passed to the ``report``
callback when one is given, and is also added to the summary's ``errors``
list. ``had_error`` is then set.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

__all__ = [
    "ParsedAttribute",
    "FixtureLifetime",
    "RangeSpec",
    "LinspaceSpec",
    "GeomSpec",
    "LogspaceSpec",
    "ParamSet",
    "ParamPack",
    "AttributeSummary",
    "FixtureAttributeSummary",
    "SuiteAttributeSummary",
    "split_tuple",
    "validate_fixture_attributes",
    "validate_namespace_attributes",
]

Report = Callable[[str], None]

DEFAULT_FIXTURE_ATTRIBUTES = frozenset({"fixture"})

_TUPLE_TRIM = " \t\n\r"
_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass(frozen=True)
class ParsedAttribute:
    """One attribute as written: a name and its string arguments."""

    name: str
    arguments: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))


class FixtureLifetime(enum.Enum):
    """How long a fixture instance lives."""

    MEMBER_EPHEMERAL = "ephemeral"
    MEMBER_SUITE = "suite"
    MEMBER_GLOBAL = "global"


@dataclass
class RangeSpec:
    """A ``range(name, start, step, end)`` parameter generator."""

    name: str
    start: str
    step: str
    end: str


@dataclass
class LinspaceSpec:
    """A ``linspace(name, start, end, count)`` parameter generator."""

    name: str
    start: str
    end: str
    count: str


@dataclass
class GeomSpec:
    """A ``geom(name, start, factor, count)`` parameter generator."""

    name: str
    start: str
    factor: str
    count: str


@dataclass
class LogspaceSpec:
    """A ``logspace(name, start_exp, end_exp, count[, base])`` generator."""

    name: str
    start_exp: str
    end_exp: str
    count: str
    base: str = ""


@dataclass
class ParamSet:
    """Literal values for one named function parameter."""

    param_name: str
    values: List[str] = field(default_factory=list)


@dataclass
class ParamPack:
    """Rows of values bundled across several parameters."""

    names: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


@dataclass
class _Diagnostics:
    had_error: bool = False
    errors: List[str] = field(default_factory=list)

    def _fail(self, message: str, report: Optional[Report]) -> None:
        self.had_error = True
        self.errors.append(message)
        if report is not None:
            report(message)


@dataclass
class AttributeSummary(_Diagnostics):
    """Validated metadata of a test, benchmark or jitter function."""

    case_name: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    requirements: List[str] = field(default_factory=list)
    should_skip: bool = False
    skip_reason: str = ""
    is_benchmark: bool = False
    is_jitter: bool = False
    is_baseline: bool = False
    template_sets: List[Tuple[str, List[str]]] = field(default_factory=list)
    template_nttp_sets: List[Tuple[str, List[str]]] = field(default_factory=list)
    parameter_sets: List[ParamSet] = field(default_factory=list)
    parameter_ranges: List[RangeSpec] = field(default_factory=list)
    parameter_linspaces: List[LinspaceSpec] = field(default_factory=list)
    parameter_geoms: List[GeomSpec] = field(default_factory=list)
    parameter_logspaces: List[LogspaceSpec] = field(default_factory=list)
    param_packs: List[ParamPack] = field(default_factory=list)
    fixtures_types: List[str] = field(default_factory=list)


@dataclass
class FixtureAttributeSummary(_Diagnostics):
    """Validated fixture semantics of a class."""

    lifetime: FixtureLifetime = FixtureLifetime.MEMBER_EPHEMERAL


@dataclass
class SuiteAttributeSummary(_Diagnostics):
    """Validated suite metadata of a namespace."""

    suite_name: Optional[str] = None


def _trimmed(token: str) -> Optional[str]:
    stripped = token.strip(_TUPLE_TRIM)
    return stripped or None


def split_tuple(text: str) -> List[str]:
    """Split ``"(a, f(b, c), "x,y")"`` into its top-level, trimmed elements.

    Outer parentheses are optional. Commas nested in brackets or inside
    double-quoted strings do not split; empty elements are dropped.
    """
    if text.startswith("(") and text.endswith(")") and len(text) >= 2:
        text = text[1:-1]

    parts: List[str] = []
    current: List[str] = []
    depth = 0
    in_string = False
    escaped = False

    def flush() -> None:
        token = _trimmed("".join(current))
        if token is not None:
            parts.append(token)
        current.clear()

    for ch in text:
        if in_string:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            flush()
            continue
        current.append(ch)
    flush()
    return parts


def _quoted_arguments(arguments: Sequence[str]) -> str:
    return ", ".join(f'"{arg}"' for arg in arguments)


def _unknown_message(kind: str, attr: ParsedAttribute) -> str:
    if not attr.arguments:
        return f"unknown gentest {kind} attribute '{attr.name}'"
    plural = "" if len(attr.arguments) == 1 else "s"
    return (
        f"unknown gentest {kind} attribute '{attr.name}' with argument{plural} "
        f"({_quoted_arguments(attr.arguments)})"
    )


def validate_fixture_attributes(
    parsed: Iterable[ParsedAttribute],
    report: Optional[Report] = None,
    fixture_attributes: Iterable[str] = DEFAULT_FIXTURE_ATTRIBUTES,
) -> FixtureAttributeSummary:
    """Validate attributes on a fixture class and work out its lifetime."""
    allowed = {name.lower() for name in fixture_attributes}
    summary = FixtureAttributeSummary()
    saw_fixture = False

    for attr in parsed:
        lowered = attr.name.lower()
        if lowered not in allowed:
            summary._fail(_unknown_message("class", attr), report)
            continue
        if saw_fixture:
            summary._fail("duplicate gentest attribute 'fixture' on fixture type", report)
            continue
        saw_fixture = True
        if len(attr.arguments) != 1:
            summary._fail("'fixture' requires exactly one argument: 'suite' or 'global'", report)
            continue
        scope = attr.arguments[0]
        normalized = scope.lower()
        if normalized == "suite":
            summary.lifetime = FixtureLifetime.MEMBER_SUITE
        elif normalized == "global":
            summary.lifetime = FixtureLifetime.MEMBER_GLOBAL
        else:
            summary._fail(
                f"unknown fixture scope '{scope}'; expected 'suite' or 'global'", report
            )
    return summary


def validate_namespace_attributes(
    parsed: Iterable[ParsedAttribute], report: Optional[Report] = None
) -> SuiteAttributeSummary:
    """Validate attributes on a namespace and extract its suite name."""
    summary = SuiteAttributeSummary()
    saw_suite = False

    for attr in parsed:
        if attr.name.lower() != "suite":
            summary._fail(_unknown_message("namespace", attr), report)
            continue
        if saw_suite:
            summary._fail("duplicate gentest namespace attribute 'suite'", report)
            continue
        if len(attr.arguments) != 1:
            summary._fail("'suite' requires exactly one string argument", report)
            continue
        if not attr.arguments[0]:
            summary._fail("'suite' argument must not be empty", report)
            continue
        saw_suite = True
        summary.suite_name = attr.arguments[0]
    return summary