"""Validation of function-level gentest attributes.

:func:`validate_attributes` turns the parsed attributes of a test, benchmark
or jitter function into an :class:`~gentestkit.attributes.AttributeSummary`.
Problems never raise. Each one is passed to ``report``, when given, and is
added to ``summary.errors``.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Set

from gentestkit.attributes import (
    AttributeSummary,
    GeomSpec,
    LinspaceSpec,
    LogspaceSpec,
    ParamPack,
    ParamSet,
    ParsedAttribute,
    RangeSpec,
    split_tuple,
)

__all__ = [
    "DEFAULT_FLAG_ATTRIBUTES",
    "DEFAULT_VALUE_ATTRIBUTES",
    "validate_attributes",
]

Report = Callable[[str], None]

DEFAULT_FLAG_ATTRIBUTES = frozenset({"slow", "linux", "windows"})
DEFAULT_VALUE_ATTRIBUTES = frozenset({"owner"})

_WHITESPACE = " \t\n\r\f\v"


def _quoted_arguments(arguments: Iterable[str]) -> str:
    return ", ".join(f'"{arg}"' for arg in arguments)


class _FunctionValidator:
    def __init__(self, report: Optional[Report], flags: Set[str], values: Set[str]) -> None:
        self.report = report
        self.flags = flags
        self.values = values
        self.summary = AttributeSummary()
        self.seen_case_kinds: Set[str] = set()
        self.seen_flags: Set[str] = set()
        self.seen_owner: Optional[str] = None
        self.handlers: Dict[str, Callable[[ParsedAttribute], None]] = {
            "test": self._test,
            "bench": self._bench,
            "benchmark": self._bench,
            "jitter": self._jitter,
            "baseline": self._baseline,
            "req": self._requirements,
            "requires": self._requirements,
            "skip": self._skip,
            "template": self._template,
            "parameters": self._parameters,
            "range": self._range,
            "linspace": self._linspace,
            "geom": self._geom,
            "geomspace": self._geom,
            "geospace": self._geom,
            "logspace": self._logspace,
            "parameters_pack": self._parameters_pack,
            "fixtures": self._fixtures,
        }

    def fail(self, message: str) -> None:
        self.summary._fail(message, self.report)

    def add_tag(self, tag: str) -> None:
        if tag not in self.summary.tags:
            self.summary.tags.append(tag)

    def run(self, parsed: Iterable[ParsedAttribute]) -> AttributeSummary:
        for attr in parsed:
            lowered = attr.name.lower()
            handler = self.handlers.get(lowered)
            if handler is not None:
                handler(attr)
            elif not attr.arguments:
                self._flag(attr, lowered)
            else:
                self._value(attr, lowered)
        return self.summary

    def _case_name(self, attr: ParsedAttribute, kind: str) -> bool:
        if kind in self.seen_case_kinds:
            self.fail(f"duplicate gentest attribute '{kind}'")
            return False
        self.seen_case_kinds.add(kind)
        if len(attr.arguments) != 1 or not attr.arguments[0]:
            self.fail(f"'{kind}' requires exactly one non-empty string argument")
            return False
        self.summary.case_name = attr.arguments[0]
        return True

    def _test(self, attr: ParsedAttribute) -> None:
        self._case_name(attr, "test")

    def _bench(self, attr: ParsedAttribute) -> None:
        if self._case_name(attr, "bench"):
            self.summary.is_benchmark = True

    def _jitter(self, attr: ParsedAttribute) -> None:
        if self._case_name(attr, "jitter"):
            self.summary.is_jitter = True

    def _baseline(self, attr: ParsedAttribute) -> None:
        if attr.arguments:
            self.fail("'baseline' does not take arguments")
            return
        self.summary.is_baseline = True

    def _requirements(self, attr: ParsedAttribute) -> None:
        if not attr.arguments:
            self.fail("'req' requires at least one string argument")
            return
        for requirement in attr.arguments:
            if requirement not in self.summary.requirements:
                self.summary.requirements.append(requirement)

    def _skip(self, attr: ParsedAttribute) -> None:
        self.summary.should_skip = True
        if attr.arguments:
            self.summary.skip_reason = ", ".join(attr.arguments)

    def _template(self, attr: ParsedAttribute) -> None:
        if len(attr.arguments) < 2:
            self.fail("'template' requires a parameter name and at least one type")
            return
        param = attr.arguments[0].strip(_WHITESPACE)
        if not param:
            self.fail("'template' parameter name must be non-empty")
            return
        if any(name == param for name, _types in self.summary.template_sets):
            self.fail("duplicate 'template' attribute for the same parameter")
            return
        self.summary.template_sets.append((param, list(attr.arguments[1:])))

    def _parameters(self, attr: ParsedAttribute) -> None:
        if len(attr.arguments) < 2:
            self.fail("'parameters' requires a parameter name and at least one value")
            return
        self.summary.parameter_sets.append(
            ParamSet(param_name=attr.arguments[0], values=list(attr.arguments[1:]))
        )

    def _range(self, attr: ParsedAttribute) -> None:
        args = attr.arguments
        if len(args) < 2:
            self.fail(
                "'parameters_range' requires (name, start, step, end) or "
                '(name, "start:step:end")'
            )
            return
        if len(args) == 2:
            expr = args[1]
            first = expr.find(":")
            last = expr.rfind(":")
            if first == -1 or first == last:
                self.fail("'parameters_range' second argument must be of the form start:step:end")
                return
            spec = RangeSpec(args[0], expr[:first], expr[first + 1:last], expr[last + 1:])
        elif len(args) == 4:
            spec = RangeSpec(args[0], args[1], args[2], args[3])
        else:
            self.fail("'parameters_range' requires exactly 2 or 4 arguments")
            return
        self.summary.parameter_ranges.append(spec)

    def _linspace(self, attr: ParsedAttribute) -> None:
        if len(attr.arguments) != 4:
            self.fail("'parameters_linspace' requires (name, start, end, count)")
            return
        self.summary.parameter_linspaces.append(LinspaceSpec(*attr.arguments))

    def _geom(self, attr: ParsedAttribute) -> None:
        if len(attr.arguments) != 4:
            self.fail("'geom' requires (name, start, factor, count)")
            return
        self.summary.parameter_geoms.append(GeomSpec(*attr.arguments))

    def _logspace(self, attr: ParsedAttribute) -> None:
        if len(attr.arguments) not in (4, 5):
            self.fail("'logspace' requires (name, startExp, endExp, count[, base])")
            return
        self.summary.parameter_logspaces.append(LogspaceSpec(*attr.arguments))

    def _parameters_pack(self, attr: ParsedAttribute) -> None:
        if len(attr.arguments) < 2:
            self.fail(
                "'parameters_pack' requires a parameter name tuple and at least one value tuple"
            )
            return
        names = split_tuple(attr.arguments[0])
        if not names:
            self.fail("'parameters_pack' first tuple must list at least one parameter name")
            return
        rows: List[List[str]] = []
        for text in attr.arguments[1:]:
            row = split_tuple(text)
            if len(row) != len(names):
                self.fail("'parameters_pack' value tuple arity mismatch")
                continue
            rows.append(row)
        if not rows:
            self.fail("'parameters_pack' requires at least one value tuple")
            return
        self.summary.param_packs.append(ParamPack(names=names, rows=rows))

    def _fixtures(self, attr: ParsedAttribute) -> None:
        if not attr.arguments:
            self.fail("'fixtures' requires at least one type name")
            return
        for type_name in attr.arguments:
            if not type_name:
                self.fail("'fixtures' contains an empty type token")
                break
            self.summary.fixtures_types.append(type_name)

    def _flag(self, attr: ParsedAttribute, lowered: str) -> None:
        if lowered not in self.flags:
            self.fail(f"unknown gentest attribute '{attr.name}'")
            return
        if lowered in self.seen_flags:
            self.fail(f"duplicate gentest flag attribute '{attr.name}'")
            return
        if (lowered == "linux" and "windows" in self.seen_flags) or (
            lowered == "windows" and "linux" in self.seen_flags
        ):
            self.fail("conflicting gentest flags 'linux' and 'windows'")
            return
        self.seen_flags.add(lowered)
        self.add_tag(attr.name)

    def _value(self, attr: ParsedAttribute, lowered: str) -> None:
        if lowered not in self.values:
            plural = "" if len(attr.arguments) == 1 else "s"
            self.fail(
                f"unknown gentest attribute '{attr.name}' with argument{plural} "
                f"({_quoted_arguments(attr.arguments)})"
            )
            return
        if lowered != "owner":
            return
        if len(attr.arguments) != 1:
            self.fail(f"'{lowered}' requires exactly one string argument")
            return
        if self.seen_owner is not None:
            self.fail(f"duplicate '{lowered}' attribute")
            return
        self.seen_owner = attr.arguments[0]
        self.add_tag(f"{attr.name}={attr.arguments[0]}")


def validate_attributes(
    parsed: Iterable[ParsedAttribute],
    report: Optional[Report] = None,
    allowed_flags: Iterable[str] = DEFAULT_FLAG_ATTRIBUTES,
    allowed_values: Iterable[str] = DEFAULT_VALUE_ATTRIBUTES,
) -> AttributeSummary:
    """Validate a function's gentest attributes and collect their metadata.

    ``allowed_flags`` names the argument-less attributes kept as tags;
    ``allowed_values`` names the attributes that take values. A missing
    ``test`` attribute is not an error.
    """
    validator = _FunctionValidator(
        report,
        {name.lower() for name in allowed_flags},
        {name.lower() for name in allowed_values},
    )
    return validator.run(parsed)