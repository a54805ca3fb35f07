"""Expectation-based mocks: expectations, per-instance state and mocks.

A :class:`Mock` stands in for an object of a given class. Calls made on it
are matched against queued expectations, in the order they were set up with
:func:`expect`. Failures never raise. Each failure is reported through a
callback and also kept in the mock's ``failures`` list.
"""

from __future__ import annotations

import inspect
from collections import deque
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Deque, Dict, Hashable, List, Optional, Tuple

from gentestkit.matchers import ArgPredicate, describe_value, to_arg_predicate

__all__ = [
    "Expectation",
    "verify_calls_or_fail",
    "check_args_equal",
    "check_args_by_predicates",
    "InstanceState",
    "ExpectationHandle",
    "Mock",
    "expect",
    "make_nice",
    "make_strict",
]

Report = Callable[[str], None]


def verify_calls_or_fail(
    expected: int,
    observed: int,
    method_name: str,
    already_verified: bool,
    report: Report,
) -> bool:
    """Report a shortfall of calls once; return the new "verified" flag."""
    if already_verified:
        return True
    if observed < expected:
        report(f"expected {expected} call(s) to {method_name} but observed {observed}")
    return True


def _check_arity(what: str, values: Tuple[Any, ...], actual_count: int) -> None:
    if len(values) != actual_count:
        raise TypeError(f"{what} expects {len(values)} argument(s), got {actual_count}")


def check_args_equal(
    expected: Optional[Tuple[Any, ...]], method_name: str, report: Report, *args: Any
) -> bool:
    """Compare ``args`` with ``expected``; report the first mismatch."""
    if expected is None:
        return True
    _check_arity("argument check", expected, len(args))
    for index, (want, got) in enumerate(zip(expected, args)):
        if not (want == got):
            report(
                f"argument[{index}] mismatch for {method_name}: "
                f"expected {describe_value(want)}, got {describe_value(got)}"
            )
            return False
    return True


def check_args_by_predicates(
    predicates: Optional[Tuple[ArgPredicate, ...]], method_name: str, report: Report, *args: Any
) -> bool:
    """Test each argument with its predicate; stop at the first failure."""
    if predicates is None:
        return True
    _check_arity("predicate check", predicates, len(args))
    for index, (predicate, value) in enumerate(zip(predicates, args)):
        if not predicate.matches(value):
            report(f"argument[{index}] mismatch for {method_name}: {predicate.explain(value)}")
            return False
    return True


@dataclass
class Expectation:
    """One expected call pattern on a mocked method."""

    expected_calls: int = 1
    observed_calls: int = 0
    allow_excess: bool = False
    expected_args: Optional[Tuple[Any, ...]] = None
    arg_predicates: Optional[Tuple[ArgPredicate, ...]] = None
    call_predicate: Optional[Callable[..., bool]] = None
    action: Optional[Callable[..., Any]] = None
    arity: Optional[int] = None
    already_verified: bool = False

    def is_satisfied(self) -> bool:
        """True once at least the expected number of calls was observed."""
        return self.observed_calls >= self.expected_calls

    def verify(self, method_name: str, report: Report) -> None:
        """Report if fewer calls than expected were seen (only once)."""
        self.already_verified = verify_calls_or_fail(
            self.expected_calls, self.observed_calls, method_name, self.already_verified, report
        )

    def _require_arity(self, what: str, count: int) -> None:
        if self.arity is not None and count != self.arity:
            raise TypeError(f"{what} arity must match mocked method: expected {self.arity}, got {count}")

    def set_expected(self, *args: Any) -> None:
        """Expect the call arguments to equal ``args``."""
        self._require_arity("with_args", len(args))
        self.expected_args = tuple(args)

    def set_predicates(self, *args: Any) -> None:
        """Expect each call argument to satisfy the matching predicate."""
        self._require_arity("where_args", len(args))
        self.arg_predicates = tuple(to_arg_predicate(arg) for arg in args)

    def check_args(self, method_name: str, report: Report, *args: Any) -> bool:
        """Check the call arguments against whichever constraint is set."""
        if self.call_predicate is not None:
            if not self.call_predicate(*args):
                report(f"call predicate mismatch for {method_name}")
                return False
            return True
        if self.arg_predicates is not None:
            return check_args_by_predicates(self.arg_predicates, method_name, report, *args)
        return check_args_equal(self.expected_args, method_name, report, *args)

    def invoke(self, method_name: str, report: Report, *args: Any) -> Any:
        """Record a call, check it, and run the configured action."""
        if not self.allow_excess and self.observed_calls >= self.expected_calls:
            report(f"unexpected call to {method_name}")
        self.check_args(method_name, report, *args)
        self.observed_calls += 1
        if self.action is not None:
            return self.action(*args)
        return None


@dataclass
class _MethodEntry:
    method_name: str = ""
    queue: Deque[Expectation] = field(default_factory=deque)


class InstanceState:
    """Expectation queues of one mock instance, keyed by method."""

    def __init__(self, report: Optional[Report] = None) -> None:
        self._report = report
        self._methods: Dict[Hashable, _MethodEntry] = {}
        self._nice = False
        self.failures: List[str] = []

    def _record(self, message: str) -> None:
        self.failures.append(message)
        if self._report is not None:
            self._report(message)

    @property
    def nice(self) -> bool:
        """Whether calls without an expectation are silently accepted."""
        return self._nice

    def set_nice(self, value: bool) -> None:
        """Switch between nice and strict handling of unexpected calls."""
        self._nice = bool(value)

    def verify_all(self) -> None:
        """Verify every expectation still queued."""
        for entry in self._methods.values():
            for expectation in entry.queue:
                expectation.verify(entry.method_name, self._record)

    def push_expectation(self, method: Hashable, method_name: str) -> Expectation:
        """Queue a new expectation for ``method`` and return it."""
        entry = self._methods.setdefault(method, _MethodEntry())
        if not entry.method_name:
            entry.method_name = method_name
        expectation = Expectation()
        entry.queue.append(expectation)
        return expectation

    def dispatch(self, method: Hashable, method_name: str, *args: Any) -> Any:
        """Route a call to the front expectation of ``method``."""
        entry = self._methods.get(method)
        if entry is None or not entry.queue:
            if not self._nice:
                self._record(f"unexpected call to {method_name}")
            return None
        expectation = entry.queue[0]
        result = expectation.invoke(method_name, self._record, *args)
        if expectation.is_satisfied() and not expectation.allow_excess:
            entry.queue.popleft()
        return result


class ExpectationHandle:
    """Fluent configuration of a queued :class:`Expectation`."""

    def __init__(self, expectation: Optional[Expectation], method_name: str = "") -> None:
        self._expectation = expectation
        self.method_name = method_name

    @property
    def expectation(self) -> Optional[Expectation]:
        """The expectation being configured, if any."""
        return self._expectation

    def times(self, expected: int) -> "ExpectationHandle":
        """Expect exactly this many calls before the next expectation applies."""
        if expected < 0:
            raise ValueError("expected call count must not be negative")
        if self._expectation is not None:
            self._expectation.expected_calls = expected
        return self

    def invokes(self, action: Callable[..., Any]) -> "ExpectationHandle":
        """Run ``action`` with the call arguments and return its result."""
        if self._expectation is not None:
            self._expectation.action = action
        return self

    def with_args(self, *args: Any) -> "ExpectationHandle":
        """Require the call arguments to equal ``args``."""
        if self._expectation is not None:
            self._expectation.set_expected(*args)
        return self

    def where_args(self, *args: Any) -> "ExpectationHandle":
        """Require each argument to satisfy the matching predicate."""
        if self._expectation is not None:
            self._expectation.set_predicates(*args)
        return self

    def where(self, *args: Any) -> "ExpectationHandle":
        """Alias of :meth:`where_args`."""
        return self.where_args(*args)

    def where_call(self, call_predicate: Callable[..., bool]) -> "ExpectationHandle":
        """Require ``call_predicate(*args)`` to hold for each call."""
        if self._expectation is not None:
            self._expectation.call_predicate = call_predicate
        return self

    def returns(self, value: Any) -> "ExpectationHandle":
        """Return ``value`` from matching calls."""
        if self._expectation is not None:
            self._expectation.action = lambda *_args: value
        return self

    def allow_more(self, enabled: bool = True) -> "ExpectationHandle":
        """Accept calls beyond the expected count without reporting them."""
        if self._expectation is not None:
            self._expectation.allow_excess = enabled
        return self


def _mockable_methods(spec: type) -> Dict[str, Optional[int]]:
    methods: Dict[str, Optional[int]] = {}
    for name in dir(spec):
        if name.startswith("_"):
            continue
        raw = inspect.getattr_static(spec, name)
        if isinstance(raw, staticmethod):
            func, skip = raw.__func__, 0
        elif isinstance(raw, classmethod):
            func, skip = raw.__func__, 1
        elif callable(raw) and not isinstance(raw, type):
            func, skip = raw, 1
        else:
            continue
        methods[name] = _arity(func, skip)
    return methods


def _arity(func: Callable[..., Any], skip: int) -> Optional[int]:
    code = getattr(func, "__code__", None)
    if code is None:
        return None
    if code.co_flags & (inspect.CO_VARARGS | inspect.CO_VARKEYWORDS) or code.co_kwonlyargcount:
        return None
    return max(code.co_argcount - skip, 0)


class Mock:
    """A stand-in for an instance of ``spec`` driven by expectations."""

    def __init__(self, spec: type, report: Optional[Report] = None) -> None:
        self._spec = spec
        self._state = InstanceState(report)
        self._methods = _mockable_methods(spec)

    @property
    def failures(self) -> List[str]:
        """Every failure recorded on this mock so far."""
        return self._state.failures

    @property
    def nice(self) -> bool:
        """Whether unexpected calls are silently accepted."""
        return self._state.nice

    def _qualified(self, name: str) -> str:
        return f"{self._spec.__qualname__}.{name}"

    def _call(self, name: str, *args: Any) -> Any:
        arity = self._methods[name]
        if arity is not None and len(args) != arity:
            raise TypeError(f"{self._qualified(name)} takes {arity} argument(s), got {len(args)}")
        return self._state.dispatch(name, self._qualified(name), *args)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name not in self.__dict__.get("_methods", {}):
            raise AttributeError(name)
        return partial(self._call, name)

    def verify(self) -> None:
        """Report every expectation that received too few calls."""
        self._state.verify_all()

    def __enter__(self) -> "Mock":
        return self

    def __exit__(self, *_exc: Any) -> None:
        self.verify()

    def __repr__(self) -> str:
        return f"Mock({self._spec.__qualname__})"


def expect(mock: Mock, method_name: Any) -> ExpectationHandle:
    """Queue a new expectation for ``method_name`` on ``mock``."""
    name = method_name if isinstance(method_name, str) else getattr(method_name, "__name__", None)
    if name is None or name not in mock._methods:
        raise AttributeError(f"{mock._spec.__qualname__} has no mockable method {method_name!r}")
    qualified = mock._qualified(name)
    expectation = mock._state.push_expectation(name, qualified)
    expectation.arity = mock._methods[name]
    return ExpectationHandle(expectation, qualified)


def make_nice(mock: Mock, value: bool = True) -> None:
    """Let ``mock`` accept calls that have no expectation."""
    mock._state.set_nice(value)


def make_strict(mock: Mock) -> None:
    """Make ``mock`` report calls that have no expectation."""
    mock._state.set_nice(False)