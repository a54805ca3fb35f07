import pytest

from gentestkit.matchers import (
    ArgPredicate,
    all_of,
    any_of,
    any_value,
    describe_value,
    ends_with,
    eq,
    ge,
    gt,
    in_range,
    le,
    lt,
    near,
    not_,
    starts_with,
    str_contains,
    to_arg_predicate,
)


class _Opaque:
    pass


def test_describe_value_uses_str():
    assert describe_value(42) == "42"
    assert describe_value("abc") == "abc"


def test_describe_value_falls_back_to_type_name():
    assert describe_value(_Opaque()) == "_Opaque"


def test_any_value_matches_everything():
    pred = any_value()
    assert all(pred.matches(v) for v in (0, None, "x", _Opaque()))


def test_any_value_has_no_description():
    assert any_value().describe is None
    assert any_value().explain(1) == "predicate mismatch"


def test_eq_matches_and_describes():
    pred = eq(42)
    assert pred.matches(42)
    assert not pred.matches(7)
    assert pred.explain(7) == "expected == 42, got 7"


def test_in_range_inclusive_bounds():
    pred = in_range(1, 5)
    assert pred.matches(1) and pred.matches(5) and pred.matches(3)
    assert not pred.matches(0)
    assert not pred.matches(6)
    assert pred.explain(9) == "expected in [1, 5], got 9"


@pytest.mark.parametrize(
    "factory, bound, yes, no, symbol",
    [
        (ge, 3, 3, 2, ">="),
        (le, 3, 3, 4, "<="),
        (gt, 3, 4, 3, ">"),
        (lt, 3, 2, 3, "<"),
    ],
)
def test_comparisons(factory, bound, yes, no, symbol):
    pred = factory(bound)
    assert pred.matches(yes)
    assert not pred.matches(no)
    assert pred.explain(no) == f"expected {symbol} {bound}, got {no}"


def test_near_within_and_outside_eps():
    pred = near(1.0, 0.5)
    assert pred.matches(1.5)
    assert pred.matches(0.5)
    assert not pred.matches(1.6)
    assert pred.explain(3) == "expected near 1.0 ± 0.5, got 3"


def test_str_contains():
    pred = str_contains("ell")
    assert pred.matches("hello")
    assert not pred.matches("world")
    assert pred.explain("world") == "expected substring 'ell', got 'world'"


def test_starts_with_and_ends_with():
    assert starts_with("he").matches("hello")
    assert not starts_with("lo").matches("hello")
    assert ends_with("lo").matches("hello")
    assert not ends_with("he").matches("hello")
    assert not ends_with("longer-than-input").matches("lo")
    assert starts_with("x").explain("abc") == "expected prefix 'x', got 'abc'"
    assert ends_with("x").explain("abc") == "expected suffix 'x', got 'abc'"


def test_string_matchers_accept_bytes():
    assert str_contains("bc").matches(b"abcd")


def test_string_matchers_reject_non_strings():
    with pytest.raises(TypeError):
        str_contains("a").matches(5)


def test_not_inverts():
    pred = not_(eq(1))
    assert pred.matches(2)
    assert not pred.matches(1)
    assert pred.explain(1) == "not(expected == 1, got 1)"


def test_not_of_undescribed_inner():
    assert not_(any_value()).explain(0) == "not(predicate matched)"


def test_any_of():
    pred = any_of(eq(1), eq(2))
    assert pred.matches(1) and pred.matches(2)
    assert not pred.matches(3)
    assert pred.explain(3) == "expected any of: expected == 1, got 3; expected == 2, got 3"


def test_any_of_without_matchers_rejects():
    assert not any_of().matches(1)


def test_all_of():
    pred = all_of(ge(1), le(3))
    assert pred.matches(2)
    assert not pred.matches(4)
    assert pred.explain(4) == "expected all of: expected >= 1, got 4; expected <= 3, got 4"


def test_all_of_uses_placeholder_for_undescribed():
    assert all_of(any_value()).explain(0) == "expected all of: predicate"


def test_all_of_short_circuits():
    seen = []

    def record(v):
        seen.append(v)
        return True

    assert not all_of(eq(0), record).matches(1)
    assert seen == []


def test_to_arg_predicate_passes_through():
    pred = eq(1)
    assert to_arg_predicate(pred) is pred


def test_to_arg_predicate_wraps_callable():
    pred = to_arg_predicate(lambda v: v > 10)
    assert isinstance(pred, ArgPredicate)
    assert pred.matches(11)
    assert not pred.matches(10)
    assert pred.explain(10) == "predicate mismatch"


def test_to_arg_predicate_rejects_non_callable():
    with pytest.raises(TypeError):
        to_arg_predicate(5)


def test_predicate_is_callable():
    assert eq("a")("a") is True
    assert eq("a")("b") is False
    assert any_of(lambda v: v == "z")("z") is True