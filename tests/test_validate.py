import pytest

from gentestkit.attributes import GeomSpec, LinspaceSpec, LogspaceSpec, ParsedAttribute, RangeSpec
from gentestkit.validate import validate_attributes


def attr(name, *args):
    return ParsedAttribute(name, tuple(args))


@pytest.fixture
def messages():
    return []


def run(messages, *attrs, **kwargs):
    return validate_attributes(list(attrs), messages.append, **kwargs)


def test_case_name_and_tags(messages):
    summary = run(messages, attr("test", "suite/case"), attr("slow"), attr("linux"))
    assert summary.case_name == "suite/case"
    assert summary.tags == ["slow", "linux"]
    assert not summary.had_error
    assert messages == []


def test_missing_test_is_not_an_error(messages):
    summary = run(messages, attr("slow"))
    assert summary.case_name is None
    assert not summary.had_error


def test_duplicate_test(messages):
    summary = run(messages, attr("test", "a"), attr("test", "b"))
    assert summary.case_name == "a"
    assert summary.had_error
    assert messages == ["duplicate gentest attribute 'test'"]


def test_test_requires_one_non_empty_argument(messages):
    summary = run(messages, attr("test", ""))
    assert summary.had_error
    assert messages == ["'test' requires exactly one non-empty string argument"]
    assert summary.errors == messages


@pytest.mark.parametrize("name", ["bench", "benchmark", "BENCH"])
def test_bench_aliases(messages, name):
    summary = run(messages, attr(name, "suite/b"))
    assert summary.is_benchmark
    assert summary.case_name == "suite/b"


def test_duplicate_bench_across_aliases(messages):
    run(messages, attr("bench", "a"), attr("benchmark", "b"))
    assert messages == ["duplicate gentest attribute 'bench'"]


def test_jitter_and_baseline(messages):
    summary = run(messages, attr("jitter", "suite/j"), attr("baseline"))
    assert summary.is_jitter and summary.is_baseline
    assert summary.case_name == "suite/j"


def test_baseline_rejects_arguments(messages):
    summary = run(messages, attr("baseline", "x"))
    assert not summary.is_baseline
    assert messages == ["'baseline' does not take arguments"]


def test_requirements_deduplicated(messages):
    summary = run(messages, attr("req", "BUG-1", "BUG-2"), attr("requires", "BUG-1"))
    assert summary.requirements == ["BUG-1", "BUG-2"]


def test_req_requires_argument(messages):
    run(messages, attr("req"))
    assert messages == ["'req' requires at least one string argument"]


def test_skip_reason_joined(messages):
    summary = run(messages, attr("skip", "flaky", "slow host"))
    assert summary.should_skip
    assert summary.skip_reason == "flaky, slow host"


def test_skip_without_reason(messages):
    summary = run(messages, attr("skip"))
    assert summary.should_skip
    assert summary.skip_reason == ""


def test_template_sets(messages):
    summary = run(messages, attr("template", " T ", "int", "long"))
    assert summary.template_sets == [("T", ["int", "long"])]


def test_template_errors(messages):
    summary = run(
        messages,
        attr("template", "T"),
        attr("template", "  ", "int"),
        attr("template", "U", "int"),
        attr("template", "U", "long"),
    )
    assert messages == [
        "'template' requires a parameter name and at least one type",
        "'template' parameter name must be non-empty",
        "duplicate 'template' attribute for the same parameter",
    ]
    assert summary.template_sets == [("U", ["int"])]


def test_parameters(messages):
    summary = run(messages, attr("parameters", "x", "1", "2"))
    assert summary.parameter_sets[0].param_name == "x"
    assert summary.parameter_sets[0].values == ["1", "2"]
    run(messages, attr("parameters", "x"))
    assert messages == ["'parameters' requires a parameter name and at least one value"]


def test_range_forms(messages):
    summary = run(messages, attr("range", "i", "1:2:9"), attr("range", "j", "1", "2", "9"))
    assert summary.parameter_ranges == [RangeSpec("i", "1", "2", "9"), RangeSpec("j", "1", "2", "9")]
    assert messages == []


@pytest.mark.parametrize(
    "args, message",
    [
        (("i",), "'parameters_range' requires (name, start, step, end) or (name, \"start:step:end\")"),
        (("i", "1:9"), "'parameters_range' second argument must be of the form start:step:end"),
        (("i", "1", "9"), "'parameters_range' requires exactly 2 or 4 arguments"),
    ],
)
def test_range_errors(messages, args, message):
    summary = run(messages, attr("range", *args))
    assert messages == [message]
    assert summary.parameter_ranges == []


def test_linspace_geom_logspace(messages):
    summary = run(
        messages,
        attr("linspace", "x", "0.0", "1.0", "5"),
        attr("geomspace", "n", "1", "2", "5"),
        attr("logspace", "f", "-3", "3", "7"),
        attr("logspace", "g", "0", "4", "5", "2"),
    )
    assert summary.parameter_linspaces == [LinspaceSpec("x", "0.0", "1.0", "5")]
    assert summary.parameter_geoms == [GeomSpec("n", "1", "2", "5")]
    assert summary.parameter_logspaces[0] == LogspaceSpec("f", "-3", "3", "7")
    assert summary.parameter_logspaces[1].base == "2"


def test_generator_arity_errors(messages):
    run(messages, attr("linspace", "x"), attr("geo" "m", "n"), attr("logspace", "f", "1"))
    assert messages == [
        "'parameters_linspace' requires (name, start, end, count)",
        "'geom' requires (name, start, factor, count)",
        "'logspace' requires (name, startExp, endExp, count[, base])",
    ]


def test_parameters_pack(messages):
    summary = run(messages, attr("parameters_pack", "(a, b)", '(1, "x,y")', "(2, f(3, 4))"))
    pack = summary.param_packs[0]
    assert pack.names == ["a", "b"]
    assert pack.rows == [["1", '"x,y"'], ["2", "f(3, 4)"]]


def test_parameters_pack_arity_mismatch_keeps_good_rows(messages):
    summary = run(messages, attr("parameters_pack", "(a, b)", "(1)", "(1, 2)"))
    assert messages == ["'parameters_pack' value tuple arity mismatch"]
    assert summary.param_packs[0].rows == [["1", "2"]]


def test_parameters_pack_without_valid_rows(messages):
    summary = run(messages, attr("parameters_pack", "(a, b)", "(1)"))
    assert messages == [
        "'parameters_pack' value tuple arity mismatch",
        "'parameters_pack' requires at least one value tuple",
    ]
    assert summary.param_packs == []


def test_parameters_pack_empty_names(messages):
    run(messages, attr("parameters_pack", "()", "(1)"))
    assert messages == ["'parameters_pack' first tuple must list at least one parameter name"]


def test_fixtures(messages):
    summary = run(messages, attr("fixtures", "A", "B"))
    assert summary.fixtures_types == ["A", "B"]


def test_fixtures_stops_at_empty_token(messages):
    summary = run(messages, attr("fixtures", "A", "", "C"))
    assert summary.fixtures_types == ["A"]
    assert messages == ["'fixtures' contains an empty type token"]


def test_unknown_flag_and_value(messages):
    run(messages, attr("fast"), attr("color", "red"), attr("shade", "a", "b"))
    assert messages == [
        "unknown gentest attribute 'fast'",
        "unknown gentest attribute 'color' with argument (\"red\")",
        "unknown gentest attribute 'shade' with arguments (\"a\", \"b\")",
    ]


def test_duplicate_and_conflicting_flags(messages):
    summary = run(messages, attr("slow"), attr("SLOW"), attr("linux"), attr("windows"))
    assert messages == [
        "duplicate gentest flag attribute 'SLOW'",
        "conflicting gentest flags 'linux' and 'windows'",
    ]
    assert summary.tags == ["slow", "linux"]


def test_owner_tag(messages):
    summary = run(messages, attr("owner", "team"), attr("owner", "other"))
    assert summary.tags == ["owner=team"]
    assert messages == ["duplicate 'owner' attribute"]


def test_owner_requires_single_argument(messages):
    run(messages, attr("owner", "a", "b"))
    assert messages == ["'owner' requires exactly one string argument"]


def test_custom_allowed_sets(messages):
    summary = run(
        messages, attr("gpu"), attr("area", "net"), allowed_flags={"GPU"}, allowed_values={"area"}
    )
    assert summary.tags == ["gpu"]
    assert not summary.had_error


def test_report_is_optional():
    summary = validate_attributes([attr("test")])
    assert summary.had_error
    assert summary.errors == ["'test' requires exactly one non-empty string argument"]