# gentestkit

Building blocks for annotation-driven test suites. The package has five parts:

- `gentestkit.matchers`: argument matchers that can explain a mismatch.
- `gentestkit.mocking`: mocks driven by queued call expectations.
- `gentestkit.attributes` and `gentestkit.validate`: validation of test attributes such as `test("suite/case")`, `skip`, `range(...)` and `fixture(suite)`.
- `gentestkit.type_kind`: classification of parameter type names and quoting of literal tokens.
- `gentestkit.tooling_support`: detection of host C++ include directories and inspection of `-isystem` arguments.

The package has no dependencies beyond the standard library.

## Installation

```
pip install gentestkit
```

## Argument matchers

Each matcher returns an `ArgPredicate`. Call `matches(value)` to test a value, and `explain(value)` to get a description of a mismatch.

| Matcher | Accepts |
| --- | --- |
| `any_value()` | anything |
| `eq(x)` | values equal to `x` |
| `ge(b)`, `le(b)`, `gt(b)`, `lt(b)` | values in that relation to `b` |
| `in_range(lo, hi)` | values in the closed interval `[lo, hi]` |
| `near(x, eps)` | numbers within `eps` of `x`, inclusive |
| `str_contains(s)`, `starts_with(s)`, `ends_with(s)` | strings (or bytes) containing, starting with or ending with `s` |
| `not_(m)` | values that `m` rejects |
| `any_of(*ms)`, `all_of(*ms)` | values accepted by any one, or by all, of the given matchers |

```python
from gentestkit.matchers import eq, in_range, not_

eq(3).explain(4)            # 'expected == 3, got 4'
in_range(1, 5).matches(5)   # True
not_(eq(2)).explain(2)      # 'not(expected == 2, got 2)'
```

`to_arg_predicate` accepts a plain callable as well as a matcher. The callable then acts as the test, and its mismatch description is `"predicate mismatch"`. `describe_value` renders values for these messages. An object with no custom `__str__` or `__repr__` is rendered by its type name.

## Mocks

A `Mock` stands in for an instance of a spec class. Its public methods, the ones whose names do not start with `_`, can be called on the mock.

- The mock checks the number of arguments against the spec method's signature and raises `TypeError` on a mismatch.
- Each call is matched against the expectations queued for that method by `expect`, in the order they were set up.
- Failures never raise. Each one goes to the `report` callback, if one is given, and is also appended to `mock.failures`.

```python
from gentestkit.matchers import eq, any_value
from gentestkit.mocking import Mock, expect

class Store:
    def put(self, key, value): ...
    def get(self, key): ...

failures = []
store = Mock(Store, failures.append)

expect(store, "get").times(2).with_args("alpha").returns(42)
expect(store, "put").where(eq("beta"), any_value())

assert store.get("alpha") == 42
assert store.get("alpha") == 42
store.put("beta", 1)

store.verify()
assert failures == []
```

`expect(mock, name)` returns an `ExpectationHandle`. Its methods can be chained:

- `times(n)`: the number of calls expected. The default is 1. A negative count raises `ValueError`.
- `with_args(*values)`: each argument must equal the value given in its position.
- `where_args(*matchers)` or `where(*matchers)`: one matcher or callable per argument.
- `where_call(predicate)`: `predicate(*args)` must hold for the call as a whole. It takes precedence over the argument checks above.
- `returns(value)`: the value to return from matching calls.
- `invokes(fn)`: `fn(*args)` is run and its result is returned.
- `allow_more(enabled=True)`: calls beyond the expected count are accepted, and the expectation stays at the front of the queue.

If the number of values given to `with_args` or `where_args` does not match the method's arity, a `TypeError` is raised.

The following are reported:

- a call that has no expectation;
- a call beyond the expected count;
- the first argument mismatch of a call;
- a failed call predicate.

`verify()` reports each queued expectation that received fewer calls than expected. A `Mock` used as a context manager calls `verify()` on exit.

`make_nice(mock)` stops reports of calls that have no expectation; such calls return `None`. `make_strict(mock)` restores the default.

The lower-level pieces are also public:

- `Expectation` and `InstanceState`;
- `verify_calls_or_fail`, `check_args_equal` and `check_args_by_predicates`.

## Attribute validation

`ParsedAttribute(name, arguments)` holds one attribute as written. The validators below return summary dataclasses. They never raise. Each problem is passed to the optional `report` callback, added to `summary.errors`, and sets `summary.had_error`.

- `validate_attributes(parsed, report=None, allowed_flags=..., allowed_values=...)` lives in `gentestkit.validate`. It handles function-level attributes:
  - `test`, `bench`/`benchmark`, `jitter` and `baseline`;
  - `req`/`requires` and `skip`;
  - `template` and `parameters`;
  - `range`, `linspace`, `geom`/`geomspace`/`geospace` and `logspace`;
  - `parameters_pack` and `fixtures`;
  - flag attributes, which default to `slow`, `linux` and `windows`;
  - value attributes, which default to `owner`.

  The result is an `AttributeSummary`.
- `validate_fixture_attributes(parsed, report=None, fixture_attributes={"fixture"})` sets a `FixtureLifetime` from `fixture(suite)` or `fixture(global)`.
- `validate_namespace_attributes(parsed, report=None)` extracts `suite("name")`.
- `split_tuple(text)` splits a tuple such as `'(a, f(b, c), "x,y")'` into `['a', 'f(b, c)', '"x,y"']`.

```python
from gentestkit.attributes import ParsedAttribute
from gentestkit.validate import validate_attributes

messages = []
summary = validate_attributes(
    [ParsedAttribute("test", ["suite/case"]), ParsedAttribute("slow", [])],
    messages.append,
    {"slow", "linux", "windows"},
    {"owner"},
)
assert summary.case_name == "suite/case"
assert summary.tags == ["slow"]
assert messages == []
```

## Type kinds and literal quoting

`classify_type` ignores whitespace, `const`, `volatile` and references. It returns a `TypeKind`:

- `RAW` for the type name `raw`;
- `STRING` for string, string-view and character-pointer types;
- `CHAR` for the character types;
- `OTHER` for everything else.

`quote_for_type(kind, token, type_name)` quotes a token to suit the kind:

- For strings it escapes the token, wraps it in double quotes and adds the `L`, `u8`, `u` or `U` prefix that matches the type.
- For characters it wraps a single character in single quotes.
- Tokens that are already literals, and tokens of any other kind, pass through unchanged.

```python
from gentestkit.type_kind import TypeKind, classify_type, quote_for_type

classify_type("const std::string&")                # TypeKind.STRING
quote_for_type(TypeKind.STRING, "hi", "std::wstring")  # 'L"hi"'
quote_for_type(TypeKind.CHAR, "a", "char")         # "'a'"
```

## Tooling helpers

- `parse_version_components("12.1.0")` returns `[12, 1, 0]`. It returns `[]` for text that is not dotted digit groups.
- `detect_platform_include_dirs()` lists the host C++ include directories, to be passed with `-isystem`:
  - the newest `/usr/include/c++/<version>`, its architecture directory and its `backward` directory;
  - the newest GCC internal `include` directory under `/usr/lib/gcc` and `/usr/lib64/gcc`;
  - `/usr/include`.

  It only probes Linux hosts; elsewhere it returns an empty list.
- `contains_isystem_entry(args, directory)` tells whether `-isystem <directory>` already appears in `args`.

## What the package does not do

This is a library only; it has no command-line program. It does not:

- read or parse source files;
- discover annotated tests;
- generate test or mock code;
- run tests or benchmarks.

Mocks are configured by method name at run time on a `Mock` object; no mock classes are generated.

## Running the tests

```
pip install -e ".[test]"
pytest
```