"""Argument matchers, expectation-driven mocks, test-attribute validation and literal quoting."""

__version__ = "1.0.0"
__all__ = ["attributes", "matchers", "mocking", "tooling_support", "type_kind", "validate"]