"""Coarse classification of parameter types and quoting of literal tokens."""

from __future__ import annotations

import enum

__all__ = ["TypeKind", "classify_type", "quote_for_type"]

_WHITESPACE = " \t\n\v\f\r"
_QUALIFIERS = ("const ", "volatile ", "&", "&&")
_CHAR_TYPES = frozenset({"char", "wchar_t", "char8_t", "char16_t", "char32_t"})
_CHAR_POINTERS = ("char*", "wchar_t*", "char8_t*", "char16_t*", "char32_t*")
_STRING_PREFIXES = (
    ("L", ("wstring", "wstring_view"), "wchar_t*"),
    ("u8", ("u8string", "u8string_view"), "char8_t*"),
    ("u", ("u16string", "u16string_view"), "char16_t*"),
    ("U", ("u32string", "u32string_view"), "char32_t*"),
)
_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\f": "\\f",
    "\b": "\\b",
    "\a": "\\a",
    "\0": "\\0",
}


class TypeKind(enum.Enum):
    """Coarse kind of a parameter type."""

    STRING = "string"
    CHAR = "char"
    INTEGER = "integer"
    FLOATING = "floating"
    ENUM = "enum"
    RAW = "raw"
    OTHER = "other"


def _normalize(type_name: str, keep_pointers: bool = False) -> str:
    text = type_name
    for qualifier in _QUALIFIERS:
        text = text.replace(qualifier, "")
    if not keep_pointers:
        text = text.replace("*", "")
    return "".join(ch for ch in text if ch not in _WHITESPACE).lower()


def _escape(text: str) -> str:
    out = []
    for ch in text:
        if ch in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\{ord(ch):03o}")
        else:
            out.append(ch)
    return "".join(out)


def _has_literal_shape(token: str, quote: str, min_body: int) -> bool:
    token = token.strip(_WHITESPACE)
    if not token.endswith(quote):
        return False
    for prefix in ("", "L", "u", "U", "u8"):
        opener = prefix + quote
        if token.startswith(opener) and len(token) >= len(opener) + min_body + 1:
            return True
    return False


def _is_string_literal(token: str) -> bool:
    return _has_literal_shape(token, '"', 0)


def _is_char_literal(token: str) -> bool:
    return _has_literal_shape(token, "'", 1)


def classify_type(type_name: str) -> TypeKind:
    """Classify a type name, ignoring whitespace, cv-qualifiers and references."""
    stripped = _normalize(type_name)
    with_pointers = _normalize(type_name, keep_pointers=True)
    if stripped == "raw":
        return TypeKind.RAW
    if "string" in stripped or any(p in with_pointers for p in _CHAR_POINTERS):
        return TypeKind.STRING
    if stripped in _CHAR_TYPES:
        return TypeKind.CHAR
    return TypeKind.OTHER


def _string_prefix(type_name: str) -> str:
    stripped = _normalize(type_name)
    with_pointers = _normalize(type_name, keep_pointers=True)
    for prefix, names, pointer in _STRING_PREFIXES:
        if any(name in stripped for name in names) or pointer in with_pointers:
            return prefix
    return ""


def quote_for_type(kind: TypeKind, token: str, type_name: str) -> str:
    """Quote ``token`` as a literal suited to ``kind``; other kinds pass through.

    Strings get the encoding prefix matching ``type_name``; single characters
    are wrapped in single quotes. Tokens that already are literals are kept.
    """
    if kind is TypeKind.STRING:
        if _is_string_literal(token):
            return token
        return f'{_string_prefix(type_name)}"{_escape(token)}"'
    if kind is TypeKind.CHAR:
        if _is_char_literal(token) or len(token) != 1:
            return token
        return f"'{_escape(token)}'"
    return token