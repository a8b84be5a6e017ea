"""Identifier sanitizing for generated field, class and file names."""

from __future__ import annotations

import keyword
import re

# Reserved in C#-style generated code (the primary downstream target)
_GENERATED_CODE_KEYWORDS = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
        "checked", "class", "const", "continue", "decimal", "default", "delegate", "do",
        "double", "else", "enum", "event", "explicit", "extern", "false", "finally",
        "fixed", "float", "for", "foreach", "goto", "if", "implicit", "in", "int",
        "interface", "internal", "is", "lock", "long", "namespace", "new", "null",
        "object", "operator", "out", "override", "params", "private", "protected",
        "public", "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
        "stackalloc", "static", "string", "struct", "switch", "this", "throw", "true",
        "try", "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using",
        "virtual", "void", "volatile", "while",
    }
)  # fmt: skip

RESERVED_WORDS = _GENERATED_CODE_KEYWORDS | frozenset(keyword.kwlist)

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^a-zA-Z0-9_]")
_INVALID_FILE_CHARS = re.compile(r'[<>:"/\\|?*]')
_UNDERSCORE_LOWER = re.compile(r"_([a-z])")

MAX_FILE_NAME_LENGTH = 64


def sanitize_field_name(raw: str) -> str:
    """Turn a header into a camelCase identifier.

    Examples:
        "Max HP" -> "maxHP", "item_name" -> "itemName", "2nd" -> "_2nd",
        "class" -> "class_"
    """
    if not raw or not raw.strip():
        return "field"

    result = _INVALID_IDENTIFIER_CHARS.sub("", _to_camel_case(raw.strip()))
    if not result:
        return "field"

    if result[0].isdigit():
        result = "_" + result

    result = result[0].lower() + result[1:]
    return _escape_reserved(result)


def sanitize_class_name(raw: str) -> str:
    """Turn a name into a PascalCase identifier."""
    if not raw or not raw.strip():
        return "GeneratedClass"

    result = _INVALID_IDENTIFIER_CHARS.sub("", _to_pascal_case(raw.strip()))
    if not result:
        return "GeneratedClass"

    if result[0].isdigit():
        result = "_" + result

    return _escape_reserved(result)


def sanitize_file_name(raw: str) -> str:
    """Make a name safe to use as a file name on common file systems."""
    if not raw or not raw.strip():
        return "unnamed"

    result = _INVALID_FILE_CHARS.sub("", raw.strip().replace(" ", "_"))
    result = result[:MAX_FILE_NAME_LENGTH]
    return result or "unnamed"


def _escape_reserved(name: str) -> str:
    return name + "_" if name in RESERVED_WORDS else name


def _to_camel_case(text: str) -> str:
    text = text.replace("-", " ")
    text = _UNDERSCORE_LOWER.sub(lambda m: m.group(1).upper(), text)

    words = text.split()
    if not words:
        return text

    first, rest = words[0], words[1:]
    return first[0].lower() + first[1:] + "".join(w[0].upper() + w[1:] for w in rest)


def _to_pascal_case(text: str) -> str:
    words = text.replace("-", " ").replace("_", " ").split()
    if not words:
        return text
    return "".join(w[0].upper() + w[1:] for w in words)
