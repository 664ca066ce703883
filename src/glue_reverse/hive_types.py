"""Translate Hive/Glue column type strings into JSON-Schema fragments.

Type strings are expected with whitespace already removed, e.g.
``array<struct<id:bigint,tags:map<string,string>>>``. Every fragment keeps
the originating Hive type under ``hiveType`` so no information is lost for
types JSON Schema cannot express (precision, key types, unions).
"""

import re
from typing import Any, Dict, List, Tuple

INTEGER_TYPES = {"tinyint", "smallint", "int", "integer", "bigint"}
FLOAT_TYPES = {"float", "double", "real"}
STRING_TYPES = {"string", "char", "varchar"}

_PARAMETERIZED = re.compile(r"^([a-z_]+)\(([^)]*)\)$")


class TypeParseError(ValueError):
    """Raised for type strings with unbalanced brackets."""


def sanitize_type(type_string: str) -> str:
    """Strip all whitespace from a type string."""
    return re.sub(r"\s", "", type_string or "")


def split_top_level(body: str, separator: str = ",") -> List[str]:
    """Split on ``separator`` outside of ``<>`` and ``()`` nesting."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in body:
        if char in "<(":
            depth += 1
        elif char in ">)":
            depth -= 1
            if depth < 0:
                raise TypeParseError(f"Unbalanced type string: {body}")
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise TypeParseError(f"Unbalanced type string: {body}")
    parts.append("".join(current))
    return [part for part in parts if part]


def _split_generic(type_string: str) -> Tuple[str, str]:
    """Split ``name<body>`` into (name, body)."""
    open_at = type_string.index("<")
    if not type_string.endswith(">"):
        raise TypeParseError(f"Unbalanced type string: {type_string}")
    return type_string[:open_at].lower(), type_string[open_at + 1 : -1]


def _primitive_schema(type_string: str) -> Dict[str, Any]:
    lowered = type_string.lower()
    name, args = lowered, []
    match = _PARAMETERIZED.match(lowered)
    if match:
        name = match.group(1)
        args = [arg for arg in match.group(2).split(",") if arg]

    if name in STRING_TYPES:
        schema: Dict[str, Any] = {"type": "string", "hiveType": lowered}
        if name != "string" and args and args[0].isdigit():
            schema["maxLength"] = int(args[0])
        return schema
    if name in INTEGER_TYPES:
        return {"type": "integer", "hiveType": lowered}
    if name in FLOAT_TYPES:
        return {"type": "number", "hiveType": lowered}
    if name in ("decimal", "numeric"):
        schema = {"type": "number", "hiveType": lowered}
        if len(args) >= 1 and args[0].isdigit():
            schema["precision"] = int(args[0])
        if len(args) >= 2 and args[1].isdigit():
            schema["scale"] = int(args[1])
        return schema
    if name == "boolean":
        return {"type": "boolean", "hiveType": lowered}
    if name == "date":
        return {"type": "string", "format": "date", "hiveType": lowered}
    if name == "timestamp":
        return {"type": "string", "format": "date-time", "hiveType": lowered}
    # binary, interval and anything unrecognized travel as strings
    return {"type": "string", "hiveType": lowered}


def _struct_schema(body: str) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "hiveType": "struct", "properties": {}}
    for field in split_top_level(body):
        name, sep, field_type = field.partition(":")
        if not sep:
            raise TypeParseError(f"Struct field without type: {field}")
        set_property(name.strip("`"), get_json_schema(field_type), schema)
    return schema


def get_json_schema(type_string: str) -> Dict[str, Any]:
    """Return a JSON-Schema fragment for a whitespace-stripped Hive type.

    Args:
        type_string: Glue column type, e.g. ``decimal(10,2)`` or ``array<string>``

    Returns:
        JSON-Schema fragment

    Raises:
        TypeParseError: If nesting brackets are unbalanced
    """
    type_string = sanitize_type(type_string)
    if not type_string:
        return {"type": "string"}
    if "<" not in type_string:
        return _primitive_schema(type_string)

    name, body = _split_generic(type_string)
    if name == "array":
        return {"type": "array", "hiveType": "array", "items": get_json_schema(body)}
    if name == "map":
        parts = split_top_level(body)
        if len(parts) != 2:
            raise TypeParseError(f"Map type needs key and value: {type_string}")
        key_type, value_type = parts
        return {
            "type": "object",
            "hiveType": "map",
            "keyType": key_type.lower(),
            "additionalProperties": get_json_schema(value_type),
        }
    if name == "struct":
        return _struct_schema(body)
    if name == "uniontype":
        return {
            "hiveType": "uniontype",
            "oneOf": [get_json_schema(part) for part in split_top_level(body)],
        }
    return {"type": "string", "hiveType": type_string.lower()}


def set_property(name: str, fragment: Dict[str, Any], schema: Dict[str, Any]) -> Dict[str, Any]:
    """Insert ``fragment`` under ``schema["properties"][name]``."""
    schema.setdefault("properties", {})[name] = fragment
    return schema
