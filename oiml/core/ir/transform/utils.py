from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

_SCALARS = {
    "string": "String",
    "text": "Text",
    "integer": "Int",
    "bigint": "BigInt",
    "float": "Float",
    "decimal": "Decimal",
    "boolean": "Boolean",
    "datetime": "DateTime",
    "date": "Date",
    "time": "Time",
    "uuid": "UUID",
    "bytes": "Bytes",
}

_ARRAY_ELEMENTS = {
    "string": "String",
    "text": "Text",
    "integer": "Int",
    "bigint": "BigInt",
    "float": "Float",
    "decimal": "Decimal",
    "boolean": "Boolean",
    "uuid": "UUID",
}

_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "tooth": "teeth",
    "foot": "feet",
    "mouse": "mice",
    "goose": "geese",
}

RESERVED_KEYWORDS = frozenset(
    {
        "select", "from", "where", "insert", "update", "delete", "table", "column",
        "index", "key", "primary", "foreign", "constraint", "default", "null", "not",
        "and", "or", "order", "group", "by", "having", "join", "inner", "outer",
        "left", "right", "cross", "union", "distinct", "as", "on", "using", "limit",
        "offset",
    }
)


def resolve_field_type(
    intent_type: str,
    enum_values: Optional[List[str]] = None,
    array_type: Optional[str] = None,
) -> Dict[str, Any]:
    """Map an authored field type to its FieldTypeIR payload. Enum names are filled in by the caller."""
    if intent_type in _SCALARS:
        return {"kind": "Scalar", "scalar": _SCALARS[intent_type]}
    if intent_type == "json":
        return {"kind": "Json"}
    if intent_type == "enum":
        if not enum_values:
            raise ValueError("enum type requires enum_values")
        return {"kind": "Enum", "name": "", "values": list(enum_values), "source": "Inline"}
    if intent_type == "array":
        if not array_type:
            raise ValueError("array type requires array_type")
        if array_type not in _ARRAY_ELEMENTS:
            raise ValueError(f"invalid array element type: {array_type}")
        return {"kind": "Array", "elementType": _ARRAY_ELEMENTS[array_type]}
    raise ValueError(f"unknown field type: {intent_type}")


def to_snake_case(name: str) -> str:
    return re.sub(r"([A-Z])", r"_\1", name).lower().lstrip("_")


def to_camel_case(name: str) -> str:
    return name[:1].lower() + name[1:]


def to_pascal_case(name: str) -> str:
    return name[:1].upper() + name[1:]


def pluralize(word: str) -> str:
    """Basic English plural: irregulars, consonant+y -> ies, s/x/z/ch/sh -> es, else +s."""
    irregular = _IRREGULAR_PLURALS.get(word.lower())
    if irregular:
        return to_pascal_case(irregular) if word[:1].isupper() else irregular

    if word.endswith("y") and len(word) > 1 and word[-2].lower() not in "aeiou":
        return word[:-1] + "ies"

    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"

    return word + "s"


def to_table_name(entity_name: str, convention: str = "snake_case") -> str:
    plural = pluralize(entity_name)
    if convention == "camelCase":
        return to_camel_case(plural)
    if convention == "PascalCase":
        return to_pascal_case(plural)
    return to_snake_case(plural)


def generate_enum_name(entity_name: str, field_name: str) -> str:
    return f"{entity_name}{to_pascal_case(field_name)}"


def is_reserved_keyword(name: str) -> bool:
    return name.lower() in RESERVED_KEYWORDS
