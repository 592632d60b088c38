"""Field mapping helpers.

Each helper returns a plain mapping entry with `type` pre-filled, e.g.

    mappings({
        "name": text(analyzer="standard"),
        "category": keyword(),
        "price": float_(),
        "embedding": dense_vector(dims=384),
    })

Anywhere a mapping entry is accepted, a bare type string such as `"keyword"`
is shorthand for `{"type": "keyword"}`.
"""

from collections.abc import Mapping
from typing import Any

FieldMapping = dict[str, Any]
FieldMappingInput = FieldMapping | str


def resolve_field(value: FieldMappingInput | Mapping[str, Any]) -> FieldMapping:
    """Expand shorthand strings like 'text' to {'type': 'text'}."""
    if isinstance(value, str):
        return {"type": value}
    return dict(value)


def resolve_properties(
    properties: Mapping[str, FieldMappingInput],
) -> dict[str, FieldMapping]:
    """Resolve every entry of a properties mapping."""
    return {name: resolve_field(value) for name, value in properties.items()}


def _typed(type_name: str, options: Mapping[str, Any]) -> FieldMapping:
    return {"type": type_name, **options}


# Text & keyword
def text(**options: Any) -> FieldMapping:
    return _typed("text", options)


def keyword(**options: Any) -> FieldMapping:
    return _typed("keyword", options)


def match_only_text(**options: Any) -> FieldMapping:
    return _typed("match_only_text", options)


def search_as_you_type(**options: Any) -> FieldMapping:
    return _typed("search_as_you_type", options)


def constant_keyword(**options: Any) -> FieldMapping:
    return _typed("constant_keyword", options)


def wildcard(**options: Any) -> FieldMapping:
    return _typed("wildcard", options)


# Numeric
def long(**options: Any) -> FieldMapping:
    return _typed("long", options)


def integer(**options: Any) -> FieldMapping:
    return _typed("integer", options)


def short(**options: Any) -> FieldMapping:
    return _typed("short", options)


def byte(**options: Any) -> FieldMapping:
    return _typed("byte", options)


def double(**options: Any) -> FieldMapping:
    return _typed("double", options)


def float_(**options: Any) -> FieldMapping:
    return _typed("float", options)


def half_float(**options: Any) -> FieldMapping:
    return _typed("half_float", options)


def scaled_float(scaling_factor: float, **options: Any) -> FieldMapping:
    return _typed("scaled_float", {"scaling_factor": scaling_factor, **options})


# Date & boolean
def date(**options: Any) -> FieldMapping:
    return _typed("date", options)


def date_nanos(**options: Any) -> FieldMapping:
    return _typed("date_nanos", options)


def boolean(**options: Any) -> FieldMapping:
    return _typed("boolean", options)


def binary() -> FieldMapping:
    return {"type": "binary"}


def ip(**options: Any) -> FieldMapping:
    return _typed("ip", options)


# Vector
def dense_vector(**options: Any) -> FieldMapping:
    return _typed("dense_vector", options)


def quantized_dense_vector(**options: Any) -> FieldMapping:
    """Dense vector indexed with scalar quantization (int8_hnsw unless overridden)."""
    index_options = {"type": "int8_hnsw", **options.pop("index_options", {})}
    return _typed("dense_vector", {**options, "index_options": index_options})


# Geo
def geo_point(**options: Any) -> FieldMapping:
    return _typed("geo_point", options)


def geo_shape(**options: Any) -> FieldMapping:
    return _typed("geo_shape", options)


def completion(**options: Any) -> FieldMapping:
    return _typed("completion", options)


# Structured
def nested(fields: Mapping[str, FieldMappingInput] | None = None) -> FieldMapping:
    mapping: FieldMapping = {"type": "nested"}
    if fields:
        mapping["properties"] = resolve_properties(fields)
    return mapping


def object_(
    fields: Mapping[str, FieldMappingInput] | None = None,
    enabled: bool | None = None,
) -> FieldMapping:
    mapping: FieldMapping = {"type": "object"}
    if enabled is not None:
        mapping["enabled"] = enabled
    if fields:
        mapping["properties"] = resolve_properties(fields)
    return mapping


def flattened(**options: Any) -> FieldMapping:
    return _typed("flattened", options)


def alias(path: str) -> FieldMapping:
    return {"type": "alias", "path": path}


def percolator() -> FieldMapping:
    return {"type": "percolator"}


# Range types
def integer_range(**options: Any) -> FieldMapping:
    return _typed("integer_range", options)


def float_range(**options: Any) -> FieldMapping:
    return _typed("float_range", options)


def long_range(**options: Any) -> FieldMapping:
    return _typed("long_range", options)


def double_range(**options: Any) -> FieldMapping:
    return _typed("double_range", options)


def date_range(**options: Any) -> FieldMapping:
    return _typed("date_range", options)
