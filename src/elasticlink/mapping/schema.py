from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Self

from loguru import logger

from elasticlink.config.general import CONFIG
from elasticlink.mapping.fields import FieldMapping, FieldMappingInput, resolve_field

TEXT_TYPES = frozenset({"text", "match_only_text", "search_as_you_type"})
KEYWORD_TYPES = frozenset({"keyword", "constant_keyword", "wildcard"})
NUMERIC_TYPES = frozenset(
    {
        "long",
        "integer",
        "short",
        "byte",
        "double",
        "float",
        "half_float",
        "scaled_float",
    }
)
DATE_TYPES = frozenset({"date", "date_nanos"})
BOOLEAN_TYPES = frozenset({"boolean"})
IP_TYPES = frozenset({"ip"})
GEO_POINT_TYPES = frozenset({"geo_point"})
VECTOR_TYPES = frozenset({"dense_vector"})

# Pseudo-fields every index can sort on
SORT_META_FIELDS = frozenset({"_score", "_doc"})


class FieldGroup(StrEnum):
    """Groups of field types an operation accepts."""

    ANY = "any"
    TEXT = "text"
    KEYWORD = "keyword"
    TERMABLE = "termable"
    RANGEABLE = "rangeable"
    FUZZYABLE = "fuzzyable"
    GEO_POINT = "geo_point"
    VECTOR = "vector"


GROUP_TYPES: dict[FieldGroup, frozenset[str]] = {
    FieldGroup.TEXT: TEXT_TYPES,
    FieldGroup.KEYWORD: KEYWORD_TYPES,
    FieldGroup.TERMABLE: KEYWORD_TYPES
    | NUMERIC_TYPES
    | DATE_TYPES
    | BOOLEAN_TYPES
    | IP_TYPES,
    FieldGroup.RANGEABLE: NUMERIC_TYPES | DATE_TYPES | KEYWORD_TYPES | IP_TYPES,
    FieldGroup.FUZZYABLE: TEXT_TYPES | KEYWORD_TYPES,
    FieldGroup.GEO_POINT: GEO_POINT_TYPES,
    FieldGroup.VECTOR: VECTOR_TYPES,
}


class FieldTypeError(ValueError):
    """A field is unknown to the schema or has the wrong type for an operation."""

    def __init__(self, message: str, field_name: str) -> None:
        """Instantiate a FieldTypeError."""
        super().__init__(message)
        self.field_name: str = field_name


@dataclass(frozen=True, kw_only=True, slots=True)
class MappingsSchema:
    """Index mappings plus the field-type lookups builders validate against."""

    properties: dict[str, FieldMapping] = field(default_factory=dict)

    @classmethod
    def from_properties(cls, properties: Mapping[str, FieldMappingInput]) -> Self:
        """Build a schema from a properties mapping, resolving shorthand types."""
        return cls(
            properties={
                name: resolve_field(value) for name, value in properties.items()
            }
        )

    @property
    def field_types(self) -> dict[str, str]:
        """Top-level field name to type tag."""
        return {
            name: mapping.get("type", "object")
            for name, mapping in self.properties.items()
        }

    def field_type(self, path: str) -> str | None:
        """Resolve a dotted path to its type tag.

        Walks `properties` of object/nested fields and `fields` of multi-fields,
        so both "address.city" and "name.keyword" resolve.
        """
        scope: Mapping[str, Any] = self.properties
        mapping: Mapping[str, Any] | None = None
        for part in path.split("."):
            entry = scope.get(part)
            if entry is None:
                return None
            mapping = resolve_field(entry)
            scope = {
                **mapping.get("fields", {}),
                **mapping.get("properties", {}),
            }
        if mapping is None:
            return None
        if "type" not in mapping:
            return "object" if "properties" in mapping else None
        return mapping["type"]


def mappings(fields: Mapping[str, FieldMappingInput]) -> MappingsSchema:
    """Create a MappingsSchema from field helpers or shorthand type strings."""
    return MappingsSchema.from_properties(fields)


def check_field(
    schema: MappingsSchema | None,
    field_name: str,
    group: FieldGroup,
    operation: str,
) -> None:
    """Validate a field against the schema according to CONFIG.field_validation.

    Builders without a schema are unconstrained and never checked.
    """
    mode = CONFIG.field_validation
    if schema is None or mode == "off":
        return

    type_name = schema.field_type(field_name)
    message: str | None = None
    if type_name is None:
        message = f"Unknown field '{field_name}' used in {operation}"
    elif group is not FieldGroup.ANY and type_name not in GROUP_TYPES[group]:
        message = (
            f"Field '{field_name}' of type '{type_name}' cannot be used in "
            f"{operation} (expects a {group} field)"
        )

    if message is None:
        return
    if mode == "strict":
        raise FieldTypeError(message, field_name)
    logger.warning(message)


def check_fields(
    schema: MappingsSchema | None,
    field_names: Iterable[str],
    group: FieldGroup,
    operation: str,
) -> None:
    """Validate several fields for one operation."""
    for field_name in field_names:
        check_field(schema, field_name, group, operation)


def check_sort_field(schema: MappingsSchema | None, field_name: str) -> None:
    """Validate a sort field, allowing the _score and _doc pseudo-fields."""
    if field_name in SORT_META_FIELDS:
        return
    check_field(schema, field_name, FieldGroup.ANY, "sort")
