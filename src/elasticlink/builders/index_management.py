import copy
from collections.abc import Mapping
from typing import Any

from elasticlink.mapping.fields import FieldMappingInput, resolve_properties
from elasticlink.mapping.schema import MappingsSchema
from elasticlink.types.dsl import ESCreateIndex


class IndexBuilder:
    """Immutable builder of a create-index body (mappings, settings, aliases).

        index_builder()
            .mappings(products)
            .settings(production_search_settings())
            .alias("products_read")
            .build()
    """

    __slots__ = ("_state",)

    def __init__(self, state: ESCreateIndex | None = None) -> None:
        """Initialize a builder over an existing (or empty) index body."""
        self._state: ESCreateIndex = {**state} if state else {}

    def mappings(
        self,
        schema_or_fields: MappingsSchema | Mapping[str, FieldMappingInput],
        **options: Any,
    ) -> "IndexBuilder":
        """Set the index mappings, replacing any earlier call.

        Extra keyword options such as `dynamic="strict"` sit beside `properties`.
        """
        if isinstance(schema_or_fields, MappingsSchema):
            properties = dict(schema_or_fields.properties)
        else:
            properties = resolve_properties(schema_or_fields)
        return IndexBuilder(
            {**self._state, "mappings": {"properties": properties, **options}}
        )

    def settings(self, settings: Mapping[str, Any]) -> "IndexBuilder":
        """Set the index settings, replacing any earlier call."""
        return IndexBuilder({**self._state, "settings": dict(settings)})

    def alias(self, name: str, **options: Any) -> "IndexBuilder":
        """Add an alias; repeated calls accumulate."""
        aliases = {**self._state.get("aliases", {}), name: options}
        return IndexBuilder({**self._state, "aliases": aliases})

    def build(self) -> ESCreateIndex:
        return copy.deepcopy(self._state)
