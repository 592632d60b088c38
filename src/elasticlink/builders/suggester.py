import copy
from collections.abc import Mapping
from typing import Any

from elasticlink.mapping.schema import FieldGroup, MappingsSchema, check_field
from elasticlink.types.dsl import ESSuggestion, ESSuggestPayload


class SuggesterBuilder:
    """Immutable builder of named term, phrase and completion suggesters.

    Registering a name twice replaces the earlier entry outright.
    """

    __slots__ = ("_schema", "_state")

    def __init__(
        self,
        schema: MappingsSchema | None = None,
        state: Mapping[str, ESSuggestion] | None = None,
    ) -> None:
        """Initialize a builder over an existing (or empty) suggester state."""
        self._schema = schema
        self._state: dict[str, ESSuggestion] = dict(state or {})

    def _register(
        self, name: str, entry: ESSuggestion, options: Mapping[str, Any]
    ) -> "SuggesterBuilder":
        if (field := options.get("field")) is not None:
            check_field(self._schema, field, FieldGroup.ANY, "suggest")
        return SuggesterBuilder(self._schema, {**self._state, name: entry})

    def term(self, name: str, text: str, **options: Any) -> "SuggesterBuilder":
        """Suggest corrections for individual terms."""
        return self._register(name, {"text": text, "term": options}, options)

    def phrase(self, name: str, text: str, **options: Any) -> "SuggesterBuilder":
        """Suggest corrections for whole phrases."""
        return self._register(name, {"text": text, "phrase": options}, options)

    def completion(
        self, name: str, prefix: str, **options: Any
    ) -> "SuggesterBuilder":
        """Autocomplete from a completion field."""
        return self._register(
            name, {"prefix": prefix, "completion": options}, options
        )

    def build(self) -> ESSuggestPayload:
        """Return the suggesters wrapped under `suggest`."""
        return {"suggest": copy.deepcopy(self._state)}
