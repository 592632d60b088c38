import copy
from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger

from elasticlink.mapping.schema import MappingsSchema
from elasticlink.types.dsl import MSearchRequest
from elasticlink.utils.ndjson import flatten_pairs, render_ndjson

SearchPair = tuple[dict[str, Any], dict[str, Any]]


class MSearchBuilder:
    """Immutable builder of an `_msearch` request.

    Each search is a header line (index, preference, routing, ...) followed by
    a query body, usually the output of `QueryBuilder.build()`.
    """

    __slots__ = ("_schema", "_searches")

    def __init__(
        self,
        schema: MappingsSchema | None = None,
        searches: Sequence[SearchPair] = (),
    ) -> None:
        """Initialize a builder over existing (or no) searches."""
        self._schema = schema
        self._searches: tuple[SearchPair, ...] = tuple(searches)

    def add(self, request: MSearchRequest) -> "MSearchBuilder":
        """Add a prepared `{"header": ..., "body": ...}` request."""
        return self.add_query(request["body"], request.get("header"))

    def add_query(
        self,
        body: Mapping[str, Any],
        header: Mapping[str, Any] | None = None,
    ) -> "MSearchBuilder":
        """Add a query body, with an empty header unless one is given."""
        pair = (dict(header or {}), dict(body))
        return MSearchBuilder(self._schema, (*self._searches, pair))

    def build_array(self) -> list[dict[str, Any]]:
        """Render as a flat list alternating headers and bodies."""
        return copy.deepcopy(flatten_pairs(self._searches, skip_none=False))

    def build(self) -> str:
        """Render as NDJSON with a trailing newline."""
        payload = render_ndjson(self.build_array())
        logger.bind(builder="msearch").trace(
            f"Rendered {len(self._searches)} searches ({len(payload)} chars)"
        )
        return payload
