import copy
from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger

from elasticlink.mapping.schema import MappingsSchema
from elasticlink.utils.ndjson import flatten_pairs, render_ndjson

# Keys of an update call that belong on the body line; the rest is header.
UPDATE_BODY_KEYS = ("doc", "script", "upsert", "doc_as_upsert")

BulkOperation = tuple[dict[str, Any], dict[str, Any] | None]


class BulkBuilder:
    """Immutable builder of a `_bulk` request.

    Operations are kept as (action header, body) pairs; delete has no body.

        bulk(products)
            .index({"name": "Laptop"}, _index="products", _id="1")
            .update(_index="products", _id="2", doc={"price": 999})
            .delete(_index="products", _id="3")
            .build()  # POST /_bulk, Content-Type: application/x-ndjson
    """

    __slots__ = ("_operations", "_schema")

    def __init__(
        self,
        schema: MappingsSchema | None = None,
        operations: Sequence[BulkOperation] = (),
    ) -> None:
        """Initialize a builder over existing (or no) operations."""
        self._schema = schema
        self._operations: tuple[BulkOperation, ...] = tuple(operations)

    def _append(
        self, header: dict[str, Any], body: dict[str, Any] | None
    ) -> "BulkBuilder":
        return BulkBuilder(self._schema, (*self._operations, (header, body)))

    def index(self, doc: Mapping[str, Any], **meta: Any) -> "BulkBuilder":
        """Index a document, creating or replacing it."""
        return self._append({"index": meta}, dict(doc))

    def create(self, doc: Mapping[str, Any], **meta: Any) -> "BulkBuilder":
        """Create a document, failing if it already exists."""
        return self._append({"create": meta}, dict(doc))

    def update(self, **meta: Any) -> "BulkBuilder":
        """Update a document.

        `doc`, `script`, `upsert` and `doc_as_upsert` go on the body line;
        everything else (`_index`, `_id`, `routing`, `retry_on_conflict`, ...)
        stays in the action header.
        """
        header = {k: v for k, v in meta.items() if k not in UPDATE_BODY_KEYS}
        body = {k: meta[k] for k in UPDATE_BODY_KEYS if meta.get(k) is not None}
        return self._append({"update": header}, body)

    def delete(self, **meta: Any) -> "BulkBuilder":
        """Delete a document; no body line is written."""
        return self._append({"delete": meta}, None)

    def build_array(self) -> list[dict[str, Any]]:
        """Render as a flat list alternating action headers and bodies."""
        return copy.deepcopy(flatten_pairs(self._operations, skip_none=True))

    def build(self) -> str:
        """Render as NDJSON, one line per header/body, with a trailing newline."""
        payload = render_ndjson(self.build_array())
        logger.bind(builder="bulk").trace(
            f"Rendered {len(self._operations)} bulk operations ({len(payload)} chars)"
        )
        return payload
