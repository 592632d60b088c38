import copy
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from loguru import logger

from elasticlink.mapping.schema import FieldGroup, MappingsSchema, check_field

AggregationState = dict[str, dict[str, Any]]


class SubAggregationError(RuntimeError):
    """sub_agg was called before any aggregation was registered."""


class AggregationBuilder:
    """Immutable builder of a named aggregation mapping.

    Every registration returns a new builder; `sub_agg` nests a freshly built
    aggregation tree under the most recently inserted name:

        aggregations(schema)
            .terms("by_category", "category", size=10)
            .sub_agg(lambda a: a.avg("avg_price", "price"))
            .build()
    """

    __slots__ = ("_schema", "_state")

    def __init__(
        self,
        schema: MappingsSchema | None = None,
        state: Mapping[str, dict[str, Any]] | None = None,
    ) -> None:
        """Initialize a builder over an existing (or empty) aggregation state."""
        self._schema = schema
        self._state: AggregationState = dict(state or {})

    def _add(
        self, kind: str, name: str, field: str, options: Mapping[str, Any]
    ) -> "AggregationBuilder":
        check_field(self._schema, field, FieldGroup.ANY, kind)
        return AggregationBuilder(
            self._schema,
            {**self._state, name: {kind: {"field": str(field), **options}}},
        )

    # Bucket aggregations

    def terms(self, name: str, field: str, **options: Any) -> "AggregationBuilder":
        """Group by field values."""
        return self._add("terms", name, field, options)

    def date_histogram(
        self, name: str, field: str, **options: Any
    ) -> "AggregationBuilder":
        """Group by time intervals, e.g. `calendar_interval="month"`."""
        return self._add("date_histogram", name, field, options)

    def range(
        self,
        name: str,
        field: str,
        ranges: Sequence[Mapping[str, Any]],
        **options: Any,
    ) -> "AggregationBuilder":
        """Group by explicit numeric or date ranges."""
        return self._add(
            "range", name, field, {"ranges": [dict(r) for r in ranges], **options}
        )

    def histogram(self, name: str, field: str, **options: Any) -> "AggregationBuilder":
        """Group by fixed numeric intervals."""
        return self._add("histogram", name, field, options)

    # Metric aggregations

    def avg(self, name: str, field: str, **options: Any) -> "AggregationBuilder":
        return self._add("avg", name, field, options)

    def sum(self, name: str, field: str, **options: Any) -> "AggregationBuilder":
        return self._add("sum", name, field, options)

    def min(self, name: str, field: str, **options: Any) -> "AggregationBuilder":
        return self._add("min", name, field, options)

    def max(self, name: str, field: str, **options: Any) -> "AggregationBuilder":
        return self._add("max", name, field, options)

    def cardinality(
        self, name: str, field: str, **options: Any
    ) -> "AggregationBuilder":
        """Approximate count of distinct values."""
        return self._add("cardinality", name, field, options)

    def percentiles(
        self, name: str, field: str, **options: Any
    ) -> "AggregationBuilder":
        return self._add("percentiles", name, field, options)

    def stats(self, name: str, field: str, **options: Any) -> "AggregationBuilder":
        """Count, min, max, avg and sum in one aggregation."""
        return self._add("stats", name, field, options)

    def value_count(
        self, name: str, field: str, **options: Any
    ) -> "AggregationBuilder":
        return self._add("value_count", name, field, options)

    # Sub-aggregations

    def sub_agg(
        self, fn: Callable[["AggregationBuilder"], "AggregationBuilder"]
    ) -> "AggregationBuilder":
        """Attach sub-aggregations to the most recently inserted aggregation.

        Insertion order decides the target, not name order. A second call on
        the same target replaces its `aggs` rather than merging.
        """
        if not self._state:
            logger.error("sub_agg called on an empty aggregation builder")
            raise SubAggregationError("No aggregation to add sub-aggregation to")

        last_name = next(reversed(self._state))
        sub_aggs = fn(AggregationBuilder(self._schema)).build()
        return AggregationBuilder(
            self._schema,
            {**self._state, last_name: {**self._state[last_name], "aggs": sub_aggs}},
        )

    def build(self) -> AggregationState:
        """Return the aggregation mapping, unwrapped."""
        return copy.deepcopy(self._state)
