import builtins
import copy
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from elasticlink.builders.aggregation import AggregationBuilder
from elasticlink.builders.clause import (
    ClauseBuilder,
    knn_body,
    script_body,
    shape_switch,
)
from elasticlink.builders.suggester import SuggesterBuilder
from elasticlink.mapping.schema import (
    FieldGroup,
    MappingsSchema,
    check_field,
    check_fields,
    check_sort_field,
)
from elasticlink.types.dsl import ESSearchBody
from elasticlink.types.general import Fragment, SortDirection

ClauseFn = Callable[[ClauseBuilder], Fragment | None]


class QueryBuilder:
    """Immutable builder of a search request body.

    Each method returns a new builder; the receiver is never modified, so a
    partially built chain can be reused as the root of several requests:

        base = query(products).bool().filter(lambda q: q.term("status", "active"))
        cheap = base.must(lambda q: q.range("price", lte=20)).build()
        pricey = base.must(lambda q: q.range("price", gte=500)).build()

    Leaf query methods replace `query` wholesale. Clauses only accumulate
    through `must`, `must_not`, `should` and `filter`.
    """

    __slots__ = ("_clauses", "_include_query", "_schema", "_state")

    def __init__(
        self,
        schema: MappingsSchema | None = None,
        state: Mapping[str, Any] | None = None,
        include_query: bool = True,
    ) -> None:
        """Initialize a builder.

        With `include_query` unset, `build()` drops `query` from its output,
        for aggregation-only requests.
        """
        self._schema = schema
        self._state: dict[str, Any] = dict(state or {})
        self._include_query = include_query
        self._clauses = ClauseBuilder(schema)

    def _derive(self, updates: Mapping[str, Any]) -> "QueryBuilder":
        return QueryBuilder(
            self._schema, {**self._state, **updates}, self._include_query
        )

    def _with_query(self, fragment: Fragment) -> "QueryBuilder":
        return self._derive({"query": fragment})

    # Boolean composition

    def _current_bool(self) -> dict[str, Any]:
        current = self._state.get("query") or {}
        return current.get("bool") or {}

    def _append_clause(self, clause_name: str, fn: ClauseFn) -> "QueryBuilder":
        clause = fn(ClauseBuilder(self._schema))
        bool_query = self._current_bool()
        existing = bool_query.get(clause_name, [])
        return self._with_query(
            {"bool": {**bool_query, clause_name: [*existing, clause]}}
        )

    def bool(self) -> "QueryBuilder":
        """Start an empty bool query, discarding any current query."""
        return self._with_query({"bool": {}})

    def must(self, fn: ClauseFn) -> "QueryBuilder":
        """Append a scoring clause that must match."""
        return self._append_clause("must", fn)

    def must_not(self, fn: ClauseFn) -> "QueryBuilder":
        """Append a clause that must not match."""
        return self._append_clause("must_not", fn)

    def should(self, fn: ClauseFn) -> "QueryBuilder":
        """Append an optional scoring clause."""
        return self._append_clause("should", fn)

    def filter(self, fn: ClauseFn) -> "QueryBuilder":
        """Append a non-scoring clause that must match."""
        return self._append_clause("filter", fn)

    def minimum_should_match(self, value: int | str) -> "QueryBuilder":
        return self._with_query(
            {"bool": {**self._current_bool(), "minimum_should_match": value}}
        )

    # Leaf queries, each replacing `query`

    def match_all(self) -> "QueryBuilder":
        return self._with_query(self._clauses.match_all())

    def match(self, field: str, value: str, **options: Any) -> "QueryBuilder":
        return self._with_query(self._clauses.match(field, value, **options))

    def multi_match(
        self, fields: Sequence[str], query: str, **options: Any
    ) -> "QueryBuilder":
        return self._with_query(self._clauses.multi_match(fields, query, **options))

    def match_phrase(self, field: str, value: str) -> "QueryBuilder":
        return self._with_query(self._clauses.match_phrase(field, value))

    def match_phrase_prefix(
        self, field: str, value: str, **options: Any
    ) -> "QueryBuilder":
        return self._with_query(
            self._clauses.match_phrase_prefix(field, value, **options)
        )

    def match_bool_prefix(
        self, field: str, value: str, **options: Any
    ) -> "QueryBuilder":
        return self._with_query(
            self._clauses.match_bool_prefix(field, value, **options)
        )

    def term(self, field: str, value: Any) -> "QueryBuilder":
        return self._with_query(self._clauses.term(field, value))

    def terms(self, field: str, values: Sequence[Any]) -> "QueryBuilder":
        return self._with_query(self._clauses.terms(field, values))

    def range(self, field: str, **conditions: Any) -> "QueryBuilder":
        return self._with_query(self._clauses.range(field, **conditions))

    def exists(self, field: str) -> "QueryBuilder":
        return self._with_query(self._clauses.exists(field))

    def prefix(self, field: str, value: str) -> "QueryBuilder":
        return self._with_query(self._clauses.prefix(field, value))

    def wildcard(self, field: str, value: str) -> "QueryBuilder":
        return self._with_query(self._clauses.wildcard(field, value))

    def fuzzy(self, field: str, value: str, **options: Any) -> "QueryBuilder":
        return self._with_query(self._clauses.fuzzy(field, value, **options))

    def ids(self, values: Sequence[str]) -> "QueryBuilder":
        return self._with_query(self._clauses.ids(values))

    def script(
        self,
        source: str,
        *,
        lang: str | None = None,
        params: Mapping[str, Any] | None = None,
        boost: float | None = None,
    ) -> "QueryBuilder":
        return self._with_query(
            self._clauses.script(source, lang=lang, params=params, boost=boost)
        )

    def percolate(self, **options: Any) -> "QueryBuilder":
        return self._with_query(self._clauses.percolate(**options))

    def combined_fields(
        self, fields: Sequence[str], query: str, **options: Any
    ) -> "QueryBuilder":
        return self._with_query(
            self._clauses.combined_fields(fields, query, **options)
        )

    def query_string(self, query: str, **options: Any) -> "QueryBuilder":
        return self._with_query(self._clauses.query_string(query, **options))

    def simple_query_string(self, query: str, **options: Any) -> "QueryBuilder":
        return self._with_query(self._clauses.simple_query_string(query, **options))

    def more_like_this(
        self,
        fields: Sequence[str],
        like: str | Mapping[str, Any] | Sequence[str | Mapping[str, Any]],
        **options: Any,
    ) -> "QueryBuilder":
        return self._with_query(self._clauses.more_like_this(fields, like, **options))

    # Compound and root-only queries

    def nested(self, path: str, fn: ClauseFn, **options: Any) -> "QueryBuilder":
        """Query nested documents under `path`.

        The inner builder has no schema: nested paths fall outside the
        top-level field map.
        """
        inner = fn(ClauseBuilder())
        return self._with_query({"nested": {"path": path, "query": inner, **options}})

    def script_score(
        self, fn: ClauseFn, script: Mapping[str, Any], **options: Any
    ) -> "QueryBuilder":
        """Rescore the inner query's hits with a script.

        `script` holds `source` and optionally `lang` and `params`; `min_score`
        is kept even when zero, `boost` only when truthy.
        """
        inner = fn(ClauseBuilder(self._schema))
        extra = dict(options)
        min_score = extra.pop("min_score", None)
        boost = extra.pop("boost", None)

        body: dict[str, Any] = {
            "query": inner,
            "script": script_body(
                script["source"], script.get("lang"), script.get("params")
            ),
        }
        if min_score is not None:
            body["min_score"] = min_score
        if boost:
            body["boost"] = boost
        body.update(extra)
        return self._with_query({"script_score": body})

    def constant_score(self, fn: ClauseFn, **options: Any) -> "QueryBuilder":
        """Wrap a filter clause so every hit scores the same (`boost`)."""
        clause = fn(ClauseBuilder(self._schema))
        return self._with_query({"constant_score": {"filter": clause, **options}})

    def regexp(self, field: str, value: str, **options: Any) -> "QueryBuilder":
        """Regular expression query; bare string without options."""
        check_field(self._schema, field, FieldGroup.KEYWORD, "regexp")
        return self._with_query(
            shape_switch("regexp", field, value, options, value_key="value")
        )

    def geo_distance(
        self, field: str, center: Mapping[str, float], **options: Any
    ) -> "QueryBuilder":
        """Match points within `distance` of `center` ({"lat": .., "lon": ..})."""
        check_field(self._schema, field, FieldGroup.GEO_POINT, "geo_distance")
        return self._with_query(
            {"geo_distance": {str(field): dict(center), **options}}
        )

    def geo_bounding_box(self, field: str, **options: Any) -> "QueryBuilder":
        check_field(self._schema, field, FieldGroup.GEO_POINT, "geo_bounding_box")
        return self._with_query({"geo_bounding_box": {str(field): options}})

    def geo_polygon(self, field: str, **options: Any) -> "QueryBuilder":
        check_field(self._schema, field, FieldGroup.GEO_POINT, "geo_polygon")
        return self._with_query({"geo_polygon": {str(field): options}})

    def knn(
        self,
        field: str,
        query_vector: Sequence[float],
        *,
        k: int | None = None,
        num_candidates: int | None = None,
        **options: Any,
    ) -> "QueryBuilder":
        """Set the top-level `knn` search; `query` is left as is."""
        check_field(self._schema, field, FieldGroup.VECTOR, "knn")
        return self._derive(
            {"knn": knn_body(field, query_vector, k, num_candidates, options)}
        )

    def when[R](
        self,
        condition: object,
        then_fn: Callable[["QueryBuilder"], R],
        else_fn: Callable[["QueryBuilder"], R] | None = None,
    ) -> R | None:
        """Continue the chain through `then_fn` or `else_fn` depending on `condition`.

        The callback receives this builder's current state. Returns None when
        the condition is falsy and no `else_fn` is given.
        """
        if condition:
            return then_fn(self)
        if else_fn is not None:
            return else_fn(self)
        return None

    # Nested builders

    def aggs(
        self, fn: Callable[[AggregationBuilder], AggregationBuilder]
    ) -> "QueryBuilder":
        """Set `aggs` from a freshly built aggregation tree."""
        return self._derive({"aggs": fn(AggregationBuilder(self._schema)).build()})

    def suggest(
        self, fn: Callable[[SuggesterBuilder], SuggesterBuilder]
    ) -> "QueryBuilder":
        """Set `suggest` from a suggester builder, without its envelope."""
        built = fn(SuggesterBuilder(self._schema)).build()
        return self._derive({"suggest": built["suggest"]})

    # Search parameters

    def sort(self, field: str, direction: SortDirection = "asc") -> "QueryBuilder":
        """Append a sort key; repeated calls accumulate in order."""
        check_sort_field(self._schema, field)
        return self._derive(
            {"sort": [*self._state.get("sort", []), {field: direction}]}
        )

    def from_(self, value: int) -> "QueryBuilder":
        return self._derive({"from": value})

    def size(self, value: int) -> "QueryBuilder":
        return self._derive({"size": value})

    def source(self, fields: Sequence[str]) -> "QueryBuilder":
        """Select `_source` fields; wildcard patterns are not validated."""
        check_fields(
            self._schema, [f for f in fields if "*" not in f], FieldGroup.ANY, "_source"
        )
        return self._derive({"_source": list(fields)})

    def timeout(self, value: str) -> "QueryBuilder":
        return self._derive({"timeout": value})

    def track_scores(self, value: builtins.bool) -> "QueryBuilder":
        return self._derive({"track_scores": value})

    def explain(self, value: builtins.bool) -> "QueryBuilder":
        return self._derive({"explain": value})

    def min_score(self, value: float) -> "QueryBuilder":
        return self._derive({"min_score": value})

    def version(self, value: builtins.bool) -> "QueryBuilder":
        return self._derive({"version": value})

    def seq_no_primary_term(self, value: builtins.bool) -> "QueryBuilder":
        return self._derive({"seq_no_primary_term": value})

    def track_total_hits(self, value: builtins.bool | int = True) -> "QueryBuilder":
        return self._derive({"track_total_hits": value})

    def highlight(self, fields: Sequence[str], **options: Any) -> "QueryBuilder":
        """Highlight `fields`, all sharing the same options.

        `pre_tags` and `post_tags` are hoisted to the highlight block itself.
        """
        check_fields(self._schema, fields, FieldGroup.ANY, "highlight")
        field_options = dict(options)
        pre_tags = field_options.pop("pre_tags", None)
        post_tags = field_options.pop("post_tags", None)

        highlight: dict[str, Any] = {
            "fields": {field: dict(field_options) for field in fields}
        }
        if pre_tags is not None:
            highlight["pre_tags"] = pre_tags
        if post_tags is not None:
            highlight["post_tags"] = post_tags
        return self._derive({"highlight": highlight})

    def search_after(self, values: Sequence[Any]) -> "QueryBuilder":
        return self._derive({"search_after": list(values)})

    def preference(self, value: str) -> "QueryBuilder":
        return self._derive({"preference": value})

    def collapse(self, field: str, **options: Any) -> "QueryBuilder":
        """Collapse hits on `field`, e.g. with `inner_hits`."""
        check_field(self._schema, field, FieldGroup.ANY, "collapse")
        return self._derive({"collapse": {"field": field, **options}})

    def rescore(
        self, fn: ClauseFn, window_size: int, **options: Any
    ) -> "QueryBuilder":
        """Rescore the top `window_size` hits with a second query."""
        rescore_query = fn(ClauseBuilder(self._schema))
        return self._derive(
            {
                "rescore": {
                    "window_size": window_size,
                    "query": {"rescore_query": rescore_query, **options},
                }
            }
        )

    def stored_fields(self, fields: Sequence[str]) -> "QueryBuilder":
        return self._derive({"stored_fields": list(fields)})

    def terminate_after(self, count: int) -> "QueryBuilder":
        return self._derive({"terminate_after": count})

    def indices_boost(self, boosts: Sequence[Mapping[str, float]]) -> "QueryBuilder":
        return self._derive({"indices_boost": [dict(b) for b in boosts]})

    def build(self) -> ESSearchBody:
        """Render the request body.

        `query` is omitted when the builder was created with
        `include_query=False`, whatever clause methods were called.
        """
        body = copy.deepcopy(self._state)
        if not self._include_query:
            body.pop("query", None)
        return body  # pyright:ignore[reportReturnType]
