from collections.abc import Callable, Mapping, Sequence
from typing import Any

from elasticlink.mapping.schema import (
    FieldGroup,
    MappingsSchema,
    check_field,
    check_fields,
)
from elasticlink.types.general import Fragment

DEFAULT_SCRIPT_LANG = "painless"


def shape_switch(
    kind: str,
    field: str,
    value: Any,
    options: Mapping[str, Any],
    value_key: str = "query",
) -> Fragment:
    """Emit a bare `{kind: {field: value}}`, or an object form with options.

    The object form is `{kind: {field: {value_key: value, **options}}}`.

    Elasticsearch reads the bare form as the query text itself, so the two
    shapes are not interchangeable on the wire.
    """
    if not options:
        return {kind: {field: value}}
    return {kind: {field: {value_key: value, **options}}}


def script_body(
    source: str, lang: str | None = None, params: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Normalize a script, defaulting `lang` to painless."""
    script: dict[str, Any] = {"source": source, "lang": lang or DEFAULT_SCRIPT_LANG}
    if params is not None:
        script["params"] = dict(params)
    return script


def knn_body(
    field: str,
    query_vector: Sequence[float],
    k: int | None,
    num_candidates: int | None,
    options: Mapping[str, Any],
) -> dict[str, Any]:
    """Encode a kNN search block.

    `boost` is dropped when falsy, `filter` and `similarity` only when unset.
    """
    extra = dict(options)
    filter_ = extra.pop("filter", None)
    boost = extra.pop("boost", None)
    similarity = extra.pop("similarity", None)

    body: dict[str, Any] = {"field": str(field), "query_vector": list(query_vector)}
    if k is not None:
        body["k"] = k
    if num_candidates is not None:
        body["num_candidates"] = num_candidates
    if filter_ is not None:
        body["filter"] = filter_
    if boost:
        body["boost"] = boost
    if similarity is not None:
        body["similarity"] = similarity
    body.update(extra)
    return body


class ClauseBuilder:
    """Stateless factory of query DSL fragments.

    Used directly inside bool clause callbacks; every method returns a plain
    fragment such as `{"term": {"status": "active"}}` and leaves the builder
    untouched.
    """

    __slots__ = ("_schema",)

    def __init__(self, schema: MappingsSchema | None = None) -> None:
        """Initialize a clause builder, optionally constrained by a schema."""
        self._schema = schema

    @property
    def schema(self) -> MappingsSchema | None:
        """The schema fields are validated against, if any."""
        return self._schema

    def _check(self, field: str, group: FieldGroup, operation: str) -> None:
        check_field(self._schema, field, group, operation)

    def match_all(self) -> Fragment:
        return {"match_all": {}}

    def match(self, field: str, value: str, **options: Any) -> Fragment:
        """Full-text match; options switch the value to `{"query": value, ...}`."""
        self._check(field, FieldGroup.TEXT, "match")
        return shape_switch("match", field, value, options)

    def multi_match(
        self, fields: Sequence[str], query: str, **options: Any
    ) -> Fragment:
        """Match `query` across several text fields."""
        check_fields(self._schema, fields, FieldGroup.TEXT, "multi_match")
        return {"multi_match": {"fields": list(fields), "query": query, **options}}

    def match_phrase(self, field: str, value: str) -> Fragment:
        self._check(field, FieldGroup.TEXT, "match_phrase")
        return {"match_phrase": {field: value}}

    def match_phrase_prefix(self, field: str, value: str, **options: Any) -> Fragment:
        self._check(field, FieldGroup.TEXT, "match_phrase_prefix")
        return shape_switch("match_phrase_prefix", field, value, options)

    def match_bool_prefix(self, field: str, value: str, **options: Any) -> Fragment:
        self._check(field, FieldGroup.TEXT, "match_bool_prefix")
        return shape_switch("match_bool_prefix", field, value, options)

    def term(self, field: str, value: Any) -> Fragment:
        """Exact value match on a non-analyzed field."""
        self._check(field, FieldGroup.TERMABLE, "term")
        return {"term": {field: value}}

    def terms(self, field: str, values: Sequence[Any]) -> Fragment:
        self._check(field, FieldGroup.TERMABLE, "terms")
        return {"terms": {field: list(values)}}

    def range(self, field: str, **conditions: Any) -> Fragment:
        """Range over `gte`, `lte`, `gt` and `lt`, passed through verbatim."""
        self._check(field, FieldGroup.RANGEABLE, "range")
        return {"range": {field: conditions}}

    def exists(self, field: str) -> Fragment:
        self._check(field, FieldGroup.ANY, "exists")
        return {"exists": {"field": field}}

    def prefix(self, field: str, value: str) -> Fragment:
        self._check(field, FieldGroup.KEYWORD, "prefix")
        return {"prefix": {field: value}}

    def wildcard(self, field: str, value: str) -> Fragment:
        self._check(field, FieldGroup.KEYWORD, "wildcard")
        return {"wildcard": {field: value}}

    def fuzzy(self, field: str, value: str, **options: Any) -> Fragment:
        """Fuzzy always uses the object form, unlike match."""
        self._check(field, FieldGroup.FUZZYABLE, "fuzzy")
        return {"fuzzy": {field: {"value": value, **options}}}

    def ids(self, values: Sequence[str]) -> Fragment:
        return {"ids": {"values": list(values)}}

    def knn(
        self,
        field: str,
        query_vector: Sequence[float],
        *,
        k: int | None = None,
        num_candidates: int | None = None,
        **options: Any,
    ) -> Fragment:
        """Approximate nearest-neighbour clause over a dense_vector field."""
        self._check(field, FieldGroup.VECTOR, "knn")
        return {"knn": knn_body(field, query_vector, k, num_candidates, options)}

    def script(
        self,
        source: str,
        *,
        lang: str | None = None,
        params: Mapping[str, Any] | None = None,
        boost: float | None = None,
    ) -> Fragment:
        """Filter by a script returning a boolean; `lang` defaults to painless."""
        clause: dict[str, Any] = {"script": script_body(source, lang, params)}
        if boost:
            clause["boost"] = boost
        return {"script": clause}

    def percolate(self, **options: Any) -> Fragment:
        """Match stored queries against `document` or `documents`."""
        return {"percolate": options}

    def combined_fields(
        self, fields: Sequence[str], query: str, **options: Any
    ) -> Fragment:
        check_fields(self._schema, fields, FieldGroup.TEXT, "combined_fields")
        return {"combined_fields": {"fields": list(fields), "query": query, **options}}

    def query_string(self, query: str, **options: Any) -> Fragment:
        """Lucene query syntax; fields are not validated."""
        return {"query_string": {"query": query, **options}}

    def simple_query_string(self, query: str, **options: Any) -> Fragment:
        return {"simple_query_string": {"query": query, **options}}

    def more_like_this(
        self,
        fields: Sequence[str],
        like: str | Mapping[str, Any] | Sequence[str | Mapping[str, Any]],
        **options: Any,
    ) -> Fragment:
        """More-like-this over free text and/or document references.

        A single string or document reference is wrapped into a list.
        """
        check_fields(self._schema, fields, FieldGroup.ANY, "more_like_this")
        likes = [like] if isinstance(like, str | Mapping) else list(like)
        return {"more_like_this": {"fields": list(fields), "like": likes, **options}}

    def when[R](
        self,
        condition: object,
        then_fn: Callable[["ClauseBuilder"], R],
        else_fn: Callable[["ClauseBuilder"], R] | None = None,
    ) -> R | None:
        """Branch on `condition`, handing a fresh clause builder to the chosen callback.

        Returns None when the condition is falsy and there is no `else_fn`;
        inside a bool clause that None is kept, so fall back at the call site:

            .filter(
                lambda q: q.when(min_price, lambda q2: q2.range("price", gte=min_price))
                or q.match_all()
            )
        """
        if condition:
            return then_fn(ClauseBuilder(self._schema))
        if else_fn is not None:
            return else_fn(ClauseBuilder(self._schema))
        return None
