from typing import Any, NotRequired, TypedDict

from elasticlink.types.general import Fragment, SortDirection


class ESKnnSearch(TypedDict):
    """A top-level approximate kNN search block."""

    field: str
    query_vector: list[float]
    k: NotRequired[int]
    num_candidates: NotRequired[int]
    filter: NotRequired[Fragment | list[Fragment]]
    boost: NotRequired[float]
    similarity: NotRequired[float]


class ESHighlight(TypedDict):
    """Highlighting block with per-field options and hoisted tags."""

    fields: dict[str, dict[str, Any]]
    pre_tags: NotRequired[list[str]]
    post_tags: NotRequired[list[str]]


class ESCollapse(TypedDict):
    """Field collapsing block."""

    field: str
    inner_hits: NotRequired[dict[str, Any] | list[dict[str, Any]]]
    max_concurrent_group_searches: NotRequired[int]


class ESRescoreQuery(TypedDict):
    """The query part of a rescore block."""

    rescore_query: Fragment | None
    query_weight: NotRequired[float]
    rescore_query_weight: NotRequired[float]
    score_mode: NotRequired[str]


class ESRescore(TypedDict):
    """A query rescorer applied to the top `window_size` hits."""

    window_size: int
    query: ESRescoreQuery


# Keys such as `from` and `_source` are not valid identifiers, hence the
# functional syntax.
ESSearchBody = TypedDict(
    "ESSearchBody",
    {
        "query": NotRequired[Fragment],
        "knn": NotRequired[ESKnnSearch],
        "aggs": NotRequired[dict[str, Any]],
        "suggest": NotRequired[dict[str, Any]],
        "from": NotRequired[int],
        "size": NotRequired[int],
        "sort": NotRequired[list[dict[str, SortDirection]]],
        "_source": NotRequired[list[str] | bool],
        "timeout": NotRequired[str],
        "track_scores": NotRequired[bool],
        "explain": NotRequired[bool],
        "min_score": NotRequired[float],
        "version": NotRequired[bool],
        "seq_no_primary_term": NotRequired[bool],
        "track_total_hits": NotRequired[bool | int],
        "highlight": NotRequired[ESHighlight],
        "search_after": NotRequired[list[Any]],
        "preference": NotRequired[str],
        "collapse": NotRequired[ESCollapse],
        "rescore": NotRequired[ESRescore],
        "stored_fields": NotRequired[list[str]],
        "terminate_after": NotRequired[int],
        "indices_boost": NotRequired[list[dict[str, float]]],
    },
)


class ESSuggestion(TypedDict):
    """A single named suggester entry."""

    text: NotRequired[str]
    prefix: NotRequired[str]
    term: NotRequired[dict[str, Any]]
    phrase: NotRequired[dict[str, Any]]
    completion: NotRequired[dict[str, Any]]


class ESSuggestPayload(TypedDict):
    """Suggesters wrapped in their `suggest` envelope."""

    suggest: dict[str, ESSuggestion]


class MSearchRequest(TypedDict):
    """A single search of a multi-search request."""

    header: NotRequired[dict[str, Any] | None]
    body: ESSearchBody | dict[str, Any]


class ESIndexMappings(TypedDict):
    """Index mappings block."""

    properties: dict[str, dict[str, Any]]
    dynamic: NotRequired[bool | str]
    dynamic_templates: NotRequired[list[dict[str, Any]]]


class ESCreateIndex(TypedDict):
    """Body of a create-index request."""

    mappings: NotRequired[ESIndexMappings]
    settings: NotRequired[dict[str, Any]]
    aliases: NotRequired[dict[str, dict[str, Any]]]
