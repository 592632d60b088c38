"""Entry points for building Elasticsearch request payloads.

    from elasticlink.api import keyword, mappings, query, text

    products = mappings({"name": text(), "category": keyword()})
    body = query(products).match("name", "laptop").size(10).build()
"""

from elasticlink.builders.aggregation import AggregationBuilder, SubAggregationError
from elasticlink.builders.bulk import BulkBuilder
from elasticlink.builders.clause import ClauseBuilder
from elasticlink.builders.index_management import IndexBuilder
from elasticlink.builders.multi_search import MSearchBuilder
from elasticlink.builders.query import QueryBuilder
from elasticlink.builders.settings_presets import (
    fast_ingest_settings,
    index_sort_settings,
    production_search_settings,
)
from elasticlink.builders.suggester import SuggesterBuilder
from elasticlink.mapping.fields import (
    alias,
    binary,
    boolean,
    byte,
    completion,
    constant_keyword,
    date,
    date_nanos,
    date_range,
    dense_vector,
    double,
    double_range,
    flattened,
    float_,
    float_range,
    geo_point,
    geo_shape,
    half_float,
    integer,
    integer_range,
    ip,
    keyword,
    long,
    long_range,
    match_only_text,
    nested,
    object_,
    percolator,
    quantized_dense_vector,
    scaled_float,
    search_as_you_type,
    short,
    text,
    wildcard,
)
from elasticlink.mapping.schema import FieldTypeError, MappingsSchema, mappings

__all__ = [
    "AggregationBuilder",
    "BulkBuilder",
    "ClauseBuilder",
    "FieldTypeError",
    "IndexBuilder",
    "MSearchBuilder",
    "MappingsSchema",
    "QueryBuilder",
    "SubAggregationError",
    "SuggesterBuilder",
    "aggregations",
    "alias",
    "binary",
    "boolean",
    "bulk",
    "byte",
    "completion",
    "constant_keyword",
    "date",
    "date_nanos",
    "date_range",
    "dense_vector",
    "double",
    "double_range",
    "fast_ingest_settings",
    "flattened",
    "float_",
    "float_range",
    "geo_point",
    "geo_shape",
    "half_float",
    "index_builder",
    "index_sort_settings",
    "integer",
    "integer_range",
    "ip",
    "keyword",
    "long",
    "long_range",
    "mappings",
    "match_only_text",
    "msearch",
    "nested",
    "object_",
    "percolator",
    "production_search_settings",
    "quantized_dense_vector",
    "query",
    "scaled_float",
    "search_as_you_type",
    "short",
    "suggest",
    "text",
    "wildcard",
]


def query(schema: MappingsSchema | None, include_query: bool = True) -> QueryBuilder:
    """Start a search body.

    With `include_query=False` the `query` key never reaches `build()` output,
    for aggregation-only requests.
    """
    return QueryBuilder(schema, include_query=include_query)


def aggregations(schema: MappingsSchema | None = None) -> AggregationBuilder:
    """Start a standalone aggregation tree."""
    return AggregationBuilder(schema)


def suggest(schema: MappingsSchema | None = None) -> SuggesterBuilder:
    """Start a standalone suggester block."""
    return SuggesterBuilder(schema)


def msearch(schema: MappingsSchema | None = None) -> MSearchBuilder:
    """Start a multi-search request."""
    return MSearchBuilder(schema)


def bulk(schema: MappingsSchema | None = None) -> BulkBuilder:
    """Start a bulk request."""
    return BulkBuilder(schema)


def index_builder() -> IndexBuilder:
    """Start a create-index body."""
    return IndexBuilder()
