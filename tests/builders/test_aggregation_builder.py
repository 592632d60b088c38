import pytest

from elasticlink.api import aggregations
from elasticlink.builders.aggregation import SubAggregationError
from elasticlink.mapping.schema import MappingsSchema


def test_empty_aggregations_build_empty_mapping():
    assert aggregations().build() == {}


def test_metric_aggregations(products: MappingsSchema):
    result = (
        aggregations(products)
        .avg("avg_price", "price")
        .sum("total_stock", "stock")
        .min("min_price", "price")
        .max("max_price", "price")
        .cardinality("categories", "category", precision_threshold=100)
        .percentiles("price_pct", "price", percents=[50, 95])
        .stats("price_stats", "price")
        .value_count("priced", "price")
        .build()
    )
    assert result == {
        "avg_price": {"avg": {"field": "price"}},
        "total_stock": {"sum": {"field": "stock"}},
        "min_price": {"min": {"field": "price"}},
        "max_price": {"max": {"field": "price"}},
        "categories": {
            "cardinality": {"field": "category", "precision_threshold": 100}
        },
        "price_pct": {"percentiles": {"field": "price", "percents": [50, 95]}},
        "price_stats": {"stats": {"field": "price"}},
        "priced": {"value_count": {"field": "price"}},
    }


def test_bucket_aggregations(products: MappingsSchema):
    result = (
        aggregations(products)
        .terms("by_category", "category", size=10)
        .date_histogram("per_month", "created_at", calendar_interval="month")
        .range("price_bands", "price", [{"to": 100}, {"from": 100}], keyed=True)
        .histogram("stock_hist", "stock", interval=50)
        .build()
    )
    assert result == {
        "by_category": {"terms": {"field": "category", "size": 10}},
        "per_month": {
            "date_histogram": {"field": "created_at", "calendar_interval": "month"}
        },
        "price_bands": {
            "range": {
                "field": "price",
                "ranges": [{"to": 100}, {"from": 100}],
                "keyed": True,
            }
        },
        "stock_hist": {"histogram": {"field": "stock", "interval": 50}},
    }


def test_sub_agg_attaches_to_most_recent(products: MappingsSchema):
    result = (
        aggregations(products)
        .terms("x_terms", "category")
        .terms("a_terms", "status")
        .sub_agg(lambda a: a.avg("avg_price", "price"))
        .build()
    )
    assert result == {
        "x_terms": {"terms": {"field": "category"}},
        "a_terms": {
            "terms": {"field": "status"},
            "aggs": {"avg_price": {"avg": {"field": "price"}}},
        },
    }


def test_siblings_after_sub_agg_are_independent(products: MappingsSchema):
    result = (
        aggregations(products)
        .terms("by_category", "category")
        .sub_agg(lambda a: a.max("max_price", "price"))
        .avg("avg_price", "price")
        .build()
    )
    assert "aggs" not in result["avg_price"]
    assert result["by_category"]["aggs"] == {"max_price": {"max": {"field": "price"}}}


def test_second_sub_agg_overwrites(products: MappingsSchema):
    result = (
        aggregations(products)
        .terms("by_category", "category")
        .sub_agg(lambda a: a.avg("avg_price", "price"))
        .sub_agg(lambda a: a.max("max_price", "price"))
        .build()
    )
    assert result["by_category"]["aggs"] == {"max_price": {"max": {"field": "price"}}}


def test_nested_sub_aggs(products: MappingsSchema):
    result = (
        aggregations(products)
        .terms("by_category", "category")
        .sub_agg(
            lambda a: a.date_histogram(
                "per_month", "created_at", calendar_interval="month"
            ).sub_agg(lambda b: b.sum("revenue", "price"))
        )
        .build()
    )
    assert result["by_category"]["aggs"]["per_month"]["aggs"] == {
        "revenue": {"sum": {"field": "price"}}
    }


def test_sub_agg_without_aggregation_raises(log_messages: list[str]):
    with pytest.raises(
        SubAggregationError, match="No aggregation to add sub-aggregation to"
    ):
        aggregations().sub_agg(lambda a: a.avg("avg_price", "price"))
    assert any(m.startswith("ERROR|") for m in log_messages)


def test_registration_does_not_mutate_parent(products: MappingsSchema):
    base = aggregations(products).terms("by_category", "category")
    base.avg("avg_price", "price")
    base.sub_agg(lambda a: a.avg("avg_price", "price"))
    assert base.build() == {"by_category": {"terms": {"field": "category"}}}
