from elasticlink.api import (
    index_builder,
    keyword,
    production_search_settings,
    text,
)
from elasticlink.mapping.schema import MappingsSchema


def test_empty_index_builder():
    assert index_builder().build() == {}


def test_mappings_from_schema(products: MappingsSchema):
    result = index_builder().mappings(products).build()
    assert result["mappings"]["properties"] == products.properties


def test_mappings_from_raw_fields_resolve_shorthand():
    result = index_builder().mappings({"name": text(), "sku": "keyword"}).build()
    assert result == {
        "mappings": {
            "properties": {"name": {"type": "text"}, "sku": {"type": "keyword"}}
        }
    }


def test_mappings_options_sit_beside_properties():
    result = index_builder().mappings({"sku": keyword()}, dynamic="strict").build()
    assert result == {
        "mappings": {"properties": {"sku": {"type": "keyword"}}, "dynamic": "strict"}
    }


def test_mappings_and_settings_replace():
    result = (
        index_builder()
        .mappings({"a": text()})
        .mappings({"b": keyword()})
        .settings({"number_of_shards": 3})
        .settings({"number_of_replicas": 2})
        .build()
    )
    assert result == {
        "mappings": {"properties": {"b": {"type": "keyword"}}},
        "settings": {"number_of_replicas": 2},
    }


def test_aliases_accumulate():
    result = (
        index_builder()
        .alias("products_read")
        .alias("products_active", filter={"term": {"status": "active"}})
        .build()
    )
    assert result == {
        "aliases": {
            "products_read": {},
            "products_active": {"filter": {"term": {"status": "active"}}},
        }
    }


def test_full_index_body(products: MappingsSchema):
    base = index_builder().mappings(products)
    full = base.settings(production_search_settings()).alias("products_read")

    assert "settings" not in base.build()
    assert full.build()["settings"] == {
        "number_of_replicas": 1,
        "refresh_interval": "5s",
    }
    assert full.build()["aliases"] == {"products_read": {}}
