import pytest

from elasticlink.api import query
from elasticlink.builders.clause import ClauseBuilder
from elasticlink.config.general import CONFIG
from elasticlink.mapping.fields import keyword, object_, text
from elasticlink.mapping.schema import (
    FieldGroup,
    FieldTypeError,
    MappingsSchema,
    check_field,
    mappings,
)


def test_field_types_are_flat_top_level(listings: MappingsSchema):
    assert listings.field_types == {
        "address": "text",
        "property_type": "keyword",
        "list_price": "float",
        "bedrooms": "integer",
        "location": "geo_point",
    }


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("name", "text"),
        ("name.keyword", "keyword"),
        ("variants", "nested"),
        ("variants.color", "keyword"),
        ("missing", None),
        ("name.missing", None),
        ("price.keyword", None),
    ],
)
def test_field_type_resolves_dotted_paths(
    products: MappingsSchema, path: str, expected: str | None
):
    assert products.field_type(path) == expected


def test_untyped_object_resolves_as_object():
    schema = mappings({"meta": {"properties": {"tag": "keyword"}}})
    assert schema.field_type("meta") == "object"
    assert schema.field_type("meta.tag") == "keyword"


def test_object_helper_fields():
    schema = mappings({"owner": object_({"name": text(), "id": keyword()})})
    assert schema.field_type("owner.id") == "keyword"


def test_warn_mode_logs_and_continues(
    products: MappingsSchema, log_messages: list[str]
):
    body = query(products).term("colour", "red").build()

    assert body == {"query": {"term": {"colour": "red"}}}
    assert any(
        m.startswith("WARNING|") and "Unknown field 'colour' used in term" in m
        for m in log_messages
    )


def test_warn_mode_wrong_group(products: MappingsSchema, log_messages: list[str]):
    ClauseBuilder(products).match("price", "cheap")
    assert any(
        "Field 'price' of type 'float' cannot be used in match" in m
        for m in log_messages
    )


@pytest.mark.usefixtures("strict_fields")
def test_strict_mode_raises(products: MappingsSchema):
    with pytest.raises(FieldTypeError, match="Unknown field 'colour'") as exc_info:
        query(products).term("colour", "red")
    assert exc_info.value.field_name == "colour"

    with pytest.raises(FieldTypeError, match="expects a geo_point field"):
        query(products).geo_distance("price", {"lat": 0, "lon": 0}, distance="1km")


@pytest.mark.usefixtures("strict_fields")
def test_strict_mode_accepts_valid_fields(products: MappingsSchema):
    body = (
        query(products)
        .bool()
        .must(lambda q: q.match("name", "laptop"))
        .filter(lambda q: q.term("name.keyword", "Laptop Pro"))
        .filter(lambda q: q.range("created_at", gte="now-1d"))
        .sort("_score", "desc")
        .sort("price")
        .source(["name", "variants.*"])
        .build()
    )
    assert body["sort"] == [{"_score": "desc"}, {"price": "asc"}]


@pytest.mark.usefixtures("strict_fields")
def test_builders_without_schema_never_validate():
    assert ClauseBuilder().term("anything", 1) == {"term": {"anything": 1}}


def test_off_mode_skips_checks(
    products: MappingsSchema,
    monkeypatch: pytest.MonkeyPatch,
    log_messages: list[str],
):
    monkeypatch.setattr(CONFIG, "field_validation", "off")
    check_field(products, "colour", FieldGroup.TERMABLE, "term")
    assert not any(m.startswith("WARNING|") for m in log_messages)
