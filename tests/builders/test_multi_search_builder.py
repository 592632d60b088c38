from elasticlink.api import msearch, query
from elasticlink.mapping.schema import MappingsSchema


def test_empty_msearch_renders_single_newline(products: MappingsSchema):
    assert msearch(products).build() == "\n"
    assert msearch(products).build_array() == []


def test_add_query_defaults_header(products: MappingsSchema):
    q1 = query(products).match("name", "laptop").build()
    q2 = query(products).term("category", "electronics").build()

    result = msearch(products).add_query(q1).add_query(q2, {"index": "products"})

    assert result.build() == (
        "{}\n"
        '{"query":{"match":{"name":"laptop"}}}\n'
        '{"index":"products"}\n'
        '{"query":{"term":{"category":"electronics"}}}\n'
    )


def test_add_request(products: MappingsSchema):
    body = query(products).match_all().build()

    with_header = msearch(products).add({"header": {"index": "products"}, "body": body})
    without_header = msearch(products).add({"body": body})

    assert with_header.build_array() == [
        {"index": "products"},
        {"query": {"match_all": {}}},
    ]
    assert without_header.build_array() == [{}, {"query": {"match_all": {}}}]


def test_none_header_becomes_empty(products: MappingsSchema):
    body = query(products).match_all().build()
    result = msearch(products).add({"header": None, "body": body})
    assert result.build() == '{}\n{"query":{"match_all":{}}}\n'
