import orjson

from elasticlink.api import bulk


def test_empty_bulk_renders_single_newline():
    assert bulk().build() == "\n"
    assert bulk().build_array() == []


def test_index_then_delete():
    doc = {"name": "Laptop", "price": 999}
    builder = bulk().index(doc, _index="products", _id="1").delete(
        _index="products", _id="2"
    )

    assert builder.build() == (
        '{"index":{"_index":"products","_id":"1"}}\n'
        '{"name":"Laptop","price":999}\n'
        '{"delete":{"_index":"products","_id":"2"}}\n'
    )
    assert builder.build_array() == [
        {"index": {"_index": "products", "_id": "1"}},
        doc,
        {"delete": {"_index": "products", "_id": "2"}},
    ]


def test_build_renders_build_array():
    builder = (
        bulk()
        .create({"name": "Mouse"}, _index="products", _id="3")
        .update(_index="products", _id="4", doc={"price": 5})
    )
    lines = builder.build().splitlines()
    assert [orjson.loads(line) for line in lines] == builder.build_array()


def test_update_splits_header_and_body():
    builder = bulk().update(
        _index="products",
        _id="1",
        routing="shard-a",
        retry_on_conflict=3,
        doc={"price": 10},
        upsert={"price": 1},
        doc_as_upsert=False,
    )
    assert builder.build_array() == [
        {
            "update": {
                "_index": "products",
                "_id": "1",
                "routing": "shard-a",
                "retry_on_conflict": 3,
            }
        },
        {"doc": {"price": 10}, "upsert": {"price": 1}, "doc_as_upsert": False},
    ]


def test_update_with_script():
    script = {"source": "ctx._source.stock -= 1", "lang": "painless"}
    builder = bulk().update(_index="products", _id="1", script=script)
    assert builder.build_array() == [
        {"update": {"_index": "products", "_id": "1"}},
        {"script": script},
    ]


def test_scripted_upsert_keeps_empty_upsert():
    script = {"source": "ctx._source.views += 1", "lang": "painless"}
    builder = bulk().update(_index="products", _id="1", script=script, upsert={})
    assert builder.build_array()[1] == {"script": script, "upsert": {}}


def test_update_keeps_empty_doc():
    builder = bulk().update(_index="products", _id="1", doc={}, doc_as_upsert=True)
    assert builder.build_array()[1] == {"doc": {}, "doc_as_upsert": True}


def test_operations_are_immutable():
    base = bulk().index({"a": 1}, _index="x")
    base.delete(_index="x", _id="1")
    assert len(base.build_array()) == 2


def test_build_logs_trace(log_messages: list[str]):
    bulk().index({"a": 1}, _index="x").build()
    assert any("Rendered 1 bulk operations" in m for m in log_messages)
