from elasticlink.api import suggest
from elasticlink.mapping.schema import MappingsSchema


def test_empty_suggester():
    assert suggest().build() == {"suggest": {}}


def test_suggesters(products: MappingsSchema):
    result = (
        suggest(products)
        .term("spelling", "lapto", field="name", size=3)
        .phrase("phrase_fix", "gamng laptop", field="description")
        .completion("autocomplete", "lap", field="name", skip_duplicates=True)
        .build()
    )
    assert result == {
        "suggest": {
            "spelling": {"text": "lapto", "term": {"field": "name", "size": 3}},
            "phrase_fix": {
                "text": "gamng laptop",
                "phrase": {"field": "description"},
            },
            "autocomplete": {
                "prefix": "lap",
                "completion": {"field": "name", "skip_duplicates": True},
            },
        }
    }


def test_same_name_replaces_entry(products: MappingsSchema):
    result = (
        suggest(products)
        .term("s", "lapto", field="name")
        .completion("s", "lap", field="name")
        .build()
    )
    assert result == {
        "suggest": {"s": {"prefix": "lap", "completion": {"field": "name"}}}
    }
