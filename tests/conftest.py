"""
Shared schemas and logging fixtures for builder tests
"""

from collections.abc import Iterator

import pytest
from loguru import logger

from elasticlink.config.general import CONFIG
from elasticlink.mapping.fields import (
    date,
    dense_vector,
    float_,
    geo_point,
    integer,
    keyword,
    nested,
    text,
)
from elasticlink.mapping.schema import MappingsSchema, mappings


@pytest.fixture
def products() -> MappingsSchema:
    return mappings(
        {
            "name": text(fields={"keyword": keyword()}),
            "description": text(),
            "category": keyword(),
            "status": keyword(),
            "price": float_(),
            "stock": integer(),
            "created_at": date(),
            "embedding": dense_vector(dims=3),
            "variants": nested({"sku": "keyword", "color": "keyword"}),
        }
    )


@pytest.fixture
def listings() -> MappingsSchema:
    return mappings(
        {
            "address": text(),
            "property_type": keyword(),
            "list_price": float_(),
            "bedrooms": integer(),
            "location": geo_point(),
        }
    )


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, format="{level}|{message}", level="TRACE")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def strict_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(CONFIG, "field_validation", "strict")
