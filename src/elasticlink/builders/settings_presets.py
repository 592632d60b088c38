"""Index settings presets.

Standalone helpers returning plain settings mappings, for
`IndexBuilder.settings()` at creation time or for the `_settings` API later.
A typical ingest cycle applies `fast_ingest_settings()` before a large bulk
load and restores `production_search_settings()` afterwards.
"""

from collections.abc import Mapping
from typing import Any

from elasticlink.types.general import SortDirection


def production_search_settings(**overrides: Any) -> dict[str, Any]:
    """Balanced search settings: one replica and a 5s refresh interval."""
    return {"number_of_replicas": 1, "refresh_interval": "5s", **overrides}


def index_sort_settings(fields: Mapping[str, SortDirection]) -> dict[str, Any]:
    """Index-time sort config from a field -> direction mapping.

    Returns the `index` portion of settings, e.g.

        {
            **production_search_settings(),
            "index": index_sort_settings({"timestamp": "desc"}),
        }
    """
    return {"sort": {"field": list(fields), "order": list(fields.values())}}


def fast_ingest_settings(**overrides: Any) -> dict[str, Any]:
    """Bulk-ingest settings: no replicas, no refresh, async translog.

    `translog` overrides are merged key by key into the translog defaults.
    """
    translog = overrides.pop("translog", None) or {}
    return {
        "number_of_replicas": 0,
        "refresh_interval": "-1",
        "translog": {"durability": "async", "sync_interval": "30s", **translog},
        **overrides,
    }
