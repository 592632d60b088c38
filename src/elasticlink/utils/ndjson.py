from collections.abc import Iterable, Sequence
from typing import Any

import orjson


def dumps_line(obj: Any) -> str:
    """Serialize one object as a compact single JSON line."""
    return orjson.dumps(obj).decode()


def render_ndjson(items: Iterable[Any]) -> str:
    """Render objects as newline-delimited JSON with a trailing newline.

    An empty iterable renders as a lone "\\n".
    """
    return "\n".join(dumps_line(item) for item in items) + "\n"


def flatten_pairs(pairs: Sequence[tuple[Any, Any]], *, skip_none: bool) -> list[Any]:
    """Flatten (header, body) pairs into one alternating list.

    With `skip_none`, a `None` body contributes no entry (bulk deletes).
    """
    flat: list[Any] = []
    for header, body in pairs:
        flat.append(header)
        if body is None and skip_none:
            continue
        flat.append(body)
    return flat
