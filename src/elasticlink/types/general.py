from typing import Annotated, Any, Literal

from pydantic import BeforeValidator

type JsonSerializable = (
    dict[str, JsonSerializable]
    | list[JsonSerializable]
    | str
    | int
    | float
    | bool
    | None
)

LogLevel = Annotated[
    Literal[
        "TRACE",
        "DEBUG",
        "INFO",
        "SUCCESS",
        "WARNING",
        "ERROR",
        "CRITICAL",
    ],
    BeforeValidator(lambda a: str(a).upper()),
]

FieldValidationMode = Annotated[
    Literal["off", "warn", "strict"],
    BeforeValidator(lambda a: str(a).lower()),
]

SortDirection = Literal["asc", "desc"]

# A single query DSL fragment, e.g. {"match": {"name": "laptop"}}
Fragment = dict[str, Any]
