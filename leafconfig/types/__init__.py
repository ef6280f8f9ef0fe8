"""共享类型别名."""

from leafconfig.types.structures import (
    ContextDict,
    ContextValue,
    FieldErrorDict,
    JsonDict,
    JsonValue,
    LoggerExtra,
    RouteSafetyOptions,
    ScalarValue,
    StoredValues,
    StructlogEventDict,
    SubmittedValues,
)

__all__ = [
    "ContextDict",
    "ContextValue",
    "FieldErrorDict",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "RouteSafetyOptions",
    "ScalarValue",
    "StoredValues",
    "StructlogEventDict",
    "SubmittedValues",
]
