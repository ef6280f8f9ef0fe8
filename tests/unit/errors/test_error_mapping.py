import pytest
from werkzeug.exceptions import MethodNotAllowed, NotFound

from leafconfig.errors import (
    AppError,
    DatabaseError,
    NotFoundError,
    StorageError,
    SystemError,
    UnknownFieldError,
    UnknownSchemaError,
    ValidationError,
    map_exception_to_status,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("error", "status"),
    [
        (ValidationError(), 400),
        (UnknownSchemaError("climate"), 404),
        (UnknownFieldError("battery", "turbo"), 404),
        (StorageError(), 500),
        (SystemError(), 500),
        (NotFound(), 404),
        (MethodNotAllowed(), 405),
        (RuntimeError("boom"), 500),
    ],
)
def test_map_exception_to_status(error: Exception, status: int) -> None:
    assert map_exception_to_status(error) == status


@pytest.mark.unit
def test_unknown_schema_message_names_schema() -> None:
    error = UnknownSchemaError("climate")

    assert isinstance(error, NotFoundError)
    assert error.message_key == "UNKNOWN_SCHEMA"
    assert "climate" in error.message


@pytest.mark.unit
def test_storage_error_is_database_error_with_default_message() -> None:
    error = StorageError()

    assert isinstance(error, DatabaseError)
    assert error.message_key == "STORAGE_WRITE_FAILED"
    assert error.message == "参数保存失败,请稍后再试"
    assert error.recoverable is False


@pytest.mark.unit
def test_app_error_message_falls_back_to_internal_error() -> None:
    error = AppError(message_key="NO_SUCH_KEY")

    assert error.message == "服务器内部错误"
    assert error.status_code == 500
