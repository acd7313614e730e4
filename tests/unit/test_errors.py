"""
Unit tests for the errors module (exceptions.py, handlers.py, manager.py).

Covers:
- Instantiation and attributes of all custom exception classes (parametrized)
- FastAPI integration and error handler registration
- Error envelope format for application, validation and unhandled errors
"""
import pytest
from fastapi import FastAPI, Query
from fastapi.testclient import TestClient
from pydantic import BaseModel

from fastquery.config import BaseAppSettings
from fastquery.errors.exceptions import (
    AppError,
    BadRequestError,
    DBError,
    InvalidCursorError,
    NotFoundError,
    ValidationError,
)
from fastquery.errors.handlers import create_error_response, validation_error_info
from fastquery.errors.manager import setup_errors


@pytest.mark.parametrize(
    "exc_cls,kwargs,expected",
    [
        (
            AppError,
            {},
            {
                "message": "An unexpected error occurred",
                "code": "ERROR",
                "status_code": 500,
            },
        ),
        (
            AppError,
            {"message": "Custom", "code": "CUSTOM", "status_code": 418},
            {"message": "Custom", "code": "CUSTOM", "status_code": 418},
        ),
        (
            ValidationError,
            {"fields": [{"field": "page", "message": "invalid"}]},
            {"status_code": 400, "code": "VALIDATION_ERROR"},
        ),
        (NotFoundError, {}, {"status_code": 404, "code": "NOT_FOUND"}),
        (BadRequestError, {}, {"status_code": 400, "code": "BAD_REQUEST"}),
        (InvalidCursorError, {}, {"status_code": 400, "code": "INVALID_CURSOR"}),
        (DBError, {}, {"status_code": 500, "code": "DB_ERROR"}),
    ],
)
def test_exception_attributes(exc_cls, kwargs, expected):
    """Test attributes of all custom exception classes."""
    err = exc_cls(**kwargs)
    for key, value in expected.items():
        assert getattr(err, key) == value


def test_not_found_error_with_resource():
    err = NotFoundError(resource_type="Event", resource_id=123)
    assert err.message == "Event with id '123' not found"
    assert err.details["resource_type"] == "Event"
    assert err.details["resource_id"] == 123


def test_validation_error_fields_in_details():
    err = ValidationError(fields=[{"field": "page", "message": "bad"}])
    assert err.details["fields"] == [{"field": "page", "message": "bad"}]


def test_validation_error_info_strips_locations():
    errors_data = [
        {"loc": ("query", "page_size"), "msg": "err1"},
        {"loc": ("body", "filters", 0, "field"), "msg": "err2"},
        {"loc": ("name",), "msg": "err3"},
    ]
    errors = validation_error_info(errors_data, strip=("query", "body"))
    assert [e.field for e in errors] == ["page_size", "filters.0.field", "name"]
    assert all(e.code == "VALIDATION_ERROR" for e in errors)


def test_validation_error_info_keeps_full_path():
    errors = validation_error_info([{"loc": ("query", "page")}])
    assert errors[0].field == "query.page"
    assert errors[0].message == "Validation error"


def test_create_error_response_defaults():
    response = create_error_response("Broken", code="BROKEN")
    assert response.success is False
    assert response.errors[0].code == "BROKEN"
    assert response.metadata.timestamp is not None


class Item(BaseModel):
    name: str


@pytest.fixture
def app():
    app = FastAPI()
    setup_errors(app, BaseAppSettings(DEBUG=True))

    @app.get("/cursor")
    async def bad_cursor():
        raise InvalidCursorError("Invalid cursor format", details={"cursor": "x"})

    @app.get("/fields")
    async def bad_fields():
        raise ValidationError(fields=[{"field": "page_size", "message": "too big"}])

    @app.get("/typed")
    async def typed(page: int = Query(...)):
        return {"page": page}

    @app.get("/model")
    async def model():
        return Item.model_validate({})

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def test_app_error_handler(client):
    response = client.get("/cursor")
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Invalid cursor format"
    assert body["errors"][0]["code"] == "INVALID_CURSOR"
    assert body["errors"][0]["details"] == {"cursor": "x"}


def test_app_error_handler_with_fields(client):
    body = client.get("/fields").json()
    assert body["errors"] == [
        {
            "code": "VALIDATION_ERROR",
            "message": "too big",
            "field": "page_size",
            "details": None,
        }
    ]


def test_request_validation_handler(client):
    response = client.get("/typed?page=abc")
    assert response.status_code == 422
    body = response.json()
    assert body["errors"][0]["field"] == "page"
    assert body["errors"][0]["code"] == "VALIDATION_ERROR"


def test_pydantic_validation_handler(client):
    response = client.get("/model")
    assert response.status_code == 422
    assert response.json()["message"] == "Data validation error"


def test_unhandled_exception_handler(client):
    response = client.get("/boom")
    assert response.status_code == 500
    body = response.json()
    assert body["errors"][0]["code"] == "INTERNAL_ERROR"
    assert body["errors"][0]["details"] == {"exception": "kaboom"}


def test_unhandled_exception_hides_details_without_debug():
    app = FastAPI()
    setup_errors(app, BaseAppSettings(DEBUG=False))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret")

    response = TestClient(app, raise_server_exceptions=False).get("/boom")
    assert response.status_code == 500
    assert response.json()["errors"][0]["details"] is None
