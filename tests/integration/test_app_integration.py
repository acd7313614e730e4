"""
End-to-end tests: a FastAPI app configured with configure_app, serving a
paginated events endpoint from an async in-memory SQLite database.
"""

from contextlib import asynccontextmanager
from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

import fastquery.db.engine as db_engine
from fastquery.api import QueryRequestDependency
from fastquery.config.testing import TestingSettings
from fastquery.db import PaginatedRepository, get_db, metadata
from fastquery.factory import configure_app
from fastquery.pagination import QueryConfig, QueryRequest, decode_cursor


@pytest.fixture
def seed_rows(make_events):
    rows = make_events(35)
    for event in rows[:25]:
        event.name = f"foo gig {event.id:02d}"
    for event in rows[25:30]:
        event.name = f"foo rehearsal {event.id:02d}"
        event.status = "inactive"
    for event in rows[30:]:
        event.name = f"bar night {event.id:02d}"
    return rows


@pytest.fixture
def app(event_model, seed_rows):
    @asynccontextmanager
    async def lifespan(app_):
        async with db_engine.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        async with db_engine.SessionLocal() as session:
            session.add_all(seed_rows)
            await session.commit()
        yield

    app = FastAPI(lifespan=lifespan)
    configure_app(app, TestingSettings())

    config = QueryConfig(
        allowed_filter_fields={"status", "price"},
        allowed_sort_fields={"name", "price", "id", "created_at"},
        searchable_columns=("name", "description"),
    )
    events_query = QueryRequestDependency(config)

    @app.get("/api/events")
    async def list_events(
        query: QueryRequest = Depends(events_query),
        db: AsyncSession = Depends(get_db),
    ):
        repo = PaginatedRepository(event_model, db, config)
        result = await repo.paginate(
            query, serializer=lambda e: {"id": e.id, "name": e.name}
        )
        return result.to_dict()

    @app.get("/api/events/{event_id}")
    async def get_event(event_id: int, db: AsyncSession = Depends(get_db)):
        event = await PaginatedRepository(event_model, db).get_by_id(event_id)
        return {"id": event.id, "name": event.name}

    @app.get("/api/cursors/{token}")
    async def inspect_cursor(token: str):
        return decode_cursor(token).model_dump()

    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def test_offset_end_to_end(client):
    response = client.get(
        "/api/events?type=offset&page=2&page_size=10&sort=-name"
        "&status[eq]=active&search=foo"
    )
    assert response.status_code == 200
    body = response.json()

    assert body["success"] is True
    assert body["pagination"] == {
        "page": 2,
        "page_size": 10,
        "total_items": 25,
        "total_pages": 3,
        "has_next_page": True,
        "has_prev_page": True,
    }
    assert len(body["data"]) == 10
    assert all(item["name"].startswith("foo gig") for item in body["data"])
    # Sorted by name descending: gig 25..16 on page 1, 15..06 on page 2
    assert body["data"][0]["name"] == "foo gig 15"

    next_link = urlsplit(body["links"]["next"])
    params = parse_qs(next_link.query)
    assert next_link.path == "/api/events"
    assert params["page"] == ["3"]
    assert params["page_size"] == ["10"]
    assert params["sort"] == ["-name"]
    assert params["status[eq]"] == ["active"]
    assert params["search"] == ["foo"]

    assert body["applied_filters"] == [
        {"field": "status", "operator": "eq", "value": "active"}
    ]
    assert body["applied_sort"] == [{"field": "name", "direction": "desc"}]


def test_following_next_link(client):
    first = client.get("/api/events?page_size=10&status[eq]=active&search=foo")
    next_link = first.json()["links"]["next"]

    second = client.get(next_link)
    assert second.status_code == 200
    assert second.json()["pagination"]["page"] == 2
    assert second.json()["pagination"]["total_items"] == 25


def test_non_whitelisted_fields_are_echoed_but_ignored(client):
    response = client.get("/api/events?description[eq]=nothing&sort=-description")
    body = response.json()

    assert body["pagination"]["total_items"] == 35
    assert body["applied_filters"][0]["field"] == "description"
    assert body["applied_sort"][0]["field"] == "description"


def test_cursor_end_to_end(client):
    response = client.get("/api/events?type=cursor&page_size=20&sort=id")
    body = response.json()

    assert [item["id"] for item in body["data"]] == list(range(1, 21))
    assert body["pagination"]["has_next_page"] is True
    assert body["pagination"]["count"] == 20
    assert body["meta"] == {"total_items": 35}
    assert set(body["links"]) == {"self", "next"}

    second = client.get(body["links"]["next"]).json()
    assert [item["id"] for item in second["data"]] == list(range(21, 36))
    assert second["pagination"]["has_next_page"] is False
    assert second["pagination"]["has_prev_page"] is True
    assert "next" not in second["links"]


def test_cursor_links_without_sort_reach_every_row(client):
    seen = []
    link = "/api/events?type=cursor&page_size=15"
    while link:
        body = client.get(link).json()
        seen.extend(item["id"] for item in body["data"])
        link = body["links"].get("next")

    assert seen == list(range(1, 36))


def test_search_fields_survive_link_following(client):
    first = client.get(
        "/api/events?page_size=2&search=bar&search_fields=name"
    ).json()
    second = client.get(first["links"]["next"]).json()

    assert first["pagination"]["total_items"] == 5
    assert second["pagination"]["total_items"] == 5
    assert all(item["name"].startswith("bar night") for item in second["data"])


def test_malformed_cursor_is_not_an_error(client):
    response = client.get("/api/events?type=cursor&cursor=not-base64!!&sort=id")
    assert response.status_code == 200
    assert response.json()["data"][0]["id"] == 1


def test_not_found_uses_error_envelope(client):
    response = client.get("/api/events/999")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["code"] == "NOT_FOUND"


def test_invalid_cursor_error_envelope(client):
    response = client.get("/api/cursors/garbage")
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INVALID_CURSOR"
