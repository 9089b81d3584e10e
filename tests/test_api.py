import pytest
from fastapi.testclient import TestClient

from library_tracker.api import create_app
from library_tracker.config import settings

HEADERS = {"X-API-Key": settings.api_key}


@pytest.fixture
def client(lib):
    app = create_app(lib)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["total_items"] == 0


def test_add_and_list_items(client):
    response = client.post("/items/books", headers=HEADERS, json={"id": "B1", "title": "Dune"})
    assert response.status_code == 201
    assert response.json()["title"] == "Dune"

    response = client.post("/items/magazines", headers=HEADERS, json={"id": "M1", "issue": "May"})
    assert response.status_code == 201

    items = client.get("/items").json()
    assert [item["id"] for item in items] == ["B1", "M1"]
    assert items[1]["kind"] == "Magazine"


def test_get_item_is_case_insensitive(client):
    client.post("/items/books", headers=HEADERS, json={"id": "B1", "title": "Dune"})
    assert client.get("/items/b1").json()["id"] == "B1"
    assert client.get("/items/zzz").status_code == 404


def test_borrow_and_return(client):
    client.post("/items/books", headers=HEADERS, json={"id": "B1", "title": "Dune"})

    response = client.post("/items/B1/borrow", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["due_date"] == "2024-02-12"

    response = client.post("/items/B1/borrow", headers=HEADERS)
    assert response.status_code == 409
    assert response.json()["detail"] == "Item is not available."

    response = client.post("/items/B1/return", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["available"] is True

    response = client.post("/items/B1/return", headers=HEADERS)
    assert response.status_code == 409
    assert response.json()["detail"] == "Item is already available."


def test_borrow_unknown_item(client):
    response = client.post("/items/nope/borrow", headers=HEADERS)
    assert response.status_code == 404
    assert response.json()["detail"] == "Item not found."


def test_users_and_limits(client):
    response = client.post("/users", headers=HEADERS, json={"name": "Bob", "kind": "Alien"})
    assert response.status_code == 400
    assert client.get("/users").json() == []

    response = client.post("/users", headers=HEADERS, json={"name": "Alice", "kind": "Guest"})
    assert response.status_code == 201
    assert response.json()["limit"] == 1

    client.post("/items/books", headers=HEADERS, json={"id": "B1", "title": "Dune"})
    client.post("/items/books", headers=HEADERS, json={"id": "B2", "title": "Emma"})

    response = client.post("/users/Alice/borrow/B1", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["user"] == "Alice"

    response = client.post("/users/Alice/borrow/B2", headers=HEADERS)
    assert response.status_code == 409
    assert response.json()["detail"] == "Borrowing limit reached or item unavailable."

    assert client.get("/users").json()[0]["items"] == ["B1"]

    response = client.post("/users/Alice/return/B1", headers=HEADERS)
    assert response.status_code == 200
    assert client.get("/users").json()[0]["borrowed"] == 0

    assert client.post("/users/Ghost/borrow/B1", headers=HEADERS).status_code == 404


def test_mutations_require_valid_api_key(client):
    response = client.post("/items/books", headers={"X-API-Key": "invalid-key"}, json={"id": "B1", "title": "Dune"})
    assert response.status_code == 403
    assert client.get("/items").json() == []
