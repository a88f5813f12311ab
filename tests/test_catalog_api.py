import pytest
from sqlalchemy.exc import SQLAlchemyError

from library_app.extensions import db
from library_app.models.book import Book
from library_app.models.publisher import Publisher
from library_app.repositories.book_repo import BookRepo


@pytest.fixture
def admin_headers(make_user, jwt_headers):
    return jwt_headers(make_user(role="admin"))


def test_lists_are_public(client, make_book, make_category):
    make_book(title="Dune")
    make_category("Fantasy")

    assert [b["title"] for b in client.get("/api/books").get_json()["data"]] == ["Dune"]
    assert len(client.get("/api/publishers").get_json()["data"]) == 1
    assert client.get("/api/categories").get_json()["data"][0]["name"] == "Fantasy"


def test_get_book_with_rating(client, make_book):
    book = make_book()
    data = client.get(f"/api/books/{book.id}").get_json()["data"]
    assert data["average_rating"] == 0
    assert client.get("/api/books/999").status_code == 404


def test_writes_need_an_admin_token(client, make_user, jwt_headers):
    assert client.post("/api/categories", json={"name": "Poetry"}).status_code == 401
    member = jwt_headers(make_user())
    assert client.post("/api/categories", json={"name": "Poetry"}, headers=member).status_code == 403


def test_create_book(client, admin_headers, make_author, make_publisher, make_category):
    author = make_author()
    publisher = make_publisher()
    fantasy = make_category("Fantasy")

    res = client.post("/api/books", headers=admin_headers, json={
        "title": "The Hobbit",
        "author_id": author.id,
        "publisher_id": publisher.id,
        "category_ids": [fantasy.id],
        "total_quantity": 4,
        "publication_year": 1937,
    })
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert (data["available_quantity"], data["borrow_count"]) == (4, 0)
    assert data["categories"] == ["Fantasy"]


def test_create_invalid_book(client, admin_headers, make_publisher):
    res = client.post("/api/books", headers=admin_headers, json={
        "title": "", "publisher_id": make_publisher().id, "total_quantity": 1,
    })
    assert res.status_code == 422
    assert set(res.get_json()["errors"]) == {"title", "author"}
    assert Book.query.count() == 0


def test_update_and_delete_book(client, admin_headers, make_book):
    book = make_book(total_quantity=3)

    res = client.put(f"/api/books/{book.id}", headers=admin_headers, json={"available_quantity": 5})
    assert res.status_code == 422
    assert "available_quantity" in res.get_json()["errors"]
    assert client.get(f"/api/books/{book.id}").get_json()["data"]["available_quantity"] == 3
    res = client.put(f"/api/books/{book.id}", headers=admin_headers, json={"title": "Renamed"})
    assert res.get_json()["data"]["title"] == "Renamed"

    assert client.delete(f"/api/books/{book.id}", headers=admin_headers).status_code == 200
    assert Book.query.count() == 0


def test_publisher_lifecycle(client, admin_headers, make_book):
    res = client.post("/api/publishers", headers=admin_headers, json={"name": "Tor", "address": "New York"})
    assert res.status_code == 201
    publisher_id = res.get_json()["data"]["id"]

    res = client.post("/api/publishers", headers=admin_headers, json={"name": "Tor"})
    assert res.status_code == 422

    res = client.put(f"/api/publishers/{publisher_id}", headers=admin_headers, json={"address": "Manhattan"})
    assert res.get_json()["data"]["address"] == "Manhattan"

    make_book(publisher=db.session.get(Publisher, publisher_id))
    assert client.delete(f"/api/publishers/{publisher_id}", headers=admin_headers).status_code == 409


def test_category_lifecycle(client, admin_headers):
    res = client.post("/api/categories", headers=admin_headers, json={"name": "Poetry"})
    category_id = res.get_json()["data"]["id"]
    assert client.post("/api/categories", headers=admin_headers, json={"name": "Poetry"}).status_code == 422
    assert client.delete(f"/api/categories/{category_id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/categories/{category_id}", headers=admin_headers).status_code == 404


def test_database_failure_is_a_server_error(client, admin_headers, make_book, monkeypatch):
    book = make_book()

    def refuse(*args, **kwargs):
        raise SQLAlchemyError("refused")

    monkeypatch.setattr(BookRepo, "delete", staticmethod(refuse))
    res = client.delete(f"/api/books/{book.id}", headers=admin_headers)
    assert res.status_code == 500
    assert res.get_json() == {"success": False, "message": "Book could not be deleted"}
    assert Book.query.count() == 1
