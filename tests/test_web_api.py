from datetime import date

from library_app.models.borrow_request import BorrowRequest


def test_cart_add_show_remove(client, make_book):
    book = make_book(title="Dune")

    res = client.post("/web/api/borrow-cart", json={"book_id": book.id, "quantity": 2})
    assert res.status_code == 201
    client.post("/web/api/borrow-cart", json={"book_id": book.id})

    data = client.get("/web/api/borrow-cart").get_json()["data"]
    assert data["total_quantity"] == 3
    assert data["items"] == [{"book_id": book.id, "quantity": 3, "title": "Dune", "available_quantity": 3}]

    assert client.delete(f"/web/api/borrow-cart/{book.id}").status_code == 200
    assert client.delete(f"/web/api/borrow-cart/{book.id}").status_code == 404


def test_cart_add_unknown_book(client):
    assert client.post("/web/api/borrow-cart", json={"book_id": 42}).status_code == 404
    assert client.post("/web/api/borrow-cart", json={}).status_code == 400


def test_cart_add_bad_quantity(client, make_book):
    book = make_book()
    res = client.post("/web/api/borrow-cart", json={"book_id": book.id, "quantity": -2})
    assert res.status_code == 422
    assert "quantity" in res.get_json()["errors"]


def test_cart_add_rejects_fractional_and_boolean_quantity(client, make_book):
    book = make_book()
    for quantity in (2.7, True):
        res = client.post("/web/api/borrow-cart", json={"book_id": book.id, "quantity": quantity})
        assert res.status_code == 422
        assert res.get_json()["errors"] == {"quantity": ["must be an integer"]}
    assert client.get("/web/api/borrow-cart").get_json()["data"]["items"] == []


def test_checkout_requires_sign_in(client, make_book):
    book = make_book()
    client.post("/web/api/borrow-cart", json={"book_id": book.id})
    assert client.post("/web/api/borrow-cart/checkout").status_code == 401


def test_checkout_clears_the_cart(client, login, make_user, make_book, cart):
    user = make_user()
    book = make_book(total_quantity=2)
    login(user)
    client.post("/web/api/borrow-cart", json={"book_id": book.id, "quantity": 2})

    res = client.post("/web/api/borrow-cart/checkout", json={})
    assert res.status_code == 201
    body = res.get_json()["data"]
    assert body["items"][0]["quantity"] == 2
    assert cart() is None
    assert book.available_quantity == 0


def test_checkout_conflict_keeps_the_cart(client, login, make_user, make_book, cart):
    book = make_book(total_quantity=1)
    login(make_user())
    client.post("/web/api/borrow-cart", json={"book_id": book.id, "quantity": 2})

    res = client.post("/web/api/borrow-cart/checkout")
    assert res.status_code == 409
    assert cart() == [{"book_id": book.id, "quantity": 2}]
    assert BorrowRequest.query.count() == 0


def test_checkout_of_an_empty_cart(client, login, make_user):
    login(make_user())
    res = client.post("/web/api/borrow-cart/checkout")
    assert res.status_code == 422


def test_checkout_with_bad_dates(client, login, make_user, make_book):
    book = make_book()
    login(make_user())
    client.post("/web/api/borrow-cart", json={"book_id": book.id})
    res = client.post("/web/api/borrow-cart/checkout", json={"start_date": "tomorrow"})
    assert res.status_code == 422
    assert "start_date" in res.get_json()["errors"]


def test_my_borrow_requests(client, login, make_user, make_book, make_borrow_request):
    user = make_user()
    other = make_user()
    book = make_book()
    make_borrow_request(user, [(book, 1)], date(2024, 5, 1))
    make_borrow_request(other, [(book, 1)], date(2024, 5, 2))
    login(user)

    data = client.get("/web/api/borrow-requests/my").get_json()["data"]
    assert [r["user_id"] for r in data] == [user.id]
    assert data[0]["request_date"] == "2024-05-01"


def test_most_borrowed(client, make_user, make_book, make_borrow_request):
    user = make_user()
    dune = make_book(title="Dune")
    emma = make_book(title="Emma")
    make_borrow_request(user, [(dune, 1), (emma, 2)], date(2024, 5, 1))
    make_borrow_request(user, [(dune, 5)], date(2023, 5, 1))

    data = client.get("/web/api/books/most-borrowed?year=2024&month=5").get_json()["data"]
    assert [(b["title"], b["borrow_count"]) for b in data] == [("Emma", 2), ("Dune", 1)]

    data = client.get("/web/api/books/most-borrowed").get_json()["data"]
    assert [b["title"] for b in data] == ["Dune", "Emma"]


def test_most_borrowed_with_invalid_month(client):
    res = client.get("/web/api/books/most-borrowed?month=13")
    assert res.status_code == 422
    assert res.get_json()["success"] is False


def test_search_api(client, make_book):
    make_book(title="Dune")
    res = client.get("/web/api/books/search?q=dune&search_type=nonsense")
    body = res.get_json()
    assert body["search_type"] == "all"
    assert [b["title"] for b in body["data"]] == ["Dune"]
