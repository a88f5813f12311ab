import itertools

import pytest

from library_app import create_app
from library_app.config import TestConfig
from library_app.extensions import db
from library_app.models.author import Author
from library_app.models.book import Book
from library_app.models.borrow_request import BorrowRequest, BorrowRequestItem
from library_app.models.category import Category
from library_app.models.publisher import Publisher
from library_app.models.user import User

PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path, request):
    # one sqlite file per test
    db_file = tmp_path / f"test_{request.node.name}.db"
    app = create_app(TestConfig, {"SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}"})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(name=None, email=None, password=PASSWORD, role="member", **kwargs):
        n = next(counter)
        user = User(name=name or f"Reader {n}", email=email or f"reader{n}@example.com", role=role, **kwargs)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_author(app):
    counter = itertools.count(1)

    def _make(name=None, **kwargs):
        author = Author(name=name or f"Author {next(counter)}", **kwargs)
        db.session.add(author)
        db.session.commit()
        return author

    return _make


@pytest.fixture
def make_publisher(app):
    counter = itertools.count(1)

    def _make(name=None, **kwargs):
        publisher = Publisher(name=name or f"Publisher {next(counter)}", **kwargs)
        db.session.add(publisher)
        db.session.commit()
        return publisher

    return _make


@pytest.fixture
def make_category(app):
    def _make(name):
        category = Category(name=name)
        db.session.add(category)
        db.session.commit()
        return category

    return _make


@pytest.fixture
def make_book(app, make_author, make_publisher):
    counter = itertools.count(1)

    def _make(title=None, author=None, publisher=None, total_quantity=3, categories=(), **kwargs):
        book = Book(
            title=title or f"Book {next(counter)}",
            author=author or make_author(),
            publisher=publisher or make_publisher(),
            total_quantity=total_quantity,
            **kwargs,
        )
        book.categories = list(categories)
        db.session.add(book)
        db.session.commit()
        return book

    return _make


@pytest.fixture
def make_borrow_request(app):
    """Persist a borrow request directly, bypassing stock reservation."""

    def _make(user, lines, request_date, start_date=None, end_date=None):
        borrow_request = BorrowRequest(
            user=user,
            request_date=request_date,
            start_date=start_date or request_date,
            end_date=end_date or request_date,
        )
        for book, quantity in lines:
            borrow_request.items.append(BorrowRequestItem(book=book, quantity=quantity))
        db.session.add(borrow_request)
        db.session.commit()
        return borrow_request

    return _make


@pytest.fixture
def login(client):
    def _login(user, password=PASSWORD):
        return client.post("/users/sign_in", data={"email": user.email, "password": password})

    return _login


@pytest.fixture
def flashes(client):
    def _flashes():
        with client.session_transaction() as session:
            return [tuple(item) for item in session.get("_flashes", [])]

    return _flashes


@pytest.fixture
def cart(client):
    def _cart():
        with client.session_transaction() as session:
            return session.get("borrow_cart")

    return _cart


@pytest.fixture
def jwt_headers(client):
    def _headers(user, password=PASSWORD):
        res = client.post("/auth/login", json={"email": user.email, "password": password})
        return {"Authorization": f"Bearer {res.get_json()['access_token']}"}

    return _headers
