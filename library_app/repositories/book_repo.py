from enum import Enum

from sqlalchemy import extract, func, or_

from library_app.models.author import Author
from library_app.models.book import Book
from library_app.models.borrow_request import BorrowRequest, BorrowRequestItem
from library_app.models.category import Category
from library_app.models.favorite import Favorite
from library_app.models.publisher import Publisher
from library_app.extensions import db


class SearchType(str, Enum):
    TITLE = "title"
    AUTHOR = "author"
    PUBLISHER = "publisher"
    CATEGORY = "category"
    ALL = "all"

    @classmethod
    def normalize(cls, value) -> "SearchType":
        """Map any input onto a search type; unknown values fall back to ALL."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.ALL


class BookRepo:
    @staticmethod
    def list_all():
        return Book.query.order_by(Book.id.desc()).all()

    @staticmethod
    def recent(limit: int = 10):
        return Book.recent().limit(limit).all()

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        db.session.commit()
        return book

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(book: Book):
        # favorites point at books without a foreign key
        Favorite.query.filter_by(favorable_type="Book", favorable_id=book.id).delete()
        db.session.delete(book)
        db.session.commit()

    @staticmethod
    def search(query: str, search_type=SearchType.ALL):
        term = (query or "").strip()
        if not term:
            return []
        search_type = SearchType.normalize(search_type)

        q = (Book.query
             .outerjoin(Author, Book.author_id == Author.id)
             .outerjoin(Publisher, Book.publisher_id == Publisher.id))

        # % and _ in the term match literally
        conditions = {
            SearchType.TITLE: Book.title.icontains(term, autoescape=True),
            SearchType.AUTHOR: Author.name.icontains(term, autoescape=True),
            SearchType.PUBLISHER: Publisher.name.icontains(term, autoescape=True),
            SearchType.CATEGORY: Book.categories.any(Category.name.icontains(term, autoescape=True)),
        }
        if search_type is SearchType.ALL:
            q = q.filter(or_(*conditions.values()))
        else:
            q = q.filter(conditions[search_type])

        return q.order_by(Book.title.asc(), Book.id.asc()).all()

    @staticmethod
    def most_borrowed(year: int = None, month: int = None, limit: int = None):
        """Books ranked by borrowed quantity within an optional year/month window.

        Returns ``(Book, borrow_count)`` rows; ``borrow_count`` is the sum of
        item quantities of requests whose ``request_date`` is in the window.
        """
        totals = (db.session.query(
                      BorrowRequestItem.book_id.label("book_id"),
                      func.sum(BorrowRequestItem.quantity).label("borrow_count"))
                  .join(BorrowRequest, BorrowRequest.id == BorrowRequestItem.borrow_request_id))

        if year is not None:
            totals = totals.filter(extract("year", BorrowRequest.request_date) == year)
        if month is not None:
            totals = totals.filter(extract("month", BorrowRequest.request_date) == month)

        totals = totals.group_by(BorrowRequestItem.book_id).subquery()

        q = (db.session.query(Book, totals.c.borrow_count)
             .join(totals, totals.c.book_id == Book.id)
             .order_by(totals.c.borrow_count.desc(), Book.id.asc()))
        if limit:
            q = q.limit(limit)
        return [(book, int(count)) for book, count in q.all()]

    @staticmethod
    def rollback():
        db.session.rollback()
