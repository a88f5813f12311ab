from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import NotFoundError, PersistenceError, ValidationError
from library_app.extensions import db
from library_app.models.book import Book
from library_app.repositories.author_repo import AuthorRepo
from library_app.repositories.book_repo import BookRepo, SearchType
from library_app.repositories.catalog_repo import CategoryRepo, PublisherRepo
from library_app.utils.validation import ensure_valid, parse_int

TEXT_FIELDS = ("title", "description")
INT_FIELDS = ("total_quantity", "available_quantity", "publication_year")


class BookService:
    @staticmethod
    def list_books():
        return BookRepo.list_all()

    @staticmethod
    def recent_books(limit: int = 10):
        return BookRepo.recent(limit)

    @staticmethod
    def related_books(book: Book, limit: int = 4):
        return Book.by_author(book.author_id).filter(Book.id != book.id).order_by(Book.id.desc()).limit(limit).all()

    @staticmethod
    def get_book(book_id: int):
        book = BookRepo.get(book_id)
        if not book:
            raise NotFoundError("Book not found")
        return book

    @staticmethod
    def normalize_search_type(value) -> SearchType:
        return SearchType.normalize(value)

    @staticmethod
    def search(query: str, search_type=None):
        """Empty query lists every book; otherwise match on the chosen field."""
        search_type = SearchType.normalize(search_type)
        if not (query or "").strip():
            return Book.recent().all()
        return BookRepo.search(query, search_type)

    @staticmethod
    def most_borrowed(year=None, month=None, limit=None):
        year = parse_int(year, "year")
        month = parse_int(month, "month")
        if month is not None and not 1 <= month <= 12:
            raise ValidationError({"month": ["must be between 1 and 12"]})
        return BookRepo.most_borrowed(year=year, month=month, limit=limit)

    @staticmethod
    def _apply(book: Book, data: dict):
        for key in TEXT_FIELDS:
            if key in data:
                value = data[key]
                setattr(book, key, value.strip() if isinstance(value, str) else value)
        for key in INT_FIELDS:
            if key in data:
                setattr(book, key, parse_int(data[key], key))

        if "author_id" in data:
            author = AuthorRepo.get(parse_int(data["author_id"], "author_id"))
            if not author:
                raise ValidationError({"author": ["must exist"]})
            book.author = author
        if "publisher_id" in data:
            publisher = PublisherRepo.get(parse_int(data["publisher_id"], "publisher_id"))
            if not publisher:
                raise ValidationError({"publisher": ["must exist"]})
            book.publisher = publisher
        if "category_ids" in data:
            ids = [parse_int(i, "category_ids") for i in data.get("category_ids") or []]
            book.categories = CategoryRepo.get_many(ids)

    @staticmethod
    def create_book(data: dict):
        book = Book(total_quantity=parse_int(data.get("total_quantity"), "total_quantity", 0))
        BookService._apply(book, data)
        ensure_valid(book)
        try:
            return BookRepo.create(book)
        except SQLAlchemyError as e:
            BookRepo.rollback()
            current_app.logger.warning(f"[books] create failed: {e}")
            raise PersistenceError("Book could not be saved")

    @staticmethod
    def update_book(book_id: int, data: dict):
        book = BookService.get_book(book_id)
        try:
            # edits stay unflushed until they pass validation
            with db.session.no_autoflush:
                BookService._apply(book, data)
                ensure_valid(book)
            BookRepo.update()
        except ValidationError:
            BookRepo.rollback()
            raise
        except SQLAlchemyError as e:
            BookRepo.rollback()
            current_app.logger.warning(f"[books] update failed for id={book_id}: {e}")
            raise PersistenceError("Book could not be updated")
        return book

    @staticmethod
    def delete_book(book_id: int):
        book = BookService.get_book(book_id)
        try:
            BookRepo.delete(book)
        except SQLAlchemyError as e:
            BookRepo.rollback()
            current_app.logger.warning(f"[books] delete failed for id={book_id}: {e}")
            raise PersistenceError("Book could not be deleted")
