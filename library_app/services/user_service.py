from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func

from library_app.extensions import db
from library_app.models.book import Book
from library_app.models.category import book_categories
from library_app.repositories.favorite_repo import FavoriteRepo


class UserService:
    @staticmethod
    def favorite_books(user_id: int):
        return FavoriteRepo.favorite_books_query(user_id).all()

    @staticmethod
    def favorite_authors(user_id: int):
        return FavoriteRepo.favorite_authors_query(user_id).all()

    @staticmethod
    def favorite_stats(user_id: int) -> dict:
        books = FavoriteRepo.favorite_books_query(user_id).order_by(None).subquery()
        unique_categories = (db.session.query(func.count(func.distinct(book_categories.c.category_id)))
                             .join(books, books.c.id == book_categories.c.book_id)
                             .scalar())
        return {
            "total_favorites": db.session.query(func.count()).select_from(books).scalar(),
            "unique_authors": db.session.query(func.count(func.distinct(books.c.author_id))).scalar(),
            "unique_categories": unique_categories,
            "unique_publishers": db.session.query(func.count(func.distinct(books.c.publisher_id))).scalar(),
        }

    @staticmethod
    def author_stats(authors) -> dict:
        if not authors:
            return {"total_books": 0, "avg_books": 0}

        counts = dict(
            db.session.query(Book.author_id, func.count(Book.id))
            .filter(Book.author_id.in_([a.id for a in authors]))
            .group_by(Book.author_id)
            .all()
        )
        total_books = sum(counts.get(a.id, 0) for a in authors)
        avg = Decimal(total_books) / Decimal(len(authors))
        return {"total_books": total_books, "avg_books": float(avg.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))}
