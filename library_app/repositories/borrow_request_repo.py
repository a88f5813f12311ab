from datetime import date

from sqlalchemy import update

from library_app.models.book import Book
from library_app.models.borrow_request import BorrowRequest
from library_app.extensions import db


class BorrowRequestRepo:
    @staticmethod
    def list_by_user(user_id: int):
        return (BorrowRequest.query
                .filter_by(user_id=user_id)
                .order_by(BorrowRequest.request_date.desc(), BorrowRequest.id.desc())
                .all())

    @staticmethod
    def ending_between(first_day: date, last_day: date):
        return (BorrowRequest.query
                .filter(BorrowRequest.end_date >= first_day, BorrowRequest.end_date <= last_day)
                .order_by(BorrowRequest.end_date.asc())
                .all())

    @staticmethod
    def reserve_stock(book_id: int, quantity: int) -> bool:
        """Take ``quantity`` copies off the shelf if that many are available.

        Single conditional UPDATE; False when the book is missing or short.
        Does not commit.
        """
        result = db.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_quantity >= quantity)
            .values(
                available_quantity=Book.available_quantity - quantity,
                borrow_count=Book.borrow_count + quantity,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def add(borrow_request: BorrowRequest):
        db.session.add(borrow_request)
        return borrow_request

    @staticmethod
    def commit():
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()
