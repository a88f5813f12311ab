from datetime import date, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from library_app.models.borrow_request import BorrowRequest, BorrowRequestItem
from library_app.repositories.book_repo import BookRepo
from library_app.repositories.borrow_request_repo import BorrowRequestRepo
from library_app.services.mail_service import MailService
from library_app.utils.validation import ensure_valid


class BorrowService:
    @staticmethod
    def _merge_lines(entries):
        lines = {}
        for entry in entries:
            book_id = int(entry["book_id"])
            quantity = int(entry["quantity"])
            if quantity < 1:
                raise ValidationError({"quantity": ["must be greater than 0"]})
            lines[book_id] = lines.get(book_id, 0) + quantity
        return lines

    @staticmethod
    def checkout(user_id: int, entries, start_date: date = None, end_date: date = None):
        """Turn cart entries into one borrow request, all or nothing.

        Every line takes its copies off the shelf through a conditional
        update; if any line can not be served the whole request is rolled
        back and no stock changes.
        """
        lines = BorrowService._merge_lines(entries or [])
        if not lines:
            raise ValidationError({"borrow_cart": ["is empty"]})

        today = date.today()
        start_date = start_date or today
        end_date = end_date or start_date + timedelta(days=current_app.config["DEFAULT_BORROW_DAYS"])

        borrow_request = BorrowRequest(
            user_id=user_id,
            request_date=today,
            start_date=start_date,
            end_date=end_date,
        )
        ensure_valid(borrow_request)

        try:
            for book_id, quantity in lines.items():
                if BorrowRequestRepo.reserve_stock(book_id, quantity):
                    borrow_request.items.append(BorrowRequestItem(book_id=book_id, quantity=quantity))
                    continue

                book = BookRepo.get(book_id)
                BorrowRequestRepo.rollback()
                if not book:
                    raise NotFoundError(f"Book #{book_id} not found")
                raise ConflictError(
                    f"Only {book.available_quantity} copies of '{book.title}' are available"
                )

            BorrowRequestRepo.add(borrow_request)
            BorrowRequestRepo.commit()
        except SQLAlchemyError as e:
            BorrowRequestRepo.rollback()
            current_app.logger.exception(f"[borrow] checkout failed for user id={user_id}: {e}")
            raise PersistenceError("Borrow request could not be saved")

        current_app.logger.info(
            f"[borrow] request id={borrow_request.id} user id={user_id} "
            f"books={len(lines)} copies={sum(lines.values())}"
        )

        # mail problems never undo a checkout
        MailService.send_borrow_request_mail(borrow_request)
        try:
            BorrowRequestRepo.commit()
        except SQLAlchemyError as e:
            BorrowRequestRepo.rollback()
            current_app.logger.warning(f"[borrow] could not log confirmation mail: {e}")

        return borrow_request

    @staticmethod
    def list_for_user(user_id: int):
        return BorrowRequestRepo.list_by_user(user_id)
