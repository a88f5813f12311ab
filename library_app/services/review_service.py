from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import NotFoundError, PersistenceError, ValidationError
from library_app.models.review import Review
from library_app.repositories.review_repo import ReviewRepo
from library_app.utils.validation import ensure_valid, parse_int


class ReviewService:
    @staticmethod
    def find(user_id: int, book_id: int):
        if user_id is None:
            return None
        return ReviewRepo.find(user_id, book_id)

    @staticmethod
    def write(user_id: int, book_id: int, data: dict):
        """Create the user's review of a book, or replace the existing one."""
        review = ReviewRepo.find(user_id, book_id) or Review(user_id=user_id, book_id=book_id)
        try:
            review.score = parse_int(data.get("score"), "score")
            comment = data.get("comment")
            review.comment = comment.strip() if isinstance(comment, str) and comment.strip() else None
            ensure_valid(review)
            return ReviewRepo.save(review)
        except ValidationError:
            ReviewRepo.rollback()
            raise
        except SQLAlchemyError as e:
            ReviewRepo.rollback()
            current_app.logger.warning(f"[reviews] save failed user id={user_id} book id={book_id}: {e}")
            raise PersistenceError("Review could not be saved")

    @staticmethod
    def destroy(user_id: int, book_id: int):
        review = ReviewRepo.find(user_id, book_id)
        if not review:
            raise NotFoundError("Review not found")
        try:
            ReviewRepo.delete(review)
        except SQLAlchemyError as e:
            ReviewRepo.rollback()
            current_app.logger.warning(f"[reviews] delete failed id={review.id}: {e}")
            raise PersistenceError("Review could not be deleted")
