from library_app.models.review import Review
from library_app.extensions import db


class ReviewRepo:
    @staticmethod
    def find(user_id: int, book_id: int):
        return Review.query.filter_by(user_id=user_id, book_id=book_id).first()

    @staticmethod
    def save(review: Review):
        db.session.add(review)
        db.session.commit()
        return review

    @staticmethod
    def delete(review: Review):
        db.session.delete(review)
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()
