from datetime import datetime

from library_app.extensions import db
from library_app.utils.validation import add_error, check_length


class Review(db.Model):
    __tablename__ = "reviews"

    MIN_SCORE = 1
    MAX_SCORE = 5
    MAX_COMMENT_LENGTH = 1000

    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "book_id", name="uq_reviews_user_book"),
    )

    book = db.relationship("Book", back_populates="reviews")
    user = db.relationship("User", back_populates="reviews")

    def validate(self):
        errors = {}
        if self.score is None:
            add_error(errors, "score", "can't be blank")
        elif not self.MIN_SCORE <= self.score <= self.MAX_SCORE:
            add_error(errors, "score", f"must be between {self.MIN_SCORE} and {self.MAX_SCORE}")
        check_length(errors, "comment", self.comment, self.MAX_COMMENT_LENGTH)
        return errors
