from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import Float, cast, func

from library_app.extensions import db
from library_app.models.category import book_categories
from library_app.utils.validation import add_error, check_length, check_presence


class Book(db.Model):
    __tablename__ = "books"

    MAX_TITLE_LENGTH = 255
    MAX_DESCRIPTION_LENGTH = 2000
    MIN_PUBLICATION_YEAR = 1000

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(MAX_TITLE_LENGTH), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    total_quantity = db.Column(db.Integer, nullable=False, default=0)
    available_quantity = db.Column(db.Integer, nullable=False, default=0)
    borrow_count = db.Column(db.Integer, nullable=False, default=0)
    publication_year = db.Column(db.Integer, nullable=True)

    author_id = db.Column(db.Integer, db.ForeignKey("authors.id"), nullable=False, index=True)
    publisher_id = db.Column(db.Integer, db.ForeignKey("publishers.id"), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("available_quantity >= 0", name="ck_books_available_non_negative"),
        db.CheckConstraint("available_quantity <= total_quantity", name="ck_books_available_le_total"),
        db.CheckConstraint("borrow_count >= 0", name="ck_books_borrow_count_non_negative"),
    )

    author = db.relationship("Author", back_populates="books")
    publisher = db.relationship("Publisher", back_populates="books")
    categories = db.relationship("Category", secondary=book_categories, back_populates="books")
    reviews = db.relationship("Review", back_populates="book", cascade="all, delete-orphan",
                              order_by="Review.created_at.desc()")

    def __init__(self, **kwargs):
        # a new book starts fully on the shelf unless told otherwise
        if "available_quantity" not in kwargs and kwargs.get("total_quantity") is not None:
            kwargs["available_quantity"] = kwargs["total_quantity"]
        kwargs.setdefault("borrow_count", 0)
        super().__init__(**kwargs)

    @property
    def favorites(self):
        from library_app.models.favorite import Favorite
        return Favorite.query.filter_by(favorable_type="Book", favorable_id=self.id).all()

    def average_rating(self) -> float:
        """Mean review score rounded half-up to one decimal, 0 without reviews."""
        from library_app.models.review import Review
        avg = (db.session.query(func.avg(cast(Review.score, Float)))
               .filter(Review.book_id == self.id)
               .scalar())
        if avg is None:
            return 0
        return float(Decimal(str(avg)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    @classmethod
    def recent(cls):
        return cls.query.order_by(cls.created_at.desc(), cls.id.desc())

    @classmethod
    def by_author(cls, author_id: int):
        return cls.query.filter(cls.author_id == author_id)

    @classmethod
    def exclude_book(cls, book_id: int):
        return cls.query.filter(cls.id != book_id)

    @classmethod
    def recommended(cls):
        return cls.query.order_by(cls.publication_year.desc(), cls.id.desc())

    def validate(self):
        errors = {}
        if check_presence(errors, "title", self.title):
            check_length(errors, "title", self.title, self.MAX_TITLE_LENGTH)
        check_length(errors, "description", self.description, self.MAX_DESCRIPTION_LENGTH)

        total = self.total_quantity
        available = self.available_quantity
        if total is None or total < 0:
            add_error(errors, "total_quantity", "must be greater than or equal to 0")
        if available is None or available < 0:
            add_error(errors, "available_quantity", "must be greater than or equal to 0")
        elif total is not None and available > total:
            add_error(errors, "available_quantity", f"must be less than or equal to {total}")
        if self.borrow_count is not None and self.borrow_count < 0:
            add_error(errors, "borrow_count", "must be greater than or equal to 0")

        if self.publication_year is not None and self.publication_year <= self.MIN_PUBLICATION_YEAR:
            add_error(errors, "publication_year", f"must be greater than {self.MIN_PUBLICATION_YEAR}")

        # lazy loads below must not flush this row before it is known valid
        with db.session.no_autoflush:
            if self.author is None and self.author_id is None:
                add_error(errors, "author", "must exist")
            if self.publisher is None and self.publisher_id is None:
                add_error(errors, "publisher", "must exist")
        return errors

    def __repr__(self):
        return f"<Book {self.title}>"
