from datetime import date, datetime

from library_app.extensions import db
from library_app.utils.validation import add_error


class BorrowRequest(db.Model):
    __tablename__ = "borrow_requests"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    request_date = db.Column(db.Date, nullable=False, default=date.today, index=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User", back_populates="borrow_requests")
    items = db.relationship("BorrowRequestItem", back_populates="borrow_request",
                            cascade="all, delete-orphan", order_by="BorrowRequestItem.id")

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def validate(self):
        errors = {}
        if self.start_date is None:
            add_error(errors, "start_date", "can't be blank")
        if self.end_date is None:
            add_error(errors, "end_date", "can't be blank")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            add_error(errors, "end_date", "must be on or after the start date")
        request_date = self.request_date or date.today()
        if self.start_date and request_date > self.start_date:
            add_error(errors, "start_date", "can't be before the request date")
        return errors


class BorrowRequestItem(db.Model):
    __tablename__ = "borrow_request_items"

    id = db.Column(db.Integer, primary_key=True)
    borrow_request_id = db.Column(db.Integer, db.ForeignKey("borrow_requests.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_borrow_request_items_quantity_positive"),
    )

    borrow_request = db.relationship("BorrowRequest", back_populates="items")
    book = db.relationship("Book")
