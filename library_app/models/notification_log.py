from datetime import datetime

from library_app.extensions import db


class NotificationLog(db.Model):
    __tablename__ = "notification_logs"

    id = db.Column(db.Integer, primary_key=True)

    borrow_request_id = db.Column(db.Integer, db.ForeignKey("borrow_requests.id"), nullable=True, index=True)

    # return_reminder or borrow_confirmation
    type = db.Column(db.String(50), nullable=False)

    email = db.Column(db.String(255), nullable=True)
    message = db.Column(db.String(1000), nullable=True)

    sent_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    success = db.Column(db.Boolean, nullable=False, default=True)
    error_message = db.Column(db.String(500), nullable=True)

    borrow_request = db.relationship("BorrowRequest")
