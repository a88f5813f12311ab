from datetime import datetime

from library_app.extensions import db
from library_app.utils.validation import add_error, check_length, check_presence


class Publisher(db.Model):
    __tablename__ = "publishers"

    MAX_NAME_LENGTH = 100
    MAX_ADDRESS_LENGTH = 255

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(MAX_NAME_LENGTH), unique=True, nullable=False)
    address = db.Column(db.String(MAX_ADDRESS_LENGTH), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    books = db.relationship("Book", back_populates="publisher")

    def validate(self):
        errors = {}
        if check_presence(errors, "name", self.name):
            check_length(errors, "name", self.name, self.MAX_NAME_LENGTH)
            with db.session.no_autoflush:
                query = Publisher.query.filter(Publisher.name == self.name)
                if self.id is not None:
                    query = query.filter(Publisher.id != self.id)
                clash = query.first()
            if clash:
                add_error(errors, "name", "has already been taken")
        check_length(errors, "address", self.address, self.MAX_ADDRESS_LENGTH)
        return errors
