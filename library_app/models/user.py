import re
from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from library_app.extensions import db
from library_app.utils.validation import add_error, check_length, check_presence

EMAIL_REGEXP = re.compile(r"\A[^@\s]+@[^@\s]+\Z")


class User(db.Model):
    __tablename__ = "users"

    ROLES = ("member", "admin")
    GENDERS = ("male", "female", "other")
    MAX_NAME_LENGTH = 50
    MAX_EMAIL_LENGTH = 255
    PASSWORD_LENGTH = (6, 128)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(MAX_NAME_LENGTH), nullable=False)
    email = db.Column(db.String(MAX_EMAIL_LENGTH), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="member")
    gender = db.Column(db.String(10), nullable=True)
    date_of_birth = db.Column(db.Date, nullable=True)

    # set when the account was created through an OAuth provider
    provider = db.Column(db.String(50), nullable=True)
    uid = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    favorites = db.relationship("Favorite", back_populates="user", cascade="all, delete-orphan")
    reviews = db.relationship("Review", back_populates="user", cascade="all, delete-orphan")
    borrow_requests = db.relationship("BorrowRequest", back_populates="user")

    _password = None

    @staticmethod
    def normalize_email(email):
        return (email or "").strip().lower()

    def set_password(self, password):
        self._password = password
        self.password_hash = generate_password_hash(password) if password else None

    def check_password(self, password) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, password or "")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def validate(self):
        errors = {}
        if check_presence(errors, "name", self.name):
            check_length(errors, "name", self.name, self.MAX_NAME_LENGTH)
        if check_presence(errors, "email", self.email):
            if not EMAIL_REGEXP.match(self.email):
                add_error(errors, "email", "is invalid")
            elif self._email_taken():
                add_error(errors, "email", "has already been taken")
        if self.role not in self.ROLES:
            add_error(errors, "role", "is not included in the list")
        if self.gender is not None and self.gender not in self.GENDERS:
            add_error(errors, "gender", "is not included in the list")
        if self._password is not None:
            low, high = self.PASSWORD_LENGTH
            if not low <= len(self._password) <= high:
                add_error(errors, "password", f"length must be between {low} and {high} characters")
        elif not self.password_hash and not self.provider:
            add_error(errors, "password", "can't be blank")
        return errors

    def _email_taken(self):
        with db.session.no_autoflush:
            query = User.query.filter(User.email == self.email)
            if self.id is not None:
                query = query.filter(User.id != self.id)
            return query.first() is not None

    def __repr__(self):
        return f"<User {self.email}>"
