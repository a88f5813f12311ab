from datetime import date, datetime

from library_app.extensions import db
from library_app.utils.validation import add_error, check_length, check_presence


class Author(db.Model):
    __tablename__ = "authors"

    MAX_NAME_LENGTH = 100
    MAX_BIO_LENGTH = 1000
    MAX_NATIONALITY_LENGTH = 50

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(MAX_NAME_LENGTH), nullable=False, index=True)
    bio = db.Column(db.Text, nullable=True)
    nationality = db.Column(db.String(MAX_NATIONALITY_LENGTH), nullable=True)
    birth_date = db.Column(db.Date, nullable=True)
    death_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    books = db.relationship("Book", back_populates="author")

    @property
    def favorites(self):
        from library_app.models.favorite import Favorite
        return Favorite.query.filter_by(favorable_type="Author", favorable_id=self.id).all()

    @classmethod
    def alive(cls):
        return cls.query.filter(cls.death_date.is_(None))

    @classmethod
    def deceased(cls):
        return cls.query.filter(cls.death_date.isnot(None))

    @classmethod
    def recent(cls):
        return cls.query.order_by(cls.created_at.desc(), cls.id.desc())

    def validate(self):
        errors = {}
        if check_presence(errors, "name", self.name):
            check_length(errors, "name", self.name, self.MAX_NAME_LENGTH)
        check_length(errors, "bio", self.bio, self.MAX_BIO_LENGTH)
        check_length(errors, "nationality", self.nationality, self.MAX_NATIONALITY_LENGTH)

        today = date.today()
        if self.birth_date and self.birth_date > today:
            add_error(errors, "birth_date", "can't be in the future")
        if self.death_date:
            if self.death_date > today:
                add_error(errors, "death_date", "can't be in the future")
            if self.birth_date and self.death_date <= self.birth_date:
                add_error(errors, "death_date", "must be after birth date")
        return errors

    def __repr__(self):
        return f"<Author {self.name}>"
