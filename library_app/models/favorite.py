from datetime import datetime

from library_app.extensions import db


class Favorite(db.Model):
    """A user's favorite Author or Book.

    ``favorable_type`` names the target model; the target is resolved through
    ``FAVORABLE_TYPES`` rather than a foreign key.
    """

    __tablename__ = "favorites"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    favorable_type = db.Column(db.String(20), nullable=False)
    favorable_id = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "favorable_type", "favorable_id", name="uq_favorites_user_favorable"),
        db.Index("ix_favorites_favorable", "favorable_type", "favorable_id"),
    )

    user = db.relationship("User", back_populates="favorites")

    @staticmethod
    def favorable_types():
        from library_app.models.author import Author
        from library_app.models.book import Book
        return {"Author": Author, "Book": Book}

    @staticmethod
    def type_of(record) -> str:
        for name, model in Favorite.favorable_types().items():
            if isinstance(record, model):
                return name
        raise TypeError(f"{type(record).__name__} can not be favorited")

    @property
    def favorable(self):
        model = self.favorable_types().get(self.favorable_type)
        if model is None:
            return None
        return db.session.get(model, self.favorable_id)

    @favorable.setter
    def favorable(self, record):
        self.favorable_type = self.type_of(record)
        self.favorable_id = record.id
