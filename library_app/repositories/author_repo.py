from library_app.models.author import Author
from library_app.models.book import Book
from library_app.models.favorite import Favorite
from library_app.extensions import db


class AuthorRepo:
    @staticmethod
    def list_all():
        return Author.recent().all()

    @staticmethod
    def get(author_id: int):
        return db.session.get(Author, author_id)

    @staticmethod
    def has_books(author: Author) -> bool:
        return Book.query.filter_by(author_id=author.id).first() is not None

    @staticmethod
    def create(author: Author):
        db.session.add(author)
        db.session.commit()
        return author

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(author: Author):
        Favorite.query.filter_by(favorable_type="Author", favorable_id=author.id).delete()
        db.session.delete(author)
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()

    @staticmethod
    def discard_changes(author: Author):
        """Detach an author with rejected edits so nothing flushes them."""
        db.session.expunge(author)
