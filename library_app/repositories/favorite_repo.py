from library_app.models.author import Author
from library_app.models.book import Book
from library_app.models.favorite import Favorite
from library_app.extensions import db


class FavoriteRepo:
    @staticmethod
    def find(user_id: int, favorable_type: str, favorable_id: int):
        return Favorite.query.filter_by(
            user_id=user_id, favorable_type=favorable_type, favorable_id=favorable_id
        ).first()

    @staticmethod
    def create(favorite: Favorite):
        db.session.add(favorite)
        db.session.commit()
        return favorite

    @staticmethod
    def delete(favorite: Favorite):
        db.session.delete(favorite)
        db.session.commit()

    @staticmethod
    def favorite_books_query(user_id: int):
        return (Book.query
                .join(Favorite, (Favorite.favorable_id == Book.id) & (Favorite.favorable_type == "Book"))
                .filter(Favorite.user_id == user_id)
                .order_by(Favorite.created_at.desc(), Favorite.id.desc()))

    @staticmethod
    def favorite_authors_query(user_id: int):
        return (Author.query
                .join(Favorite, (Favorite.favorable_id == Author.id) & (Favorite.favorable_type == "Author"))
                .filter(Favorite.user_id == user_id)
                .order_by(Favorite.created_at.desc(), Favorite.id.desc()))

    @staticmethod
    def rollback():
        db.session.rollback()
