from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import NotFoundError, PersistenceError
from library_app.models.favorite import Favorite
from library_app.repositories.favorite_repo import FavoriteRepo


class FavoriteService:
    @staticmethod
    def find(user_id: int, favorable):
        if user_id is None:
            return None
        return FavoriteRepo.find(user_id, Favorite.type_of(favorable), favorable.id)

    @staticmethod
    def add(user_id: int, favorable):
        """Favorite an Author or Book; adding an existing favorite is a no-op."""
        existing = FavoriteService.find(user_id, favorable)
        if existing:
            return existing

        favorite = Favorite(user_id=user_id)
        favorite.favorable = favorable
        try:
            return FavoriteRepo.create(favorite)
        except SQLAlchemyError as e:
            FavoriteRepo.rollback()
            current_app.logger.warning(
                f"[favorites] add failed user id={user_id} {favorite.favorable_type} id={favorable.id}: {e}"
            )
            raise PersistenceError("Favorite could not be saved")

    @staticmethod
    def remove(user_id: int, favorable):
        favorite = FavoriteService.find(user_id, favorable)
        if not favorite:
            raise NotFoundError("Favorite not found")
        try:
            FavoriteRepo.delete(favorite)
        except SQLAlchemyError as e:
            FavoriteRepo.rollback()
            current_app.logger.warning(f"[favorites] remove failed id={favorite.id}: {e}")
            raise PersistenceError("Favorite could not be removed")
