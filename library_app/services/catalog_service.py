from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from library_app.models.category import Category
from library_app.models.publisher import Publisher
from library_app.repositories.catalog_repo import CategoryRepo, PublisherRepo
from library_app.utils.validation import ensure_valid


def _text(value):
    return value.strip() if isinstance(value, str) else value


class PublisherService:
    @staticmethod
    def list_publishers():
        return PublisherRepo.list_all()

    @staticmethod
    def get_publisher(publisher_id: int):
        publisher = PublisherRepo.get(publisher_id)
        if not publisher:
            raise NotFoundError("Publisher not found")
        return publisher

    @staticmethod
    def create_publisher(data: dict):
        publisher = Publisher(name=_text(data.get("name")), address=_text(data.get("address")))
        ensure_valid(publisher)
        try:
            return PublisherRepo.create(publisher)
        except SQLAlchemyError as e:
            PublisherRepo.rollback()
            current_app.logger.warning(f"[publishers] create failed: {e}")
            raise PersistenceError("Publisher could not be saved")

    @staticmethod
    def update_publisher(publisher_id: int, data: dict):
        publisher = PublisherService.get_publisher(publisher_id)
        try:
            for key in ("name", "address"):
                if key in data:
                    setattr(publisher, key, _text(data[key]))
            ensure_valid(publisher)
            PublisherRepo.update()
        except ValidationError:
            PublisherRepo.rollback()
            raise
        except SQLAlchemyError as e:
            PublisherRepo.rollback()
            current_app.logger.warning(f"[publishers] update failed for id={publisher_id}: {e}")
            raise PersistenceError("Publisher could not be updated")
        return publisher

    @staticmethod
    def delete_publisher(publisher_id: int):
        publisher = PublisherService.get_publisher(publisher_id)
        if PublisherRepo.has_books(publisher):
            raise ConflictError("Publisher has books and can not be deleted")
        try:
            PublisherRepo.delete(publisher)
        except SQLAlchemyError as e:
            PublisherRepo.rollback()
            current_app.logger.warning(f"[publishers] delete failed for id={publisher_id}: {e}")
            raise PersistenceError("Publisher could not be deleted")


class CategoryService:
    @staticmethod
    def list_categories():
        return CategoryRepo.list_all()

    @staticmethod
    def create_category(data: dict):
        category = Category(name=_text(data.get("name")))
        ensure_valid(category)
        try:
            return CategoryRepo.create(category)
        except SQLAlchemyError as e:
            CategoryRepo.rollback()
            current_app.logger.warning(f"[categories] create failed: {e}")
            raise PersistenceError("Category could not be saved")

    @staticmethod
    def delete_category(category_id: int):
        category = CategoryRepo.get(category_id)
        if not category:
            raise NotFoundError("Category not found")
        try:
            CategoryRepo.delete(category)
        except SQLAlchemyError as e:
            CategoryRepo.rollback()
            current_app.logger.warning(f"[categories] delete failed for id={category_id}: {e}")
            raise PersistenceError("Category could not be deleted")
