from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from library_app.models.author import Author
from library_app.repositories.author_repo import AuthorRepo
from library_app.utils.validation import ensure_valid, parse_date

FIELDS = ("name", "bio", "nationality", "birth_date", "death_date")


class AuthorService:
    @staticmethod
    def list_authors():
        return AuthorRepo.list_all()

    @staticmethod
    def get_author(author_id: int):
        author = AuthorRepo.get(author_id)
        if not author:
            raise NotFoundError("Author not found")
        return author

    @staticmethod
    def build(data: dict) -> Author:
        """Unsaved author from form data; date errors surface on validation."""
        author = Author()
        AuthorService._apply(author, data)
        return author

    @staticmethod
    def _apply(author: Author, data: dict):
        errors = {}
        for key in FIELDS:
            if key not in data:
                continue
            value = data.get(key)
            if key in ("birth_date", "death_date"):
                try:
                    value = parse_date(value, key)
                except ValidationError as e:
                    errors.update(e.errors)
                    continue
            elif isinstance(value, str):
                value = value.strip() or None
            setattr(author, key, value)
        return errors

    @staticmethod
    def _check(author: Author, errors: dict):
        errors = {**author.validate(), **errors}
        if errors:
            raise ValidationError(errors)

    @staticmethod
    def create_author(author: Author, data: dict = None):
        errors = AuthorService._apply(author, data) if data else {}
        AuthorService._check(author, errors)
        try:
            return AuthorRepo.create(author)
        except SQLAlchemyError as e:
            AuthorRepo.rollback()
            current_app.logger.warning(f"[authors] create failed: {e}")
            raise PersistenceError("Author could not be saved")

    @staticmethod
    def update_author(author: Author, data: dict):
        try:
            errors = AuthorService._apply(author, data)
            AuthorService._check(author, errors)
            AuthorRepo.update()
        except ValidationError:
            # keep the submitted values on the object for the form
            AuthorRepo.discard_changes(author)
            raise
        except SQLAlchemyError as e:
            AuthorRepo.rollback()
            current_app.logger.warning(f"[authors] update failed for id={author.id}: {e}")
            raise PersistenceError("Author could not be updated")
        return author

    @staticmethod
    def delete_author(author: Author):
        if AuthorRepo.has_books(author):
            raise ConflictError("Author has books and can not be deleted")
        try:
            AuthorRepo.delete(author)
        except SQLAlchemyError as e:
            AuthorRepo.rollback()
            current_app.logger.warning(f"[authors] delete failed for id={author.id}: {e}")
            raise PersistenceError("Author could not be deleted")
