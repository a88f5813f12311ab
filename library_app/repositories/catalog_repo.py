from library_app.models.book import Book
from library_app.models.category import Category
from library_app.models.publisher import Publisher
from library_app.extensions import db


class PublisherRepo:
    @staticmethod
    def rollback():
        db.session.rollback()

    @staticmethod
    def list_all():
        return Publisher.query.order_by(Publisher.name.asc()).all()

    @staticmethod
    def get(publisher_id: int):
        return db.session.get(Publisher, publisher_id)

    @staticmethod
    def has_books(publisher: Publisher) -> bool:
        return Book.query.filter_by(publisher_id=publisher.id).first() is not None

    @staticmethod
    def create(publisher: Publisher):
        db.session.add(publisher)
        db.session.commit()
        return publisher

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(publisher: Publisher):
        db.session.delete(publisher)
        db.session.commit()


class CategoryRepo:
    @staticmethod
    def rollback():
        db.session.rollback()

    @staticmethod
    def list_all():
        return Category.query.order_by(Category.name.asc()).all()

    @staticmethod
    def get(category_id: int):
        return db.session.get(Category, category_id)

    @staticmethod
    def get_many(category_ids):
        if not category_ids:
            return []
        return Category.query.filter(Category.id.in_(category_ids)).all()

    @staticmethod
    def create(category: Category):
        db.session.add(category)
        db.session.commit()
        return category

    @staticmethod
    def delete(category: Category):
        db.session.delete(category)
        db.session.commit()
