from library_app.extensions import db
from library_app.utils.validation import add_error, check_length, check_presence

book_categories = db.Table(
    "book_categories",
    db.Column("book_id", db.Integer, db.ForeignKey("books.id"), primary_key=True),
    db.Column("category_id", db.Integer, db.ForeignKey("categories.id"), primary_key=True),
)


class Category(db.Model):
    __tablename__ = "categories"

    MAX_NAME_LENGTH = 50

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(MAX_NAME_LENGTH), unique=True, nullable=False)

    books = db.relationship("Book", secondary=book_categories, back_populates="categories")

    def validate(self):
        errors = {}
        if check_presence(errors, "name", self.name):
            check_length(errors, "name", self.name, self.MAX_NAME_LENGTH)
            with db.session.no_autoflush:
                query = Category.query.filter(Category.name == self.name)
                if self.id is not None:
                    query = query.filter(Category.id != self.id)
                clash = query.first()
            if clash:
                add_error(errors, "name", "has already been taken")
        return errors
