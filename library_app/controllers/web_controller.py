from flask import Blueprint, render_template

from library_app.services.book_service import BookService

web_bp = Blueprint("web", __name__)

HOME_LIST_SIZE = 5


@web_bp.get("/")
def index():
    return render_template(
        "home.html",
        recent_books=BookService.recent_books(HOME_LIST_SIZE),
        most_borrowed=BookService.most_borrowed(limit=HOME_LIST_SIZE),
    )
