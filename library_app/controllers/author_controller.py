from flask import Blueprint, redirect, url_for, flash, render_template

from library_app.errors import NotFoundError, PersistenceError
from library_app.models.book import Book
from library_app.services.author_service import AuthorService
from library_app.services.favorite_service import FavoriteService
from library_app.utils.auth import current_user, login_required
from library_app.utils.formats import render_stream, wants_stream

authors_bp = Blueprint("authors", __name__, url_prefix="/authors")


def _load_author(author_id: int):
    try:
        return AuthorService.get_author(author_id)
    except NotFoundError:
        return None


def _author_not_found():
    flash("Author not found.", "alert")
    return redirect(url_for("web.index"))


def _respond(author):
    if wants_stream():
        return render_stream("favorite_button", "authors/_favorite_button.html", author=author,
                             favorite=FavoriteService.find(current_user().id, author))
    return redirect(url_for("authors.show", author_id=author.id))


@authors_bp.get("/<int:author_id>")
def show(author_id: int):
    author = _load_author(author_id)
    if not author:
        return _author_not_found()
    user = current_user()
    return render_template(
        "authors/show.html",
        author=author,
        books=Book.by_author(author.id).order_by(Book.publication_year.desc(), Book.id.desc()).all(),
        favorite=FavoriteService.find(user.id if user else None, author),
    )


@authors_bp.post("/<int:author_id>/favorite")
@login_required
def add_to_favorite(author_id: int):
    author = _load_author(author_id)
    if not author:
        return _author_not_found()

    try:
        FavoriteService.add(current_user().id, author)
        flash("You are now following this author.", "notice")
    except PersistenceError:
        flash("Could not follow this author.", "alert")
    return _respond(author)


@authors_bp.delete("/<int:author_id>/favorite")
@authors_bp.post("/<int:author_id>/favorite/delete")
@login_required
def remove_from_favorite(author_id: int):
    author = _load_author(author_id)
    if not author:
        return _author_not_found()

    try:
        FavoriteService.remove(current_user().id, author)
        flash("You unfollowed this author.", "notice")
    except NotFoundError:
        flash("You are not following this author.", "alert")
    except PersistenceError:
        flash("Could not unfollow this author.", "alert")
    return _respond(author)
