from flask import Blueprint, request, redirect, url_for, flash, render_template

from library_app.errors import NotFoundError, PersistenceError, ValidationError
from library_app.services.book_service import BookService
from library_app.services.borrow_cart import BorrowCart
from library_app.services.favorite_service import FavoriteService
from library_app.services.review_service import ReviewService
from library_app.utils.auth import current_user, login_required
from library_app.utils.formats import render_stream, wants_stream

books_bp = Blueprint("books", __name__, url_prefix="/books")


def _load_book(book_id: int):
    try:
        return BookService.get_book(book_id)
    except NotFoundError:
        return None


def _book_not_found():
    flash("Book not found.", "alert")
    return redirect(url_for("web.index"))


def _user_id():
    user = current_user()
    return user.id if user else None


def _show_context(book, review_errors=None, review_form=None):
    user_id = _user_id()
    return {
        "book": book,
        "reviews": book.reviews,
        "average_rating": book.average_rating(),
        "favorite": FavoriteService.find(user_id, book),
        "user_review": ReviewService.find(user_id, book.id),
        "related_books": BookService.related_books(book),
        "review_errors": review_errors or [],
        "review_form": review_form or {},
    }


def _favorite_button(book, status=200):
    return render_stream("favorite_button", "books/_favorite_button.html", status=status,
                         book=book, favorite=FavoriteService.find(_user_id(), book))


def _review_section(book, status=200, review_errors=None, review_form=None):
    return render_stream("review_section", "books/_review_section.html", status=status,
                         **_show_context(book, review_errors, review_form))


@books_bp.get("/search")
def search():
    query = (request.args.get("q") or "").strip()
    search_type = BookService.normalize_search_type(request.args.get("search_type"))
    books = BookService.search(query, search_type)
    return render_template("books/search.html", books=books, q=query, search_type=search_type.value)


@books_bp.get("/<int:book_id>")
def show(book_id: int):
    book = _load_book(book_id)
    if not book:
        return _book_not_found()
    if wants_stream():
        return _review_section(book)
    return render_template("books/show.html", **_show_context(book))


@books_bp.post("/<int:book_id>/borrow")
def borrow(book_id: int):
    book = _load_book(book_id)
    if not book:
        return _book_not_found()

    cart = BorrowCart()
    try:
        cart.add(book.id, request.form.get("quantity", 1))
    except ValidationError as e:
        flash(f"Quantity {e.errors['quantity'][0]}.", "alert")
        if wants_stream():
            return render_stream("borrow_cart", "books/_borrow_cart.html", status=422, cart=cart)
        return redirect(url_for("books.show", book_id=book.id))

    flash("Added to your borrow cart.", "success")
    if wants_stream():
        return render_stream("borrow_cart", "books/_borrow_cart.html", cart=cart)
    return redirect(url_for("books.show", book_id=book.id))


@books_bp.post("/<int:book_id>/favorite")
@login_required
def add_to_favorite(book_id: int):
    book = _load_book(book_id)
    if not book:
        return _book_not_found()

    try:
        FavoriteService.add(_user_id(), book)
        flash("Added to your favorites.", "success")
    except PersistenceError:
        flash("Could not add this book to your favorites.", "alert")

    if wants_stream():
        return _favorite_button(book)
    return redirect(url_for("books.show", book_id=book.id))


@books_bp.delete("/<int:book_id>/favorite")
@books_bp.post("/<int:book_id>/favorite/delete")
@login_required
def remove_from_favorite(book_id: int):
    book = _load_book(book_id)
    if not book:
        return _book_not_found()

    try:
        FavoriteService.remove(_user_id(), book)
        flash("Removed from your favorites.", "notice")
    except NotFoundError:
        flash("This book is not in your favorites.", "alert")
    except PersistenceError:
        flash("Could not remove this book from your favorites.", "alert")

    if wants_stream():
        return _favorite_button(book)
    return redirect(url_for("books.show", book_id=book.id))


@books_bp.post("/<int:book_id>/reviews")
@login_required
def write_a_review(book_id: int):
    book = _load_book(book_id)
    if not book:
        return _book_not_found()

    form = {"score": request.form.get("score"), "comment": request.form.get("comment")}
    try:
        ReviewService.write(_user_id(), book.id, form)
    except (ValidationError, PersistenceError) as e:
        errors = e.full_messages() if isinstance(e, ValidationError) else [str(e)]
        if wants_stream():
            return _review_section(book, status=422, review_errors=errors, review_form=form)
        return render_template("books/show.html", **_show_context(book, errors, form)), 422

    if wants_stream():
        return _review_section(book)
    flash("Thanks for your review.", "success")
    return redirect(url_for("books.show", book_id=book.id))


@books_bp.delete("/<int:book_id>/reviews")
@books_bp.post("/<int:book_id>/reviews/delete")
@login_required
def destroy_review(book_id: int):
    book = _load_book(book_id)
    if not book:
        return _book_not_found()

    try:
        ReviewService.destroy(_user_id(), book.id)
    except NotFoundError:
        flash("Review not found.", "alert")
        if wants_stream():
            return _review_section(book, status=404)
        return redirect(url_for("books.show", book_id=book.id))
    except PersistenceError:
        if wants_stream():
            return _review_section(book, status=422, review_errors=["Could not delete the review."])
        flash("Could not delete the review.", "alert")
        return redirect(url_for("books.show", book_id=book.id))

    if wants_stream():
        return _review_section(book)
    flash("Your review was deleted.", "success")
    return redirect(url_for("books.show", book_id=book.id))
