from flask import Blueprint, request, redirect, url_for, flash, render_template

from library_app.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from library_app.models.author import Author
from library_app.services.author_service import AuthorService, FIELDS
from library_app.utils.auth import admin_required

admin_authors_bp = Blueprint("admin_authors", __name__, url_prefix="/admin/authors")


@admin_authors_bp.before_request
@admin_required
def _require_admin():
    return None


def _form_data():
    return {key: request.form.get(key) for key in FIELDS if key in request.form}


def _load_or_redirect(author_id: int):
    try:
        return AuthorService.get_author(author_id), None
    except NotFoundError:
        flash("Author not found.", "alert")
        return None, redirect(url_for("admin_authors.index"))


@admin_authors_bp.get("")
def index():
    return render_template("admin/authors/index.html", authors=AuthorService.list_authors())


@admin_authors_bp.get("/new")
def new():
    return render_template("admin/authors/new.html", author=Author(), errors=[])


@admin_authors_bp.post("")
def create():
    author = AuthorService.build({})
    try:
        AuthorService.create_author(author, _form_data())
    except (ValidationError, PersistenceError) as e:
        errors = e.full_messages() if isinstance(e, ValidationError) else [str(e)]
        flash("Author could not be created.", "alert")
        return render_template("admin/authors/new.html", author=author, errors=errors), 422

    flash("Author was created.", "success")
    return redirect(url_for("admin_authors.index"))


@admin_authors_bp.get("/<int:author_id>")
def show(author_id: int):
    author, response = _load_or_redirect(author_id)
    if response:
        return response
    return render_template("admin/authors/show.html", author=author)


@admin_authors_bp.get("/<int:author_id>/edit")
def edit(author_id: int):
    author, response = _load_or_redirect(author_id)
    if response:
        return response
    return render_template("admin/authors/edit.html", author=author, errors=[])


@admin_authors_bp.route("/<int:author_id>", methods=["POST", "PUT", "PATCH"])
def update(author_id: int):
    author, response = _load_or_redirect(author_id)
    if response:
        return response

    try:
        AuthorService.update_author(author, _form_data())
    except (ValidationError, PersistenceError) as e:
        errors = e.full_messages() if isinstance(e, ValidationError) else [str(e)]
        flash("Author could not be updated.", "alert")
        return render_template("admin/authors/edit.html", author=author, errors=errors), 422

    flash("Author was updated.", "success")
    return redirect(url_for("admin_authors.show", author_id=author.id))


@admin_authors_bp.delete("/<int:author_id>")
@admin_authors_bp.post("/<int:author_id>/delete")
def destroy(author_id: int):
    author, response = _load_or_redirect(author_id)
    if response:
        return response

    try:
        AuthorService.delete_author(author)
        flash("Author was deleted.", "success")
    except ConflictError:
        flash("Author has books and can not be deleted.", "alert")
    except PersistenceError:
        flash("Author could not be deleted.", "alert")
    return redirect(url_for("admin_authors.index"))
