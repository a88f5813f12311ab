from flask import Blueprint, request, redirect, url_for, flash, render_template

from library_app.errors import PersistenceError, ValidationError
from library_app.repositories.user_repo import UserRepo
from library_app.services.auth_service import AuthService
from library_app.services.user_service import UserService
from library_app.utils.auth import current_user, login_required

users_bp = Blueprint("users", __name__, url_prefix="/users")

EDITABLE_FIELDS = ("name", "gender", "date_of_birth", "password", "password_confirmation")


def _correct_user(user_id: int):
    """Return the signed-in user when it owns ``user_id``, else a redirect."""
    user = UserRepo.get_by_id(user_id)
    if not user:
        flash("User not found.", "alert")
        return None, redirect(url_for("web.index"), code=303)
    if user.id != current_user().id:
        flash("You are not allowed to do that.", "alert")
        return None, redirect(url_for("web.index"), code=303)
    return user, None


@users_bp.get("/<int:user_id>")
@login_required
def show(user_id: int):
    user, response = _correct_user(user_id)
    if response:
        return response
    return render_template("users/show.html", user=user)


@users_bp.get("/<int:user_id>/edit")
@login_required
def edit(user_id: int):
    user, response = _correct_user(user_id)
    if response:
        return response
    return render_template("users/edit.html", user=user, errors=[])


@users_bp.post("/<int:user_id>/edit")
@login_required
def update(user_id: int):
    user, response = _correct_user(user_id)
    if response:
        return response

    data = {key: request.form.get(key) for key in EDITABLE_FIELDS if key in request.form}
    try:
        AuthService.update_profile(user, data)
    except ValidationError as e:
        return render_template("users/edit.html", user=user, errors=e.full_messages()), 422
    except PersistenceError as e:
        return render_template("users/edit.html", user=user, errors=[str(e)]), 422

    flash("Your profile was updated.", "success")
    return redirect(url_for("users.show", user_id=user.id))


@users_bp.get("/<int:user_id>/favorites")
@login_required
def favorites(user_id: int):
    user, response = _correct_user(user_id)
    if response:
        return response
    return render_template(
        "users/favorites.html",
        user=user,
        books=UserService.favorite_books(user.id),
        stats=UserService.favorite_stats(user.id),
    )


@users_bp.get("/<int:user_id>/follows")
@login_required
def follows(user_id: int):
    user, response = _correct_user(user_id)
    if response:
        return response
    authors = UserService.favorite_authors(user.id)
    return render_template(
        "users/follows.html",
        user=user,
        authors=authors,
        stats=UserService.author_stats(authors),
    )
