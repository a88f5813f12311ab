from functools import wraps
from flask import session, redirect, url_for, jsonify, request, flash, g

from library_app.repositories.user_repo import UserRepo
from library_app.services.borrow_cart import carry_borrow_cart


def current_user():
    user_id = session.get("user_id")
    if not user_id:
        return None
    user = g.get("current_user")
    # g can outlive a request when an app context is already pushed
    if user is None or user.id != int(user_id):
        user = g.current_user = UserRepo.get_by_id(int(user_id))
    return user


def sign_in(user):
    """Start a fresh session for ``user``; the borrow cart survives."""
    forwarding_url = session.get("forwarding_url")
    with carry_borrow_cart():
        session.clear()
        session["user_id"] = int(user.id)
        session["username"] = user.name
        session["role"] = user.role
    g.current_user = user
    return forwarding_url


def sign_out():
    with carry_borrow_cart(keep_empty=False):
        session.clear()
    g.current_user = None


def _wants_json() -> bool:
    return request.path.startswith(("/api", "/web/api")) or request.is_json


def _deny_anonymous():
    if _wants_json():
        return jsonify({"success": False, "message": "Unauthorized"}), 401
    if request.method == "GET":
        session["forwarding_url"] = request.full_path if request.query_string else request.path
    flash("Please sign in to continue.", "warning")
    return redirect(url_for("auth.sign_in"))


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            return _deny_anonymous()
        return view(*args, **kwargs)
    return wrapped


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            return _deny_anonymous()
        if not user.is_admin:
            if _wants_json():
                return jsonify({"success": False, "message": "Forbidden"}), 403
            flash("You are not allowed to do that.", "alert")
            return redirect(url_for("web.index"))
        return view(*args, **kwargs)
    return wrapped
