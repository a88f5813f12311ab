from flask import Blueprint, request, jsonify, session, redirect, url_for, flash, render_template, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt

from library_app.errors import PersistenceError, ValidationError
from library_app.repositories.user_repo import UserRepo
from library_app.services.auth_service import AuthService
from library_app.utils.auth import current_user, sign_in, sign_out

# HTML, session based
auth_bp = Blueprint("auth", __name__, url_prefix="/users")
# JSON, token based
auth_api_bp = Blueprint("auth_api", __name__, url_prefix="/auth")

SIGN_UP_FIELDS = ("name", "email", "gender", "date_of_birth", "password", "password_confirmation")
OMNIAUTH_KEY = "omniauth_data"


def _after_sign_in(forwarding_url):
    return redirect(forwarding_url or url_for("web.index"))


@auth_bp.get("/sign_in", endpoint="sign_in")
def sign_in_form():
    if current_user():
        return redirect(url_for("web.index"))
    return render_template("sessions/new.html", email="")


@auth_bp.post("/sign_in")
def sign_in_submit():
    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""
    try:
        user = AuthService.authenticate(email, password)
    except ValueError as e:
        flash(str(e), "alert")
        return render_template("sessions/new.html", email=email), 422

    forwarding_url = sign_in(user)
    current_app.logger.info(f"[auth] user id={user.id} signed in")
    flash("Signed in successfully.", "notice")
    return _after_sign_in(forwarding_url)


@auth_bp.route("/sign_out", methods=["POST", "DELETE"])
def sign_out_submit():
    sign_out()
    flash("Signed out successfully.", "notice")
    return redirect(url_for("web.index"), code=303)


@auth_bp.get("/sign_up")
def sign_up_form():
    return render_template("registrations/new.html", form={}, errors=[])


@auth_bp.post("/sign_up")
def sign_up_submit():
    data = {key: request.form.get(key) for key in SIGN_UP_FIELDS if key in request.form}
    try:
        user = AuthService.register(data)
    except (ValidationError, PersistenceError) as e:
        errors = e.full_messages() if isinstance(e, ValidationError) else [str(e)]
        return render_template("registrations/new.html", form=data, errors=errors), 422

    forwarding_url = sign_in(user)
    flash("Welcome! You have signed up successfully.", "notice")
    return _after_sign_in(forwarding_url)


@auth_bp.get("/auth/google_oauth2/callback")
def google_oauth2_callback():
    """Finish a Google sign in.

    The payload is verified upstream and handed over in the WSGI environ.
    """
    auth = request.environ.get("omniauth.auth")
    if not auth:
        flash("Could not authenticate you from Google.", "alert")
        return redirect(url_for("auth.sign_in"))

    user = AuthService.find_for_oauth(auth)
    if user:
        forwarding_url = sign_in(user)
        current_app.logger.info(f"[auth] user id={user.id} signed in via {auth.get('provider')}")
        flash("Successfully authenticated from Google account.", "notice")
        return _after_sign_in(forwarding_url)

    session[OMNIAUTH_KEY] = AuthService.omniauth_session_data(auth)
    return redirect(url_for("auth.new_with_omniauth"))


@auth_bp.get("/sign_up/omniauth")
def new_with_omniauth():
    omniauth_data = session.get(OMNIAUTH_KEY)
    if not omniauth_data:
        return redirect(url_for("auth.sign_up_form"))
    return render_template(
        "registrations/new_with_omniauth.html",
        omniauth=omniauth_data,
        form={"name": omniauth_data.get("name")},
        errors=[],
    )


@auth_bp.post("/sign_up/omniauth")
def create_with_omniauth():
    omniauth_data = session.get(OMNIAUTH_KEY)
    if not omniauth_data:
        return redirect(url_for("auth.sign_up_form"))

    data = {key: request.form.get(key) for key in SIGN_UP_FIELDS if key in request.form}
    try:
        user = AuthService.register_with_omniauth(omniauth_data, data)
    except (ValidationError, PersistenceError) as e:
        errors = e.full_messages() if isinstance(e, ValidationError) else [str(e)]
        return render_template(
            "registrations/new_with_omniauth.html",
            omniauth=omniauth_data, form=data, errors=errors,
        ), 422

    session.pop(OMNIAUTH_KEY, None)
    forwarding_url = sign_in(user)
    flash("Welcome! You have signed up successfully.", "notice")
    return _after_sign_in(forwarding_url)


def _user_json(user, role=None):
    return {"id": user.id, "name": user.name, "email": user.email, "role": role or user.role}


@auth_api_bp.post("/register", endpoint="register")
def register():
    data = request.get_json() or {}
    try:
        # role is never taken from the request
        user = AuthService.register(data, role="member")
        return jsonify({"success": True, "data": _user_json(user)}), 201
    except ValidationError as e:
        return jsonify({"success": False, "message": "Validation failed", "errors": e.errors}), 422
    except PersistenceError as e:
        return jsonify({"success": False, "message": str(e)}), 400


@auth_api_bp.post("/login", endpoint="login")
def login():
    data = request.get_json() or {}
    try:
        token, user = AuthService.login(
            (data.get("email") or "").strip(),
            data.get("password") or ""
        )
        return jsonify({
            "success": True,
            "access_token": token,
            "user": _user_json(user)
        })
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 401


@auth_api_bp.get("/me", endpoint="me")
@jwt_required()
def me():
    user = UserRepo.get_by_id(int(get_jwt_identity()))
    if not user:
        return jsonify({"success": False, "message": "User not found"}), 404
    return jsonify({"success": True, "user": _user_json(user, get_jwt().get("role"))})
