from functools import wraps
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity
from flask import jsonify, request, current_app


def role_required(*roles):
    """Token guard for the JSON API; the role is read from the token claims."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            role = get_jwt().get("role")
            if role not in roles:
                current_app.logger.info(
                    f"[auth] {request.method} {request.path} refused for user id={get_jwt_identity()} role={role}"
                )
                return jsonify({"success": False, "message": "Forbidden"}), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator
