from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from library_app.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from library_app.services.book_service import BookService
from library_app.services.catalog_service import CategoryService, PublisherService
from library_app.utils.decorators import role_required
from library_app.utils.serializers import book_json

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")


def _error(e: ValueError):
    if isinstance(e, ValidationError):
        return jsonify({"success": False, "message": "Validation failed", "errors": e.errors}), 422
    if isinstance(e, NotFoundError):
        return jsonify({"success": False, "message": str(e)}), 404
    if isinstance(e, ConflictError):
        return jsonify({"success": False, "message": str(e)}), 409
    if isinstance(e, PersistenceError):
        return jsonify({"success": False, "message": str(e)}), 500
    return jsonify({"success": False, "message": str(e)}), 400


def _publisher_json(p):
    return {"id": p.id, "name": p.name, "address": p.address}


def _category_json(c):
    return {"id": c.id, "name": c.name}


# -----------------------------
# Books
# -----------------------------
@catalog_bp.get("/books")
def list_books():
    books = BookService.list_books()
    return jsonify({"success": True, "data": [book_json(b) for b in books]})


@catalog_bp.get("/books/<int:book_id>")
def get_book(book_id: int):
    try:
        b = BookService.get_book(book_id)
        return jsonify({"success": True, "data": {**book_json(b), "average_rating": b.average_rating()}})
    except NotFoundError as e:
        return _error(e)


@catalog_bp.post("/books")
@jwt_required()
@role_required("admin")
def create_book():
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.create_book(data)
        return jsonify({"success": True, "data": book_json(b)}), 201
    except ValueError as e:
        return _error(e)


@catalog_bp.put("/books/<int:book_id>")
@jwt_required()
@role_required("admin")
def update_book(book_id: int):
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.update_book(book_id, data)
        return jsonify({"success": True, "data": book_json(b)})
    except ValueError as e:
        return _error(e)


@catalog_bp.delete("/books/<int:book_id>")
@jwt_required()
@role_required("admin")
def delete_book(book_id: int):
    try:
        BookService.delete_book(book_id)
        return jsonify({"success": True})
    except ValueError as e:
        return _error(e)


# -----------------------------
# Publishers
# -----------------------------
@catalog_bp.get("/publishers")
def list_publishers():
    return jsonify({"success": True, "data": [_publisher_json(p) for p in PublisherService.list_publishers()]})


@catalog_bp.post("/publishers")
@jwt_required()
@role_required("admin")
def create_publisher():
    data = request.get_json(silent=True) or {}
    try:
        p = PublisherService.create_publisher(data)
        return jsonify({"success": True, "data": _publisher_json(p)}), 201
    except ValueError as e:
        return _error(e)


@catalog_bp.put("/publishers/<int:publisher_id>")
@jwt_required()
@role_required("admin")
def update_publisher(publisher_id: int):
    data = request.get_json(silent=True) or {}
    try:
        p = PublisherService.update_publisher(publisher_id, data)
        return jsonify({"success": True, "data": _publisher_json(p)})
    except ValueError as e:
        return _error(e)


@catalog_bp.delete("/publishers/<int:publisher_id>")
@jwt_required()
@role_required("admin")
def delete_publisher(publisher_id: int):
    try:
        PublisherService.delete_publisher(publisher_id)
        return jsonify({"success": True})
    except ValueError as e:
        return _error(e)


# -----------------------------
# Categories
# -----------------------------
@catalog_bp.get("/categories")
def list_categories():
    return jsonify({"success": True, "data": [_category_json(c) for c in CategoryService.list_categories()]})


@catalog_bp.post("/categories")
@jwt_required()
@role_required("admin")
def create_category():
    data = request.get_json(silent=True) or {}
    try:
        c = CategoryService.create_category(data)
        return jsonify({"success": True, "data": _category_json(c)}), 201
    except ValueError as e:
        return _error(e)


@catalog_bp.delete("/categories/<int:category_id>")
@jwt_required()
@role_required("admin")
def delete_category(category_id: int):
    try:
        CategoryService.delete_category(category_id)
        return jsonify({"success": True})
    except ValueError as e:
        return _error(e)
