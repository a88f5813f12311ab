from flask import Blueprint, jsonify, request, current_app

from library_app.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from library_app.repositories.book_repo import BookRepo
from library_app.services.book_service import BookService
from library_app.services.borrow_cart import BorrowCart
from library_app.services.borrow_service import BorrowService
from library_app.utils.auth import current_user, login_required
from library_app.utils.serializers import book_json, borrow_request_json
from library_app.utils.validation import parse_date

web_api_bp = Blueprint("web_api", __name__, url_prefix="/web/api")


def _json_error(message, code=400, errors=None):
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return jsonify(body), code


def _cart_json(cart: BorrowCart):
    lines = []
    for entry in cart.entries():
        book = BookRepo.get(entry["book_id"])
        lines.append({
            "book_id": entry["book_id"],
            "quantity": entry["quantity"],
            "title": book.title if book else None,
            "available_quantity": book.available_quantity if book else 0,
        })
    return {"items": lines, "total_quantity": cart.total_quantity()}


# -----------------------------
# Borrow cart
# -----------------------------
@web_api_bp.get("/borrow-cart")
def borrow_cart_show():
    return jsonify({"success": True, "data": _cart_json(BorrowCart())})


@web_api_bp.post("/borrow-cart")
def borrow_cart_add():
    data = request.get_json(silent=True) or {}
    try:
        book = BookService.get_book(int(data.get("book_id")))
    except NotFoundError as e:
        return _json_error(str(e), 404)
    except (TypeError, ValueError):
        return _json_error("book_id is required", 400)

    cart = BorrowCart()
    try:
        cart.add(book.id, data.get("quantity", 1))
    except ValidationError as e:
        return _json_error("Validation failed", 422, e.errors)
    return jsonify({"success": True, "data": _cart_json(cart)}), 201


@web_api_bp.delete("/borrow-cart/<int:book_id>")
def borrow_cart_remove(book_id: int):
    cart = BorrowCart()
    if not cart.remove(book_id):
        return _json_error("Book is not in the borrow cart", 404)
    return jsonify({"success": True, "data": _cart_json(cart)})


@web_api_bp.post("/borrow-cart/checkout")
@login_required
def borrow_cart_checkout():
    data = request.get_json(silent=True) or {}
    cart = BorrowCart()
    try:
        borrow_request = BorrowService.checkout(
            current_user().id,
            cart.entries(),
            start_date=parse_date(data.get("start_date"), "start_date"),
            end_date=parse_date(data.get("end_date"), "end_date"),
        )
    except ValidationError as e:
        return _json_error("Validation failed", 422, e.errors)
    except NotFoundError as e:
        return _json_error(str(e), 404)
    except ConflictError as e:
        return _json_error(str(e), 409)
    except PersistenceError as e:
        return _json_error(str(e), 500)

    cart.clear()
    return jsonify({"success": True, "data": borrow_request_json(borrow_request)}), 201


@web_api_bp.get("/borrow-requests/my")
@login_required
def borrow_requests_my():
    requests = BorrowService.list_for_user(current_user().id)
    return jsonify({"success": True, "data": [borrow_request_json(r) for r in requests]})


# -----------------------------
# Books
# -----------------------------
@web_api_bp.get("/books/most-borrowed")
def books_most_borrowed():
    try:
        rows = BookService.most_borrowed(
            year=request.args.get("year"),
            month=request.args.get("month"),
            limit=request.args.get("limit", type=int),
        )
    except ValidationError as e:
        return _json_error("Validation failed", 422, e.errors)

    current_app.logger.debug(f"[books] most borrowed rows={len(rows)}")
    return jsonify({"success": True, "data": [book_json(b, count) for b, count in rows]})


@web_api_bp.get("/books/search")
def books_search():
    search_type = BookService.normalize_search_type(request.args.get("search_type"))
    books = BookService.search(request.args.get("q", ""), search_type)
    return jsonify({
        "success": True,
        "search_type": search_type.value,
        "data": [book_json(b) for b in books],
    })
