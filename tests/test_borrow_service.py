from datetime import date, timedelta

import pytest

from library_app.errors import ConflictError, NotFoundError, ValidationError
from library_app.extensions import db, mail
from library_app.models.borrow_request import BorrowRequest
from library_app.models.notification_log import NotificationLog
from library_app.services.borrow_service import BorrowService
from library_app.services.mail_service import MailService


def test_checkout_reserves_stock_and_records_the_request(make_user, make_book):
    user = make_user()
    dune = make_book(title="Dune", total_quantity=5)
    emma = make_book(title="Emma", total_quantity=2)

    borrow_request = BorrowService.checkout(user.id, [
        {"book_id": dune.id, "quantity": 2},
        {"book_id": emma.id, "quantity": 2},
    ])

    assert borrow_request.request_date == date.today()
    assert borrow_request.start_date == date.today()
    assert borrow_request.end_date == date.today() + timedelta(days=14)
    assert [(i.book_id, i.quantity) for i in borrow_request.items] == [(dune.id, 2), (emma.id, 2)]
    assert (dune.available_quantity, dune.borrow_count) == (3, 2)
    assert (emma.available_quantity, emma.borrow_count) == (0, 2)


def test_checkout_merges_repeated_lines(make_user, make_book):
    book = make_book(total_quantity=5)
    borrow_request = BorrowService.checkout(make_user().id, [
        {"book_id": book.id, "quantity": 1},
        {"book_id": book.id, "quantity": 2},
    ])
    assert borrow_request.total_quantity == 3
    assert len(borrow_request.items) == 1


def test_checkout_is_all_or_nothing(make_user, make_book):
    user = make_user()
    plenty = make_book(total_quantity=5)
    scarce = make_book(total_quantity=1)

    with pytest.raises(ConflictError):
        BorrowService.checkout(user.id, [
            {"book_id": plenty.id, "quantity": 2},
            {"book_id": scarce.id, "quantity": 2},
        ])

    assert (plenty.available_quantity, plenty.borrow_count) == (5, 0)
    assert scarce.available_quantity == 1
    assert BorrowRequest.query.count() == 0


def test_checkout_of_missing_book(make_user):
    with pytest.raises(NotFoundError):
        BorrowService.checkout(make_user().id, [{"book_id": 999, "quantity": 1}])
    assert BorrowRequest.query.count() == 0


def test_checkout_of_empty_cart(make_user):
    with pytest.raises(ValidationError) as exc:
        BorrowService.checkout(make_user().id, [])
    assert "borrow_cart" in exc.value.errors


def test_checkout_rejects_backwards_dates(make_user, make_book):
    book = make_book()
    start = date.today() + timedelta(days=5)
    with pytest.raises(ValidationError) as exc:
        BorrowService.checkout(make_user().id, [{"book_id": book.id, "quantity": 1}],
                               start_date=start, end_date=start - timedelta(days=1))
    assert "end_date" in exc.value.errors
    assert book.available_quantity == 3


def test_checkout_never_goes_below_zero(make_user, make_book):
    user = make_user()
    book = make_book(total_quantity=2)
    BorrowService.checkout(user.id, [{"book_id": book.id, "quantity": 2}])

    with pytest.raises(ConflictError):
        BorrowService.checkout(user.id, [{"book_id": book.id, "quantity": 1}])
    assert book.available_quantity == 0


def test_checkout_sends_a_confirmation_mail(make_user, make_book):
    user = make_user(email="reader@example.com")
    book = make_book(title="Dune")

    with mail.record_messages() as outbox:
        borrow_request = BorrowService.checkout(user.id, [{"book_id": book.id, "quantity": 1}])

    assert len(outbox) == 1
    assert outbox[0].recipients == ["reader@example.com"]
    assert "Dune x1" in outbox[0].body
    log = NotificationLog.query.filter_by(borrow_request_id=borrow_request.id).one()
    assert (log.type, log.success) == ("borrow_confirmation", True)


def test_mail_failure_keeps_the_checkout(make_user, make_book, monkeypatch):
    monkeypatch.setattr(MailService, "send_email", staticmethod(lambda *args: (False, "smtp down")))
    user = make_user()
    book = make_book()

    borrow_request = BorrowService.checkout(user.id, [{"book_id": book.id, "quantity": 1}])

    db.session.expire_all()
    assert db.session.get(BorrowRequest, borrow_request.id) is not None
    assert book.available_quantity == 2
    log = NotificationLog.query.one()
    assert (log.success, log.error_message) == (False, "smtp down")
