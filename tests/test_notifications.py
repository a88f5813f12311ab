from datetime import date, timedelta

from library_app.extensions import mail
from library_app.models.notification_log import NotificationLog
from library_app.services.mail_service import MailService
from library_app.services.notification_service import NotificationService
from library_app.tasks.return_reminder import run_return_reminder_job


def test_reminds_each_ending_request_once(make_user, make_book, make_borrow_request):
    today = date.today()
    user = make_user(email="reader@example.com")
    book = make_book(title="Dune")
    ending = make_borrow_request(user, [(book, 1)], today, end_date=today + timedelta(days=1))
    make_borrow_request(user, [(book, 1)], today, end_date=today + timedelta(days=10))

    with mail.record_messages() as outbox:
        first = NotificationService.send_return_reminders(today)
        second = NotificationService.send_return_reminders(today)

    assert first == {"due": 1, "sent": 1, "skipped": 0, "failed": 0}
    assert second == {"due": 1, "sent": 0, "skipped": 1, "failed": 0}
    assert len(outbox) == 1
    assert "Dune x1" in outbox[0].body
    log = NotificationLog.query.one()
    assert (log.borrow_request_id, log.type) == (ending.id, "return_reminder")


def test_failed_reminders_are_retried(make_user, make_book, make_borrow_request, monkeypatch):
    today = date.today()
    make_borrow_request(make_user(), [(make_book(), 1)], today, end_date=today)
    monkeypatch.setattr(MailService, "send_email", staticmethod(lambda *args: (False, "smtp down")))

    assert NotificationService.send_return_reminders(today)["failed"] == 1
    monkeypatch.undo()
    assert NotificationService.send_return_reminders(today)["sent"] == 1


def test_job_runs_inside_its_own_context(app):
    result = run_return_reminder_job(app)
    assert result == {"due": 0, "sent": 0, "skipped": 0, "failed": 0}


def test_endpoint_is_admin_only(client, make_user, jwt_headers):
    member = jwt_headers(make_user())
    assert client.post("/notifications/run-return-reminders", headers=member).status_code == 403

    admin = jwt_headers(make_user(role="admin"))
    res = client.post("/notifications/run-return-reminders", headers=admin)
    assert res.status_code == 200
    assert res.get_json()["data"]["due"] == 0
