from datetime import date, timedelta

from flask import current_app

from library_app.extensions import db
from library_app.repositories.borrow_request_repo import BorrowRequestRepo
from library_app.repositories.notification_repo import NotificationRepo
from library_app.services.mail_service import MailService


class NotificationService:
    @staticmethod
    def send_return_reminders(today: date = None) -> dict:
        """Mail every borrower whose request ends within the reminder window.

        A request gets at most one successful reminder; failed sends are
        retried on the next run.
        """
        today = today or date.today()
        last_day = today + timedelta(days=current_app.config["RETURN_REMINDER_DAYS"])
        ending = BorrowRequestRepo.ending_between(today, last_day)

        sent = skipped = failed = 0
        for borrow_request in ending:
            if NotificationRepo.already_sent(borrow_request.id, "return_reminder"):
                skipped += 1
                continue
            if MailService.send_return_reminder_mail(borrow_request):
                sent += 1
            else:
                failed += 1

        db.session.commit()
        return {"due": len(ending), "sent": sent, "skipped": skipped, "failed": failed}
