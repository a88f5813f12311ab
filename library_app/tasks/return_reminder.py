from flask import current_app

from library_app.extensions import db
from library_app.services.notification_service import NotificationService


def run_return_reminder_job(app):
    """
    Sends the "borrow period ending" mail for requests whose end_date falls
    inside RETURN_REMINDER_DAYS. Already reminded requests are skipped.
    """
    with app.app_context():
        try:
            result = NotificationService.send_return_reminders()
            current_app.logger.info(
                f"[return_reminder] due={result['due']} sent={result['sent']} "
                f"skipped={result['skipped']} failed={result['failed']}"
            )
            return result
        except Exception as e:
            db.session.rollback()
            current_app.logger.exception(f"[return_reminder] error: {e}")
            return None
