from __future__ import annotations

from datetime import datetime
from flask import current_app
from flask_mail import Message

from library_app.extensions import db, mail
from library_app.models.notification_log import NotificationLog


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            current_app.logger.warning(f"[mail] could not send '{subject}' to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def log_notification(
        borrow_request_id: int | None,
        notif_type: str,
        to_email: str | None,
        message: str,
        success: bool,
        error: str | None = None,
        commit: bool = False,
    ) -> NotificationLog:
        row = NotificationLog(
            borrow_request_id=borrow_request_id,
            type=notif_type,
            email=to_email,
            message=message,
            success=bool(success),
            error_message=error,
            sent_at=datetime.utcnow(),
        )
        db.session.add(row)
        if commit:
            db.session.commit()
        return row

    @staticmethod
    def send_welcome_mail(user) -> bool:
        subject = "Welcome to the library"
        body = (
            f"Hi {user.name},\n\n"
            "Your library account has been created.\n"
            "You can now borrow books, follow authors and write reviews.\n"
        )
        ok, _err = MailService.send_email(user.email, subject, body)
        return ok

    @staticmethod
    def _item_lines(borrow_request) -> str:
        return "\n".join(
            f"  - {item.book.title if item.book else f'Book #{item.book_id}'} x{item.quantity}"
            for item in borrow_request.items
        )

    @staticmethod
    def send_borrow_request_mail(borrow_request) -> bool:
        """Confirmation for a checked-out cart. Logged, committed by the caller."""
        user = borrow_request.user
        to_email = user.email if user else None

        subject = "Library: borrow request received"
        body = (
            f"Hi {user.name if user else 'reader'},\n\n"
            f"We received your borrow request #{borrow_request.id}.\n"
            f"{MailService._item_lines(borrow_request)}\n\n"
            f"Borrow period: {borrow_request.start_date} - {borrow_request.end_date}\n"
        )

        if not to_email:
            MailService.log_notification(borrow_request.id, "borrow_confirmation", None,
                                         "User email not found", False, "missing_email")
            return False

        ok, err = MailService.send_email(to_email, subject, body)
        MailService.log_notification(
            borrow_request_id=borrow_request.id,
            notif_type="borrow_confirmation",
            to_email=to_email,
            message="Mail sent" if ok else "Mail could not be sent",
            success=ok,
            error=err,
        )
        return ok

    @staticmethod
    def send_return_reminder_mail(borrow_request) -> bool:
        user = borrow_request.user
        to_email = user.email if user else None

        subject = "Library: your borrow period is ending"
        body = (
            f"Hi {user.name if user else 'reader'},\n\n"
            f"Borrow request #{borrow_request.id} ends on {borrow_request.end_date}.\n"
            f"{MailService._item_lines(borrow_request)}\n\n"
            "Please remember to bring the books back.\n"
        )

        if not to_email:
            MailService.log_notification(borrow_request.id, "return_reminder", None,
                                         "User email not found", False, "missing_email")
            return False

        ok, err = MailService.send_email(to_email, subject, body)
        MailService.log_notification(
            borrow_request_id=borrow_request.id,
            notif_type="return_reminder",
            to_email=to_email,
            message="Mail sent" if ok else "Mail could not be sent",
            success=ok,
            error=err,
        )
        return ok
