from library_app.models.notification_log import NotificationLog


class NotificationRepo:
    @staticmethod
    def already_sent(borrow_request_id: int, notif_type: str = "return_reminder") -> bool:
        return NotificationLog.query.filter_by(
            borrow_request_id=borrow_request_id, type=notif_type, success=True
        ).first() is not None
