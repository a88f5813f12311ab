from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from library_app.services.notification_service import NotificationService
from library_app.utils.decorators import role_required

notif_bp = Blueprint("notifications", __name__, url_prefix="/notifications")


@notif_bp.post("/run-return-reminders")
@jwt_required()
@role_required("admin")
def run_return_reminders():
    result = NotificationService.send_return_reminders()
    return jsonify({"success": True, "message": "Return reminders sent", "data": result})
