from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from extensions import db
from errors import NotFoundError
from models.account import Account
from models.notification import Notification
from policies import AuthContext, authorize
from schemas import NotificationCreate
from services import notifications as notification_service

notifications_bp = Blueprint("notifications", __name__)


@notifications_bp.route("", methods=["GET"])
@login_required
def list_notifications():
    notifs = (
        Notification.query
        .filter_by(account_id=current_user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(50)
        .all()
    )
    return jsonify([n.to_dict() for n in notifs])


@notifications_bp.route("", methods=["POST"])
@login_required
def create_notification():
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "notification", "create")
    data = NotificationCreate.model_validate(request.get_json(silent=True) or {})

    if db.session.get(Account, data.account_id) is None:
        raise NotFoundError("Account not found")

    notif = notification_service.notify(
        data.account_id, data.type, data.title, data.message,
        booking_id=data.booking_id, excess_id=data.excess_id,
    )
    db.session.commit()
    return jsonify(notif.to_dict()), 201


@notifications_bp.route("/<int:notification_id>/read", methods=["PATCH", "POST"])
@login_required
def mark_read(notification_id):
    ctx = AuthContext.from_user(current_user)
    notif = db.session.get(Notification, notification_id)
    if notif is None:
        raise NotFoundError("Notification not found")
    authorize(ctx, "notification", "read", notif.account_id)

    notif.is_read = True
    db.session.commit()
    return jsonify(notif.to_dict())


@notifications_bp.route("/mark-all-read", methods=["POST"])
@login_required
def mark_all_read():
    updated = notification_service.mark_all_read(current_user.id)
    return jsonify({"updated": updated})


@notifications_bp.route("/unread-count")
@login_required
def unread_count():
    return jsonify({"count": notification_service.unread_count(current_user.id)})
