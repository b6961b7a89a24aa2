from extensions import db
from logging_config import get_logger
from models.account import Account
from models.notification import Notification
from policies import STAFF_ROLES

logger = get_logger(__name__)


def notify(account_id, type, title, message, booking_id=None, excess_id=None):
    notif = Notification(
        account_id=account_id,
        type=type,
        title=title,
        message=message,
        booking_id=booking_id,
        excess_id=excess_id,
    )
    db.session.add(notif)
    return notif


def notify_staff(type, title, message, booking_id=None, excess_id=None, exclude_id=None):
    """Stage one notification per active ADMIN/EMPLOYEE account."""
    recipients = Account.query.filter(Account.role.in_(STAFF_ROLES), Account.active.is_(True)).all()
    created = [
        notify(acc.id, type, title, message, booking_id=booking_id, excess_id=excess_id)
        for acc in recipients
        if acc.id != exclude_id
    ]
    logger.debug("Staged %d staff notifications (%s)", len(created), type)
    return created


def unread_count(account_id):
    return Notification.query.filter_by(account_id=account_id, is_read=False).count()


def mark_all_read(account_id):
    updated = Notification.query.filter_by(account_id=account_id, is_read=False).update({"is_read": True})
    db.session.commit()
    return updated
