from extensions import db
from errors import NotFoundError, RequestValidationError
from logging_config import get_logger
from models.booking import Booking
from models.excess import Excess
from models.excess_action import ExcessAction
from models.finance import Finance
from models.notification import Notification
from policies import authorize
from services import ledger, notifications

logger = get_logger(__name__)


def get_booking(ctx, booking_id, action="view"):
    booking = db.session.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    authorize(ctx, "booking", action, booking.account_id)
    return booking


def list_bookings(account_id, status=None):
    query = Booking.query.filter(Booking.account_id == account_id)
    if status:
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def create_booking(ctx, data):
    """Create a booking for the session account and charge its rental cost.

    The DEBIT row carries the daily rate as-is (not rate x days), matching
    how bookings have always been charged.
    """
    authorize(ctx, "booking", "create")

    booking = Booking(
        account_id=ctx.account_id,
        contract_id=data.contract_id,
        booking_reference=data.booking_reference or None,
        insurance_amount=data.insurance_amount,
        rental_days=data.rental_days,
        rental_type=data.rental_type,
        daily_rate=data.daily_rate,
        start_date=data.start_date,
        end_date=data.end_date,
        status="PENDING",
    )
    db.session.add(booking)
    db.session.flush()

    ledger.record_entry(
        ctx.account_id,
        data.daily_rate,
        ledger.DEBIT,
        f"Car rental charge - {booking.contract_id}",
        reference=f"BOOKING-{booking.id}",
        booking_id=booking.id,
    )
    notifications.notify_staff(
        "BOOKING_CREATED",
        "New booking",
        f"Booking {booking.contract_id} was created.",
        booking_id=booking.id,
        exclude_id=ctx.account_id,
    )

    db.session.commit()
    logger.info("Booking %s (%s) created by account %s", booking.id, booking.contract_id, ctx.account_id)
    return booking


def update_booking(ctx, booking_id, data):
    booking = get_booking(ctx, booking_id, "update")
    changes = data.model_dump(exclude_unset=True)

    start_date = changes.get("start_date", booking.start_date)
    end_date = changes.get("end_date", booking.end_date)
    if end_date <= start_date:
        raise RequestValidationError("end_date must be after start_date")

    for field, value in changes.items():
        setattr(booking, field, value)
    db.session.commit()
    return booking


def delete_booking(ctx, booking_id):
    booking = get_booking(ctx, booking_id, "delete")
    removed = cascade_delete(booking)
    db.session.commit()
    logger.info("Booking %s deleted by account %s: %s", booking_id, ctx.account_id, removed)
    return removed


def cascade_delete(booking):
    """Stage deletion of a booking together with everything hanging off it.

    Order: audit actions, finances (of excesses and of the booking),
    notifications, excesses, then the booking. The caller commits.
    """
    excess_ids = [row.id for row in db.session.query(Excess.id).filter(Excess.booking_id == booking.id)]

    removed = {"excess_actions": 0, "finances": 0, "notifications": 0}
    if excess_ids:
        removed["excess_actions"] += ExcessAction.query.filter(
            ExcessAction.excess_id.in_(excess_ids)).delete(synchronize_session=False)
        removed["finances"] += Finance.query.filter(
            Finance.excess_id.in_(excess_ids)).delete(synchronize_session=False)
        removed["notifications"] += Notification.query.filter(
            Notification.excess_id.in_(excess_ids)).delete(synchronize_session=False)

    removed["finances"] += Finance.query.filter(
        Finance.booking_id == booking.id).delete(synchronize_session=False)
    removed["notifications"] += Notification.query.filter(
        Notification.booking_id == booking.id).delete(synchronize_session=False)
    removed["excesses"] = Excess.query.filter(
        Excess.booking_id == booking.id).delete(synchronize_session=False)

    # collections may hold rows removed above
    db.session.expire(booking)
    db.session.delete(booking)
    return removed
