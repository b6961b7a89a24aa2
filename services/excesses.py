from datetime import date

from flask import current_app

from extensions import db
from errors import ExcessWindowClosedError, NotFoundError
from logging_config import get_logger
from models.booking import Booking
from models.excess import Excess
from policies import authorize
from services import action_logger, notifications

logger = get_logger(__name__)


def can_add_excess(end_date, today=None, window_days=60):
    """An excess may be filed once the booking has ended, for ``window_days``."""
    today = today or date.today()
    days_since_end = (today - end_date).days
    return 0 <= days_since_end <= window_days


def get_excess(ctx, excess_id, action="view"):
    excess = db.session.get(Excess, excess_id)
    if excess is None:
        raise NotFoundError("Excess not found")
    authorize(ctx, "excess", action, excess.owner_id)
    return excess


def list_excesses(ctx, booking_id=None):
    if booking_id is not None:
        booking = db.session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        authorize(ctx, "excess", "list", booking.account_id)
        query = Excess.query.filter(Excess.booking_id == booking.id)
    else:
        query = Excess.query.join(Booking, Excess.booking_id == Booking.id).filter(
            Booking.account_id == ctx.account_id)
    return query.order_by(Excess.created_at.desc(), Excess.id.desc()).all()


def create_excess(ctx, data):
    booking = db.session.get(Booking, data.booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    authorize(ctx, "excess", "create", booking.account_id)

    window = current_app.config["EXCESS_WINDOW_DAYS"]
    if not can_add_excess(booking.end_date, window_days=window):
        raise ExcessWindowClosedError(
            f"Cannot add excess before the booking ends or more than {window} days after it ended")

    excess = Excess(
        booking_id=booking.id,
        type=data.type,
        amount=data.amount,
        description=data.description or None,
        notes=data.notes or None,
        status="NEED_UPDATE",
    )
    db.session.add(excess)
    db.session.flush()

    action_logger.log_excess_created(excess, ctx.account_id, booking.contract_id)
    notifications.notify_staff(
        "EXCESS_CREATED",
        "New excess",
        f"Excess #{excess.id} ({excess.type}, {excess.amount}) was filed for contract {booking.contract_id}.",
        booking_id=booking.id,
        excess_id=excess.id,
        exclude_id=ctx.account_id,
    )

    db.session.commit()
    logger.info("Excess %s created on booking %s by account %s", excess.id, booking.id, ctx.account_id)
    return excess


def update_excess(ctx, excess_id, data):
    excess = get_excess(ctx, excess_id, "edit")
    changes = data.model_dump(exclude_unset=True)

    if "description" in changes and changes["description"] != excess.description:
        action_logger.log_description_update(excess.id, ctx.account_id, excess.description, changes["description"])
        excess.description = changes["description"]
    if "notes" in changes and changes["notes"] != excess.notes:
        action_logger.log_notes_update(excess.id, ctx.account_id, excess.notes, changes["notes"])
        excess.notes = changes["notes"]

    db.session.commit()
    return excess


def excess_details(excess):
    booking = excess.booking
    return {
        "excess": excess.to_dict(),
        "booking": booking.summary(),
        "documents": excess.documents(),
        "actions": [action.to_dict() for action in excess.actions],
    }
