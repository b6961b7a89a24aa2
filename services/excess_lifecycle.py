"""Excess status transitions.

A transition updates the claim status, appends a STATUS_CHANGED audit row,
credits the booking owner's ledger the first time the claim is approved, and
tells the owner about it. All of it is committed in one transaction: either
every write lands or none does.
"""

from extensions import db
from errors import NotFoundError, RequestValidationError
from logging_config import get_logger
from models.excess import Excess, EXCESS_STATUSES
from policies import authorize
from services import action_logger, ledger, notifications

logger = get_logger(__name__)

NEED_UPDATE = "NEED_UPDATE"
APPROVED = "APPROVED"
DECLINED = "DECLINED"

STATUS_ALIASES = {"REFUSED": DECLINED}

# target status -> policy action
TRANSITION_ACTIONS = {
    NEED_UPDATE: "request_update",
    APPROVED: "approve",
    DECLINED: "decline",
}


def normalize_status(value):
    status = (value or "").strip().upper()
    status = STATUS_ALIASES.get(status, status)
    if status not in EXCESS_STATUSES:
        raise RequestValidationError("Invalid status", details={"allowed": list(EXCESS_STATUSES)})
    return status


def change_status(ctx, excess_id, status, reason=None):
    new_status = normalize_status(status)

    excess = db.session.get(Excess, excess_id)
    if excess is None:
        raise NotFoundError("Excess not found")

    owner_id = excess.owner_id
    if new_status in (APPROVED, DECLINED):
        authorize(ctx, "excess", TRANSITION_ACTIONS[new_status], owner_id,
                  message="Only admins can approve or decline excesses")
    else:
        authorize(ctx, "excess", TRANSITION_ACTIONS[new_status], owner_id)

    previous_status = excess.status
    excess.status = new_status
    action_logger.log_status_change(excess.id, ctx.account_id, previous_status, new_status, reason)

    credit = None
    if new_status == APPROVED:
        if ledger.has_credit_for_excess(excess.id):
            logger.info("Excess %s already credited, skipping ledger entry", excess.id)
        else:
            credit = ledger.record_entry(
                owner_id,
                excess.amount,
                ledger.CREDIT,
                f"Excess approved - {excess.type}",
                reference=f"EXCESS-{excess.id}",
                booking_id=excess.booking_id,
                excess_id=excess.id,
            )

    if previous_status != new_status and owner_id != ctx.account_id:
        notifications.notify(
            owner_id,
            "EXCESS_STATUS_CHANGED",
            "Excess status updated",
            f"Your excess claim #{excess.id} ({excess.type}) is now {new_status}.",
            booking_id=excess.booking_id,
            excess_id=excess.id,
        )

    db.session.commit()
    logger.info("Excess %s moved %s -> %s by account %s", excess.id, previous_status, new_status, ctx.account_id)
    return excess, credit
