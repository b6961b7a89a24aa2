"""Append-only finance ledger.

Rows are only ever inserted here; balances are derived by summing CREDIT and
DEBIT amounts per account and are never stored.
"""

from decimal import Decimal

from sqlalchemy import func

from extensions import db
from logging_config import get_logger
from models.finance import Finance, FINANCE_TYPES

logger = get_logger(__name__)

CREDIT = "CREDIT"
DEBIT = "DEBIT"

CENTS = Decimal("0.01")


def to_money(value):
    return Decimal(value or 0).quantize(CENTS)


def record_entry(account_id, amount, entry_type, description, reference=None,
                 booking_id=None, excess_id=None, bank_card_id=None):
    """Stage one ledger row in the current session; the caller commits."""
    if entry_type not in FINANCE_TYPES:
        raise ValueError(f"Unknown finance type: {entry_type}")

    entry = Finance(
        account_id=account_id,
        amount=to_money(amount),
        type=entry_type,
        description=description,
        reference=reference,
        booking_id=booking_id,
        excess_id=excess_id,
        bank_card_id=bank_card_id,
    )
    db.session.add(entry)
    logger.info("Ledger %s of %s staged for account %s (%s)", entry_type, entry.amount, account_id, reference or description)
    return entry


def list_entries(account_id, entry_type=None):
    query = Finance.query.filter(Finance.account_id == account_id)
    if entry_type:
        query = query.filter(Finance.type == entry_type)
    return query.order_by(Finance.created_at.desc(), Finance.id.desc()).all()


def summarize(account_id):
    totals = dict(
        db.session.query(Finance.type, func.sum(Finance.amount))
        .filter(Finance.account_id == account_id)
        .group_by(Finance.type)
        .all()
    )
    total_credit = to_money(totals.get(CREDIT))
    total_debit = to_money(totals.get(DEBIT))
    return {
        "total_credit": total_credit,
        "total_debit": total_debit,
        "balance": total_credit - total_debit,
    }


def balance_for(account_id):
    return summarize(account_id)["balance"]


def has_credit_for_excess(excess_id):
    return db.session.query(
        Finance.query.filter(Finance.excess_id == excess_id, Finance.type == CREDIT).exists()
    ).scalar()
