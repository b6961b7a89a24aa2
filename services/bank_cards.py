"""Bank-card balance mutation.

The stored balance is changed with a single conditional UPDATE so two
concurrent withdrawals cannot both pass the non-negative check. The mirrored
ledger row commits in the same transaction.
"""

from extensions import db
from errors import InsufficientBalanceError, NotFoundError
from logging_config import get_logger
from models.bank_card import BankCard
from policies import authorize
from services import ledger

logger = get_logger(__name__)


def get_card(ctx, card_id, action):
    card = db.session.get(BankCard, card_id)
    if card is None:
        raise NotFoundError("Bank card not found")
    authorize(ctx, "bank_card", action, card.account_id)
    return card


def deposit(ctx, card_id, amount, description):
    card = get_card(ctx, card_id, "deposit")
    amount = ledger.to_money(amount)

    BankCard.query.filter(BankCard.id == card.id).update(
        {BankCard.balance: BankCard.balance + amount}, synchronize_session=False)
    entry = ledger.record_entry(
        card.account_id, amount, ledger.CREDIT, description,
        reference="Card deposit", bank_card_id=card.id,
    )
    db.session.commit()
    db.session.refresh(card)

    logger.info("Deposit of %s on card %s by account %s", amount, card.id, ctx.account_id)
    return card, entry


def withdraw(ctx, card_id, amount, description):
    card = get_card(ctx, card_id, "withdraw")
    amount = ledger.to_money(amount)

    updated = BankCard.query.filter(BankCard.id == card.id, BankCard.balance >= amount).update(
        {BankCard.balance: BankCard.balance - amount}, synchronize_session=False)
    if not updated:
        db.session.rollback()
        logger.info("Withdrawal of %s refused on card %s: insufficient balance", amount, card_id)
        raise InsufficientBalanceError()

    entry = ledger.record_entry(
        card.account_id, amount, ledger.DEBIT, description,
        reference="Card withdrawal", bank_card_id=card.id,
    )
    db.session.commit()
    db.session.refresh(card)

    logger.info("Withdrawal of %s on card %s by account %s", amount, card.id, ctx.account_id)
    return card, entry
