from extensions import db
from errors import ConflictError, NotFoundError, RequestValidationError
from logging_config import get_logger
from models.account import Account
from models.bank_card import BankCard
from models.booking import Booking
from models.excess import Excess
from models.excess_action import ExcessAction
from models.finance import Finance
from models.notification import Notification
from policies import authorize
from services import bookings as booking_service

logger = get_logger(__name__)


def get_account(account_id):
    account = db.session.get(Account, account_id)
    if account is None:
        raise NotFoundError("Account not found")
    return account


def create_account(ctx, data):
    authorize(ctx, "account", "manage")
    if Account.query.filter_by(email=data.email).first():
        raise ConflictError("An account with this email already exists")

    account = Account(name=data.name, email=data.email, role=data.role, active=data.active)
    account.set_password(data.password)
    db.session.add(account)
    db.session.commit()
    logger.info("Account %s (%s) created by account %s", account.id, account.role, ctx.account_id)
    return account


def update_account(ctx, account, data):
    authorize(ctx, "account", "update", account.id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "role" in changes:
        authorize(ctx, "account", "change_role", message="Only admins can change roles")
        account.role = changes["role"]
    if "name" in changes:
        account.name = changes["name"]
    if "email" in changes and changes["email"] != account.email:
        if Account.query.filter(Account.email == changes["email"], Account.id != account.id).first():
            raise ConflictError("An account with this email already exists")
        account.email = changes["email"]
    if "password" in changes:
        account.set_password(changes["password"])

    db.session.commit()
    return account


def toggle_active(ctx, account):
    authorize(ctx, "account", "manage")
    if account.id == ctx.account_id:
        raise RequestValidationError("You cannot deactivate your own account")
    account.active = not account.active
    db.session.commit()
    logger.info("Account %s active=%s (by account %s)", account.id, account.active, ctx.account_id)
    return account


def delete_account(ctx, account):
    """Delete an account and the data it owns.

    Audit actions the account wrote on other customers' claims are part of
    their trail, so such accounts are refused (deactivate them instead).
    """
    authorize(ctx, "account", "manage")
    if account.id == ctx.account_id:
        raise RequestValidationError("You cannot delete your own account")

    foreign_actions = (
        ExcessAction.query
        .join(Excess, ExcessAction.excess_id == Excess.id)
        .join(Booking, Excess.booking_id == Booking.id)
        .filter(ExcessAction.account_id == account.id, Booking.account_id != account.id)
        .count()
    )
    if foreign_actions:
        raise ConflictError("Account has audit history on other claims; deactivate it instead")

    for booking in Booking.query.filter_by(account_id=account.id).all():
        booking_service.cascade_delete(booking)

    Finance.query.filter_by(account_id=account.id).delete(synchronize_session=False)
    BankCard.query.filter_by(account_id=account.id).delete(synchronize_session=False)
    Notification.query.filter_by(account_id=account.id).delete(synchronize_session=False)

    db.session.expire(account)
    db.session.delete(account)
    db.session.commit()
    logger.info("Account %s deleted by account %s", account.id, ctx.account_id)
