from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from extensions import db
from errors import NotFoundError
from models.account import Account
from models.bank_card import BankCard
from policies import AuthContext, authorize
from schemas import BankCardCreate, BankCardUpdate, CardTransaction
from services import bank_cards as card_service
from logging_config import get_logger

bank_cards_bp = Blueprint("bank_cards", __name__)

logger = get_logger(__name__)


#-------------------------------------------------------
# List / create
@bank_cards_bp.route("", methods=["GET"])
@login_required
def list_cards():
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "bank_card", "list")

    account_id = request.args.get("user_id", type=int) or request.args.get("userId", type=int) or ctx.account_id
    cards = (
        BankCard.query.filter_by(account_id=account_id)
        .order_by(BankCard.created_at.desc(), BankCard.id.desc())
        .all()
    )
    return jsonify([c.to_dict() for c in cards])


@bank_cards_bp.route("", methods=["POST"])
@login_required
def create_card():
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "bank_card", "create")
    data = BankCardCreate.model_validate(request.get_json(silent=True) or {})

    account_id = ctx.account_id
    if data.account_id and data.account_id != ctx.account_id:
        authorize(ctx, "bank_card", "create_for_other")
        if db.session.get(Account, data.account_id) is None:
            raise NotFoundError("Account not found")
        account_id = data.account_id

    card = BankCard(
        account_id=account_id,
        card_number=data.card_number,
        card_holder_name=data.card_holder_name,
        expiry_date=data.expiry_date,
        cvv=data.cvv,
        balance=data.balance,
    )
    db.session.add(card)
    db.session.commit()
    logger.info("Bank card %s created for account %s", card.id, account_id)
    return jsonify(card.to_dict()), 201


#-------------------------------------------------------
# Update / delete
@bank_cards_bp.route("/<int:card_id>", methods=["PATCH"])
@login_required
def update_card(card_id):
    ctx = AuthContext.from_user(current_user)
    card = card_service.get_card(ctx, card_id, "update")
    data = BankCardUpdate.model_validate(request.get_json(silent=True) or {})

    # balance only moves through deposit/withdraw
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(card, field, value)
    db.session.commit()
    return jsonify(card.to_dict())


@bank_cards_bp.route("/<int:card_id>", methods=["DELETE"])
@login_required
def delete_card(card_id):
    ctx = AuthContext.from_user(current_user)
    card = card_service.get_card(ctx, card_id, "delete")
    if card.finances:
        # keep ledger rows pointing at a real card
        return jsonify({"error": "Bank card has ledger entries and cannot be deleted"}), 409
    db.session.delete(card)
    db.session.commit()
    return jsonify({"success": True})


#-------------------------------------------------------
# Transactions
@bank_cards_bp.route("/<int:card_id>/deposit", methods=["POST"])
@login_required
def deposit(card_id):
    ctx = AuthContext.from_user(current_user)
    data = CardTransaction.model_validate(request.get_json(silent=True) or {})
    card, entry = card_service.deposit(ctx, card_id, data.amount, data.description)
    return jsonify({"bank_card": card.to_dict(), "finance": entry.to_dict()})


@bank_cards_bp.route("/<int:card_id>/withdraw", methods=["POST"])
@login_required
def withdraw(card_id):
    ctx = AuthContext.from_user(current_user)
    data = CardTransaction.model_validate(request.get_json(silent=True) or {})
    card, entry = card_service.withdraw(ctx, card_id, data.amount, data.description)
    return jsonify({"bank_card": card.to_dict(), "finance": entry.to_dict()})
