from flask import Blueprint, jsonify, request
from flask_login import login_user, logout_user, login_required, current_user
from models.account import Account
from policies import AuthContext
from schemas import AccountUpdate, LoginBody
from services import accounts as account_service
from logging_config import get_logger

auth_bp = Blueprint("auth", __name__)

logger = get_logger(__name__)


# Login
@auth_bp.route("/login", methods=["POST"])
def login():
    body = LoginBody.model_validate(request.get_json(silent=True) or {})

    account = Account.query.filter_by(email=body.email).first()
    if not account or not account.check_password(body.password):
        logger.info("Failed login for %s", body.email)
        return jsonify({"error": "Invalid email or password"}), 401

    if not login_user(account):
        logger.info("Login refused for inactive account %s", account.id)
        return jsonify({"error": "Account is disabled"}), 403

    return jsonify(account.to_dict())


# Logout
@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())


@auth_bp.route("/me", methods=["PATCH"])
@login_required
def update_me():
    ctx = AuthContext.from_user(current_user)
    data = AccountUpdate.model_validate(request.get_json(silent=True) or {})
    account = account_service.update_account(ctx, current_user._get_current_object(), data)
    return jsonify(account.to_dict())
