from datetime import datetime, timedelta, timezone

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from extensions import db
from models.account import Account
from models.booking import Booking
from models.excess import Excess
from models.excess_action import ExcessAction
from models.finance import Finance
from policies import AuthContext, authorize
from schemas import AccountCreate, AccountUpdate
from services import accounts as account_service

admin_bp = Blueprint("admin", __name__)


# Middleware: staff only
@admin_bp.before_request
def restrict_to_staff():
    if not current_user.is_authenticated:
        return jsonify({"error": "Unauthorized"}), 401
    if not AuthContext.from_user(current_user).is_staff:
        return jsonify({"error": "Forbidden"}), 403


#-------------------------------------------------------
# Bookings / excesses overview
@admin_bp.route("/all-bookings")
@login_required
def all_bookings():
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "booking", "view_all")

    query = Booking.query
    status = request.args.get("status")
    if status:
        query = query.filter(Booking.status == status)
    bookings = query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    return jsonify([b.to_dict(include_customer=True) for b in bookings])


@admin_bp.route("/all-excesses")
@login_required
def all_excesses():
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "excess", "view_all")

    query = Excess.query
    status = request.args.get("status")
    if status:
        query = query.filter(Excess.status == status.upper())
    excesses = query.order_by(Excess.created_at.desc(), Excess.id.desc()).all()
    return jsonify([e.to_dict(include_booking=True) for e in excesses])


@admin_bp.route("/users/<int:account_id>/new-bookings")
@login_required
def new_bookings(account_id):
    """Bookings created by an account within the last hour."""
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "booking", "view_all")
    account_service.get_account(account_id)

    since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=1)
    count = Booking.query.filter(Booking.account_id == account_id, Booking.created_at >= since).count()
    return jsonify({"account_id": account_id, "count": count})


#-------------------------------------------------------
# User management
@admin_bp.route("/users", methods=["GET"])
@login_required
def list_users():
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "account", "manage")

    query = Account.query
    role = request.args.get("role")
    if role:
        query = query.filter(Account.role == role.upper())
    search = request.args.get("q", "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(db.or_(Account.name.ilike(pattern), Account.email.ilike(pattern)))
    return jsonify([a.to_dict() for a in query.order_by(Account.id).all()])


@admin_bp.route("/users", methods=["POST"])
@login_required
def create_user():
    ctx = AuthContext.from_user(current_user)
    data = AccountCreate.model_validate(request.get_json(silent=True) or {})
    account = account_service.create_account(ctx, data)
    return jsonify(account.to_dict()), 201


@admin_bp.route("/users/<int:account_id>", methods=["GET"])
@login_required
def get_user(account_id):
    ctx = AuthContext.from_user(current_user)
    authorize(ctx, "account", "manage")
    account = account_service.get_account(account_id)

    data = account.to_dict()
    data["bookings"] = [b.to_dict() for b in account.bookings]
    data["finances"] = [
        f.to_dict() for f in Finance.query.filter_by(account_id=account.id).order_by(Finance.id.desc())
    ]
    data["actions"] = [
        a.to_dict() for a in ExcessAction.query.filter_by(account_id=account.id).order_by(ExcessAction.id.desc())
    ]
    return jsonify(data)


@admin_bp.route("/users/<int:account_id>", methods=["PATCH"])
@login_required
def update_user(account_id):
    ctx = AuthContext.from_user(current_user)
    account = account_service.get_account(account_id)
    data = AccountUpdate.model_validate(request.get_json(silent=True) or {})
    account = account_service.update_account(ctx, account, data)
    return jsonify(account.to_dict())


@admin_bp.route("/users/<int:account_id>/toggle-active", methods=["POST"])
@login_required
def toggle_active(account_id):
    ctx = AuthContext.from_user(current_user)
    account = account_service.get_account(account_id)
    account = account_service.toggle_active(ctx, account)
    return jsonify(account.to_dict())


@admin_bp.route("/users/<int:account_id>", methods=["DELETE"])
@login_required
def delete_user(account_id):
    ctx = AuthContext.from_user(current_user)
    account = account_service.get_account(account_id)
    account_service.delete_account(ctx, account)
    return jsonify({"message": "Account deleted successfully"})
