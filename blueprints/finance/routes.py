from datetime import datetime

from flask import Blueprint, jsonify, request, send_file
from flask_login import login_required, current_user
from extensions import db
from errors import NotFoundError, RequestValidationError
from models.account import Account
from models.finance import FINANCE_TYPES
from policies import AuthContext, authorize
from services import ledger, reports

finance_bp = Blueprint("finance", __name__)


def _target_account(ctx):
    """Session account, or the ``user_id`` account when staff asks for it."""
    user_id = request.args.get("user_id", type=int) or request.args.get("userId", type=int)
    if not user_id or user_id == ctx.account_id:
        return ctx.account_id
    authorize(ctx, "finance", "view", owner_id=None)
    if db.session.get(Account, user_id) is None:
        raise NotFoundError("Account not found")
    return user_id


def _entry_type():
    entry_type = request.args.get("type")
    if entry_type:
        entry_type = entry_type.upper()
        if entry_type not in FINANCE_TYPES:
            raise RequestValidationError("Invalid finance type", details={"allowed": list(FINANCE_TYPES)})
    return entry_type


def _summary_json(summary):
    return {
        "total_credit": str(summary["total_credit"]),
        "total_debit": str(summary["total_debit"]),
        "balance": str(summary["balance"]),
    }


@finance_bp.route("", methods=["GET"])
@login_required
def list_finances():
    ctx = AuthContext.from_user(current_user)
    account_id = _target_account(ctx)

    entries = ledger.list_entries(account_id, _entry_type())
    summary = ledger.summarize(account_id)

    return jsonify({
        "finances": [f.to_dict() for f in entries],
        "summary": _summary_json(summary),
    })


@finance_bp.route("/summary")
@login_required
def finance_summary():
    ctx = AuthContext.from_user(current_user)
    account_id = _target_account(ctx)
    return jsonify(_summary_json(ledger.summarize(account_id)))


# Excel export of the ledger
@finance_bp.route("/export")
@login_required
def export_finances():
    ctx = AuthContext.from_user(current_user)
    account_id = _target_account(ctx)
    account = db.session.get(Account, account_id)

    entries = ledger.list_entries(account_id, _entry_type())
    output = reports.finance_workbook(account, entries, ledger.summarize(account_id))

    filename = f"Finance_{account.id}_{datetime.now().strftime('%Y-%m-%d_%H-%M')}.xlsx"
    return send_file(output, as_attachment=True, download_name=filename, mimetype=reports.XLSX_MIMETYPE)
