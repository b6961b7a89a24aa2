from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from extensions import db
from models.excess import Excess
from policies import AuthContext, can
from schemas import BookingCreate, BookingUpdate
from services import bookings as booking_service

bookings_bp = Blueprint("bookings", __name__)


#-------------------------------------------------------
# List / create
@bookings_bp.route("", methods=["GET"])
@login_required
def list_bookings():
    ctx = AuthContext.from_user(current_user)
    status = request.args.get("status")
    user_id = request.args.get("user_id", type=int) or request.args.get("userId", type=int)

    # Staff may look at another account's bookings
    account_id = ctx.account_id
    if user_id and can(ctx, "booking", "view_all"):
        account_id = user_id

    bookings = booking_service.list_bookings(account_id, status=status)
    return jsonify([b.to_dict(include_customer=True) for b in bookings])


@bookings_bp.route("", methods=["POST"])
@login_required
def create_booking():
    ctx = AuthContext.from_user(current_user)
    data = BookingCreate.model_validate(request.get_json(silent=True) or {})
    booking = booking_service.create_booking(ctx, data)
    return jsonify(booking.to_dict()), 201


#-------------------------------------------------------
# Single booking
@bookings_bp.route("/<int:booking_id>", methods=["GET"])
@login_required
def get_booking(booking_id):
    ctx = AuthContext.from_user(current_user)
    booking = booking_service.get_booking(ctx, booking_id, "view")

    data = booking.to_dict(include_customer=True)
    data["excesses"] = [e.to_dict() for e in booking.excesses]
    data["finances"] = [
        {"id": f.id, "type": f.type, "amount": str(f.amount), "description": f.description,
         "reference": f.reference, "created_at": f.created_at.isoformat() if f.created_at else None}
        for f in booking.finances
    ]
    return jsonify(data)


@bookings_bp.route("/<int:booking_id>", methods=["PATCH"])
@login_required
def update_booking(booking_id):
    ctx = AuthContext.from_user(current_user)
    data = BookingUpdate.model_validate(request.get_json(silent=True) or {})
    booking = booking_service.update_booking(ctx, booking_id, data)
    return jsonify(booking.to_dict())


@bookings_bp.route("/<int:booking_id>", methods=["DELETE"])
@login_required
def delete_booking(booking_id):
    ctx = AuthContext.from_user(current_user)
    removed = booking_service.delete_booking(ctx, booking_id)
    return jsonify({"message": "Booking deleted successfully", "removed": removed})


@bookings_bp.route("/<int:booking_id>/excesses-count")
@login_required
def excesses_count(booking_id):
    ctx = AuthContext.from_user(current_user)
    booking = booking_service.get_booking(ctx, booking_id, "view")
    count = db.session.query(Excess).filter(Excess.booking_id == booking.id).count()
    return jsonify({"count": count})
