from flask import Blueprint, jsonify, request, send_file
from flask_login import login_required, current_user
from policies import AuthContext
from schemas import DocumentDelete, ExcessCreate, ExcessStatusChange, ExcessUpdate
from services import documents, excess_lifecycle, excesses as excess_service, reports

excesses_bp = Blueprint("excesses", __name__)


#-------------------------------------------------------
# List / create
@excesses_bp.route("", methods=["GET"])
@login_required
def list_excesses():
    ctx = AuthContext.from_user(current_user)
    booking_id = request.args.get("booking_id", type=int) or request.args.get("bookingId", type=int)
    items = excess_service.list_excesses(ctx, booking_id=booking_id)
    return jsonify([e.to_dict(include_booking=True) for e in items])


@excesses_bp.route("", methods=["POST"])
@login_required
def create_excess():
    ctx = AuthContext.from_user(current_user)
    data = ExcessCreate.model_validate(request.get_json(silent=True) or {})
    excess = excess_service.create_excess(ctx, data)
    return jsonify(excess.to_dict()), 201


@excesses_bp.route("/<int:excess_id>", methods=["PATCH"])
@login_required
def update_excess(excess_id):
    ctx = AuthContext.from_user(current_user)
    data = ExcessUpdate.model_validate(request.get_json(silent=True) or {})
    excess = excess_service.update_excess(ctx, excess_id, data)
    return jsonify(excess.to_dict())


@excesses_bp.route("/<int:excess_id>/details")
@login_required
def excess_details(excess_id):
    ctx = AuthContext.from_user(current_user)
    excess = excess_service.get_excess(ctx, excess_id, "view")
    return jsonify({"success": True, "data": excess_service.excess_details(excess)})


#-------------------------------------------------------
# Status
@excesses_bp.route("/<int:excess_id>/status", methods=["POST"])
@login_required
def change_status(excess_id):
    ctx = AuthContext.from_user(current_user)
    data = ExcessStatusChange.model_validate(request.get_json(silent=True) or {})
    excess, credit = excess_lifecycle.change_status(ctx, excess_id, data.status, data.reason)
    return jsonify({
        "success": True,
        "data": excess.to_dict(),
        "finance": credit.to_dict() if credit else None,
    })


#-------------------------------------------------------
# Documents
@excesses_bp.route("/<int:excess_id>/documents", methods=["POST"])
@login_required
def upload_documents(excess_id):
    ctx = AuthContext.from_user(current_user)
    excess = excess_service.get_excess(ctx, excess_id, "manage_documents")
    updated = documents.save_documents(ctx, excess, request.files)
    return jsonify({"success": True, "updated": updated, "data": excess.to_dict()})


@excesses_bp.route("/<int:excess_id>/documents", methods=["DELETE"])
@login_required
def delete_document(excess_id):
    ctx = AuthContext.from_user(current_user)
    excess = excess_service.get_excess(ctx, excess_id, "manage_documents")
    data = DocumentDelete.model_validate(request.get_json(silent=True) or {})
    documents.delete_document(ctx, excess, data.document_type)
    return jsonify({"success": True, "data": excess.to_dict(), "message": "Document deleted successfully"})


@excesses_bp.route("/<int:excess_id>/download")
@login_required
def download_document(excess_id):
    ctx = AuthContext.from_user(current_user)
    excess = excess_service.get_excess(ctx, excess_id, "view")
    document_type = request.args.get("type")
    if not document_type:
        return jsonify({"error": "Document type is required"}), 400

    filename, path = documents.document_path(excess, document_type)
    response = send_file(path, mimetype=documents.guess_mimetype(filename),
                         as_attachment=True, download_name=filename)
    response.headers["Cache-Control"] = "no-store"
    return response


@excesses_bp.route("/<int:excess_id>/report")
@login_required
def excess_report(excess_id):
    ctx = AuthContext.from_user(current_user)
    excess = excess_service.get_excess(ctx, excess_id, "view")
    buffer = reports.excess_document(excess)
    return send_file(buffer, as_attachment=True, download_name=f"Excess_{excess.id}.docx",
                     mimetype=reports.DOCX_MIMETYPE)
