"""Audit trail for excess claims.

Each helper stages one ExcessAction in the current session so the audit row
commits together with the change it describes.
"""

from extensions import db
from logging_config import get_logger
from models.excess import DOCUMENT_FIELDS
from models.excess_action import ExcessAction

logger = get_logger(__name__)

CREATED = "CREATED"
DOCUMENT_UPLOADED = "DOCUMENT_UPLOADED"
DOCUMENT_DELETED = "DOCUMENT_DELETED"
STATUS_CHANGED = "STATUS_CHANGED"
NOTES_UPDATED = "NOTES_UPDATED"
DESCRIPTION_UPDATED = "DESCRIPTION_UPDATED"


def log_action(excess_id, account_id, action_type, description, details=None):
    action = ExcessAction(
        excess_id=excess_id,
        account_id=account_id,
        action_type=action_type,
        description=description,
        details=details,
    )
    db.session.add(action)
    logger.info("Excess %s: %s by account %s", excess_id, action_type, account_id)
    return action


def _label(field):
    return DOCUMENT_FIELDS.get(field, (field, field))[1]


def log_excess_created(excess, account_id, contract_id):
    return log_action(
        excess.id, account_id, CREATED,
        f"Excess created for contract {contract_id}",
        f"Amount {excess.amount} - {excess.type}",
    )


def log_document_upload(excess_id, account_id, field, filename):
    return log_action(
        excess_id, account_id, DOCUMENT_UPLOADED,
        f"Document uploaded: {_label(field)}",
        f"Document type: {field}, file name: {filename}",
    )


def log_document_delete(excess_id, account_id, field):
    return log_action(
        excess_id, account_id, DOCUMENT_DELETED,
        f"Document deleted: {_label(field)}",
        f"Document type: {field}",
    )


def log_status_change(excess_id, account_id, from_status, to_status, reason=None):
    return log_action(
        excess_id, account_id, STATUS_CHANGED,
        f'Status changed from "{from_status}" to "{to_status}"',
        f"Reason: {reason}" if reason else None,
    )


def log_notes_update(excess_id, account_id, previous, new):
    return log_action(
        excess_id, account_id, NOTES_UPDATED,
        "Notes updated",
        f"Previous notes: {previous or 'none'}, new notes: {new or 'none'}",
    )


def log_description_update(excess_id, account_id, previous, new):
    return log_action(
        excess_id, account_id, DESCRIPTION_UPDATED,
        "Description updated",
        f"Previous description: {previous or 'none'}, new description: {new or 'none'}",
    )
