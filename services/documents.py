"""Storage of excess claim documents.

Files are kept on disk under ``UPLOAD_FOLDER_DOCUMENTS`` with generated names;
the Excess row only stores the file name.
"""

import os
import time

from flask import current_app

from extensions import db
from errors import NotFoundError, RequestValidationError
from logging_config import get_logger
from models.excess import DOCUMENT_FIELDS
from services import action_logger

logger = get_logger(__name__)

ALLOWED_MIME_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "application/pdf": "pdf",
}

DOWNLOAD_TYPES = {key: field for field, (key, _label) in DOCUMENT_FIELDS.items()}

MIME_BY_EXTENSION = {"pdf": "application/pdf", "jpg": "image/jpeg", "jpeg": "image/jpeg", "png": "image/png"}


def upload_folder():
    folder = current_app.config["UPLOAD_FOLDER_DOCUMENTS"]
    os.makedirs(folder, exist_ok=True)
    return folder


def resolve_field(document_type):
    """Accept either a column name (image_invoice) or a download key (invoice)."""
    if document_type in DOCUMENT_FIELDS:
        return document_type
    field = DOWNLOAD_TYPES.get(document_type)
    if field is None:
        raise RequestValidationError("Invalid document type", details={"allowed": sorted(DOWNLOAD_TYPES)})
    return field


def _file_size(fileobj):
    stream = fileobj.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _validate(field, fileobj, max_size):
    if fileobj.mimetype not in ALLOWED_MIME_TYPES:
        raise RequestValidationError(f"Invalid file type for {field}. Allowed: JPG, PNG, PDF")
    if _file_size(fileobj) > max_size:
        raise RequestValidationError(f"File size exceeds {max_size // (1024 * 1024)}MB for {field}")


def _remove_file(filename):
    path = os.path.join(upload_folder(), filename)
    if os.path.exists(path):
        try:
            os.remove(path)
        except OSError:
            logger.warning("Could not remove document %s", path, exc_info=True)


def save_documents(ctx, excess, files):
    """Validate every submitted document, then store them all.

    ``files`` maps column names to Werkzeug ``FileStorage`` objects. Returns
    the list of fields that were updated.
    """
    max_size = current_app.config["MAX_DOCUMENT_SIZE"]
    submitted = {}
    for field in DOCUMENT_FIELDS:
        fileobj = files.get(field)
        if fileobj is None or not fileobj.filename:
            continue
        _validate(field, fileobj, max_size)
        submitted[field] = fileobj

    if not submitted:
        return []

    folder = upload_folder()
    stamp = int(time.time() * 1000)
    written = {}
    try:
        for field, fileobj in submitted.items():
            filename = f"{excess.id}-{field}-{stamp}.{ALLOWED_MIME_TYPES[fileobj.mimetype]}"
            fileobj.save(os.path.join(folder, filename))
            written[field] = filename
    except OSError:
        for filename in written.values():
            _remove_file(filename)
        raise

    replaced = []
    for field, filename in written.items():
        previous = getattr(excess, field)
        if previous and previous != filename:
            replaced.append(previous)
        setattr(excess, field, filename)
        action_logger.log_document_upload(excess.id, ctx.account_id, field, filename)
    excess.status = "NEED_UPDATE"
    db.session.commit()

    for filename in replaced:
        _remove_file(filename)

    logger.info("Stored %d document(s) for excess %s", len(written), excess.id)
    return list(written)


def delete_document(ctx, excess, document_type):
    field = resolve_field(document_type)
    filename = getattr(excess, field)
    if not filename:
        raise NotFoundError("Document not found")

    setattr(excess, field, None)
    action_logger.log_document_delete(excess.id, ctx.account_id, field)
    db.session.commit()

    _remove_file(filename)
    return field


def document_path(excess, document_type):
    field = resolve_field(document_type)
    filename = getattr(excess, field)
    if not filename:
        raise NotFoundError("Document not found")
    path = os.path.join(upload_folder(), filename)
    if not os.path.exists(path):
        raise NotFoundError("File not found on server")
    return filename, path


def guess_mimetype(filename):
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_BY_EXTENSION.get(ext, "application/octet-stream")
