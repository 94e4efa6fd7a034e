import os

from flask import Blueprint, abort, current_app, send_file

from ..services.storage_service import StorageService

storage_bp = Blueprint("storage", __name__)


@storage_bp.route("/storage/<string:bucket>/<path:object_path>", methods=["GET"])
def serve_object(bucket, object_path):
    """Serve a stored output publicly (used when no external public URL base is set)."""
    storage = StorageService(current_app.config)
    if bucket != storage.bucket:
        abort(404)
    path = storage.path_for(object_path)
    if path is None or not os.path.isfile(path):
        abort(404)
    return send_file(path)
