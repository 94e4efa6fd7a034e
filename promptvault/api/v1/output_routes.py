from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from ...errors import PromptNotFound, StorageError
from ...extensions import db
from ...services import output_service
from ..auth import auth_required

outputs_bp = Blueprint("outputs", __name__)


@outputs_bp.route("/upload-output", methods=["POST"])
@auth_required
def upload_output(user):
    """Attach an output file to one of the caller's prompts.
    ---
    tags:
      - Outputs
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: file
        type: file
        required: true
      - in: formData
        name: promptId
        type: string
        required: true
    responses:
      200:
        description: "{success, outputUrl, outputType}"
      400:
        description: Missing file or promptId
      401:
        description: Missing or invalid bearer token
      404:
        description: Prompt does not exist or belongs to another user
    """
    file = request.files.get("file")
    prompt_id = request.form.get("promptId")
    if not file or not file.filename or not prompt_id:
        return _err("Missing required fields: file and promptId", 400)

    try:
        result = output_service.upload_output(current_app.config, user.id, prompt_id, file)
        return jsonify({"success": True, **result}), 200
    except PromptNotFound:
        return _err("Prompt not found", 404)
    except StorageError:
        current_app.logger.exception("Storage upload error")
        return _err("Failed to upload file to storage", 500)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Database update error")
        return _err("Failed to update prompt with output information", 500)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error in upload-output")
        return _err("Internal server error", 500)


def _err(msg, status=400):
    return jsonify({"error": str(msg)}), status
