from flask import Blueprint, current_app, jsonify

from ...common.http import json_body
from ...errors import PromptNotFound
from ...extensions import db
from ...services import prompt_service
from ..auth import auth_required

prompts_bp = Blueprint("prompts", __name__)


@prompts_bp.route("/save-prompt", methods=["POST"])
@auth_required
def save_prompt(user):
    """Save a generated prompt to the caller's vault.
    ---
    tags:
      - Prompts
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [generatedPrompt, targetModel]
          properties:
            originalPrompt:
              type: string
            generatedPrompt:
              type: string
            targetModel:
              type: string
            tags:
              type: array
              items:
                type: string
            starred:
              type: boolean
    responses:
      200:
        description: "{success, promptId, message}"
      400:
        description: Missing required fields
      401:
        description: Missing or invalid bearer token
    """
    payload = json_body()
    try:
        saved = prompt_service.create_prompt(
            user.id,
            generated_prompt=payload.get("generatedPrompt"),
            target_model=payload.get("targetModel"),
            original_prompt=payload.get("originalPrompt"),
            tags=payload.get("tags"),
            starred=payload.get("starred", False),
        )
        return jsonify({
            "success": True,
            "promptId": saved.id,
            "message": "Prompt saved successfully",
        }), 200
    except ValueError as e:
        return _err(e, 400)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Database insert error")
        return _err("Failed to save prompt to database", 500)


@prompts_bp.route("/get-prompts", methods=["POST"])
@auth_required
def get_prompts(user):
    """List the caller's prompts, newest first.
    ---
    tags:
      - Prompts
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            search:
              type: string
            category:
              type: string
    responses:
      200:
        description: "{prompts, total}"
      401:
        description: Missing or invalid bearer token
    """
    payload = json_body()
    try:
        rows = prompt_service.list_prompts(
            user.id, search=payload.get("search"), category=payload.get("category")
        )
        prompts = [prompt_service.to_display(p) for p in rows]
        return jsonify({"prompts": prompts, "total": len(prompts)}), 200
    except Exception:
        current_app.logger.exception("Database fetch error")
        return _err("Failed to fetch prompts", 500)


@prompts_bp.route("/prompts/<string:prompt_id>", methods=["GET"])
@auth_required
def get_prompt(user, prompt_id):
    """Fetch one of the caller's prompts."""
    try:
        prompt = prompt_service.get_prompt(user.id, prompt_id)
        return jsonify(prompt_service.to_display(prompt)), 200
    except PromptNotFound:
        return _err("Prompt not found", 404)
    except Exception:
        current_app.logger.exception("Database fetch error")
        return _err("Failed to fetch prompt", 500)


@prompts_bp.route("/prompts/<string:prompt_id>/star", methods=["POST"])
@auth_required
def toggle_star(user, prompt_id):
    """Flip the starred flag of one of the caller's prompts."""
    return _mutate(prompt_service.toggle_star, user, prompt_id)


@prompts_bp.route("/prompts/<string:prompt_id>/use", methods=["POST"])
@auth_required
def record_usage(user, prompt_id):
    """Count one more use (copy) of one of the caller's prompts."""
    return _mutate(prompt_service.record_usage, user, prompt_id)


def _mutate(action, user, prompt_id):
    try:
        prompt = action(user.id, prompt_id)
        return jsonify(prompt_service.to_display(prompt)), 200
    except PromptNotFound:
        return _err("Prompt not found", 404)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Database update error")
        return _err("Failed to update prompt", 500)


def _err(msg, status=400):
    return jsonify({"error": str(msg)}), status
