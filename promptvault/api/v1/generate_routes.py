from flask import Blueprint, current_app, jsonify

from ...common.http import json_body
from ...errors import GeminiNotConfigured, UpstreamError
from ...services.gemini_service import GeminiService

generate_bp = Blueprint("generate", __name__)


@generate_bp.route("/generate-prompt", methods=["POST"])
def generate_prompt():
    """Rewrite a raw prompt for a target model.
    ---
    tags:
      - Generate
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [prompt, targetModel]
          properties:
            prompt:
              type: string
            targetModel:
              type: string
              enum: [All, Gemini, ChatGPT, Claude]
    responses:
      200:
        description: "{generatedPrompt}"
      400:
        description: Missing prompt or targetModel
      500:
        description: Upstream or server failure
    """
    payload = json_body()
    service = GeminiService(current_app.config)
    try:
        generated = service.generate(payload.get("prompt"), payload.get("targetModel"))
        return jsonify({"generatedPrompt": generated}), 200
    except ValueError as e:
        return _err(e, 400)
    except GeminiNotConfigured as e:
        return _err(e, 500)
    except UpstreamError:
        current_app.logger.exception("Gemini generation failed")
        return _err("Internal server error", 500)
    except Exception:
        current_app.logger.exception("Error in generate-prompt")
        return _err("Internal server error", 500)


def _err(msg, status=400):
    return jsonify({"error": str(msg)}), status
