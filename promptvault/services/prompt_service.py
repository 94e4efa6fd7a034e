import structlog
from sqlalchemy import or_

from ..errors import PromptNotFound
from ..extensions import db
from ..models.prompt import Prompt
from .prompt_builder import ALL_MODELS

log = structlog.get_logger()


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def create_prompt(
    user_id: str,
    generated_prompt: str,
    target_model: str,
    original_prompt: str | None = None,
    tags=None,
    starred: bool = False,
) -> Prompt:
    """Validate and insert one prompt for `user_id`.

    This is the only write path that creates prompts. `tags` defaults to
    `[target_model]` and `usage_count` starts at 1.
    Raises ValueError on invalid input.
    """
    generated_prompt = _clean(generated_prompt)
    target_model = _clean(target_model)
    if not generated_prompt or not target_model:
        raise ValueError("Missing required fields: generatedPrompt and targetModel")

    if tags is None:
        tags = [target_model]
    if isinstance(tags, str):
        tags = tags.split(",")
    if not isinstance(tags, (list, tuple)):
        raise ValueError("tags must be a list of strings")
    tags = [t for t in (_clean(t) for t in tags) if t]

    if starred is None:
        starred = False
    if not isinstance(starred, bool):
        raise ValueError("starred must be a boolean")

    prompt = Prompt(
        user_id=user_id,
        original_prompt=_clean(original_prompt),
        generated_prompt=generated_prompt,
        target_model=target_model,
        starred=starred,
        usage_count=1,
    )
    prompt.tags_parsed = tags
    db.session.add(prompt)
    db.session.commit()
    log.info("prompt.saved", prompt_id=prompt.id, user_id=user_id, target_model=target_model)
    return prompt


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_prompts(user_id: str, search: str | None = None, category: str | None = None):
    """Return the user's prompts, newest first, filtered by search and category.

    `search` is a case-insensitive substring match on the original prompt,
    generated prompt or target model. `category` "All" means no filter.
    """
    query = Prompt.query.filter(Prompt.user_id == user_id)

    search = _clean(search)
    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(
            or_(
                Prompt.original_prompt.ilike(pattern, escape="\\"),
                Prompt.generated_prompt.ilike(pattern, escape="\\"),
                Prompt.target_model.ilike(pattern, escape="\\"),
            )
        )

    category = _clean(category)
    if category and category != ALL_MODELS:
        query = query.filter(Prompt.target_model == category)

    return query.order_by(Prompt.created_at.desc()).all()


def get_prompt(user_id: str, prompt_id: str) -> Prompt:
    """Fetch one prompt owned by `user_id`; raises PromptNotFound otherwise."""
    prompt = db.session.get(Prompt, str(prompt_id)) if prompt_id else None
    if prompt is None or prompt.user_id != user_id:
        raise PromptNotFound(f"Prompt {prompt_id} not found")
    return prompt


def attach_output(user_id: str, prompt_id: str, output_url: str, output_type: str | None) -> Prompt:
    prompt = get_prompt(user_id, prompt_id)
    prompt.output_url = output_url
    prompt.output_type = output_type or "application/octet-stream"
    db.session.commit()
    log.info("prompt.output_attached", prompt_id=prompt.id, output_type=prompt.output_type)
    return prompt


def toggle_star(user_id: str, prompt_id: str) -> Prompt:
    prompt = get_prompt(user_id, prompt_id)
    prompt.starred = not prompt.starred
    db.session.commit()
    return prompt


def record_usage(user_id: str, prompt_id: str) -> Prompt:
    prompt = get_prompt(user_id, prompt_id)
    prompt.usage_count = (prompt.usage_count or 0) + 1
    db.session.commit()
    return prompt


def format_display_date(value) -> str | None:
    # month/day/year without zero padding
    if value is None:
        return None
    return f"{value.month}/{value.day}/{value.year}"


def to_display(prompt: Prompt) -> dict:
    """Shape a prompt row for the vault views."""
    return {
        "id": prompt.id,
        "title": prompt.original_prompt,
        "content": prompt.generated_prompt,
        "category": prompt.target_model,
        "tags": prompt.tags_parsed,
        "usage_count": prompt.usage_count,
        "starred": bool(prompt.starred),
        "created_at": format_display_date(prompt.created_at),
        "original_prompt": prompt.original_prompt,
        "generated_prompt": prompt.generated_prompt,
        "target_model": prompt.target_model,
        "output_url": prompt.output_url,
        "output_type": prompt.output_type,
    }


def list_categories(user_id: str) -> list[str]:
    """Distinct target models/categories the user has saved, alphabetical."""
    rows = (
        db.session.query(Prompt.target_model)
        .filter(Prompt.user_id == user_id)
        .distinct()
        .order_by(Prompt.target_model)
        .all()
    )
    return [r[0] for r in rows]
