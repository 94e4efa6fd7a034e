import json
import uuid
from datetime import datetime, timezone

from ..extensions import db


class Prompt(db.Model):
    """A user's raw prompt paired with its rewritten version.

    `output_url` and `output_type` are written together by the upload path
    and are otherwise both NULL. `tags` holds a JSON array of strings.
    """

    __tablename__ = "prompts"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    original_prompt = db.Column(db.Text, nullable=True)
    generated_prompt = db.Column(db.Text, nullable=False)
    target_model = db.Column(db.String(128), nullable=False, index=True)

    tags = db.Column(db.Text, nullable=True)
    starred = db.Column(db.Boolean, nullable=False, default=False)
    usage_count = db.Column(db.Integer, nullable=False, default=1)

    output_url = db.Column(db.Text, nullable=True)
    output_type = db.Column(db.String(255), nullable=True)

    created_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        server_default=db.func.now(),
        index=True,
    )

    @property
    def tags_parsed(self):
        """Return tags as a list of strings.

        Falls back to a comma-separated split for rows written by hand.
        """
        if not self.tags:
            return []
        try:
            val = json.loads(self.tags)
            if isinstance(val, list):
                return [str(x) for x in val]
        except (json.JSONDecodeError, TypeError):
            pass
        return [s.strip() for s in self.tags.split(",") if s.strip()]

    @tags_parsed.setter
    def tags_parsed(self, value):
        self.tags = json.dumps(list(value or []), ensure_ascii=False)

    def __repr__(self):
        return f"<Prompt {self.id} {self.target_model}>"
