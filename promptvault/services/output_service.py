import structlog

from . import prompt_service
from .storage_service import DEFAULT_CONTENT_TYPE, StorageService, build_object_path

log = structlog.get_logger()


def upload_output(config, user_id: str, prompt_id: str, file) -> dict:
    """Store an uploaded output file and attach it to the caller's prompt.

    `file` is a werkzeug FileStorage. Ownership is checked before anything is
    written. Raises PromptNotFound, StorageError, or SQLAlchemyError from the
    final row update.
    """
    prompt = prompt_service.get_prompt(user_id, prompt_id)

    storage = StorageService(config)
    object_path = build_object_path(user_id, prompt.id, file.filename)
    storage.upload(object_path, file.stream)

    output_url = storage.public_url(object_path)
    output_type = file.mimetype or DEFAULT_CONTENT_TYPE
    prompt_service.attach_output(user_id, prompt.id, output_url, output_type)
    return {"outputUrl": output_url, "outputType": output_type}
