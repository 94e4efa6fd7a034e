class UpstreamError(Exception):
    """The text-generation API failed or answered with a non-success status."""


class StorageError(Exception):
    """Writing to the object store failed."""


class PromptNotFound(LookupError):
    """No prompt with that id exists for the calling user."""


class GeminiNotConfigured(UpstreamError):
    """No API key is configured for the text-generation API."""


class EmailAlreadyRegistered(ValueError):
    """An account with that email already exists."""
