import requests
import structlog

from ..common.retry import call_with_retry
from ..errors import GeminiNotConfigured, UpstreamError
from .prompt_builder import build_instruction, build_payload, clean_generated_text, extract_text

log = structlog.get_logger()


class _RetryableStatus(Exception):
    def __init__(self, response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


class GeminiService:
    def __init__(self, config):
        # config may be app.config or a mapping-like object
        self.api_key = config.get("GEMINI_API_KEY")
        self.model = config.get("GEMINI_MODEL") or "gemini-1.5-flash-latest"
        self.base_url = config.get("GEMINI_API_URL") or "https://generativelanguage.googleapis.com/v1beta"
        self.timeout = config.get("UPSTREAM_TIMEOUT", 30)
        self.retries = config.get("UPSTREAM_RETRIES", 1)
        self.max_backoff = config.get("UPSTREAM_BACKOFF_MAX", 4)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def generate(self, prompt: str, target_model: str) -> str:
        """Rewrite `prompt` for `target_model` and return the cleaned text.

        Raises ValueError when either input is missing, GeminiNotConfigured
        without an API key and UpstreamError when the API call fails.
        """
        if not prompt or not target_model:
            raise ValueError("Missing prompt or targetModel")
        if not self.api_key:
            log.error("gemini.not_configured")
            raise GeminiNotConfigured("Gemini API key not configured")

        payload = build_payload(build_instruction(prompt, target_model))
        data = self._post(payload)
        return clean_generated_text(extract_text(data))

    def _post(self, payload: dict):
        def _send():
            resp = requests.post(
                self.url,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            if resp.status_code == 429 or resp.status_code >= 500:
                raise _RetryableStatus(resp)
            return resp

        try:
            resp = call_with_retry(
                _send,
                retries=self.retries,
                max_backoff=self.max_backoff,
                retry_on=(requests.ConnectionError, requests.Timeout, _RetryableStatus),
                name="gemini.generate",
            )
        except _RetryableStatus as e:
            log.error("gemini.request_failed", status=e.response.status_code, body=_safe_body(e.response))
            raise UpstreamError(f"Gemini API error: {e.response.status_code}") from e
        except requests.RequestException as e:
            log.error("gemini.request_failed", error=str(e))
            raise UpstreamError("Gemini API unreachable") from e

        if resp.status_code >= 400:
            log.error("gemini.request_failed", status=resp.status_code, body=_safe_body(resp))
            raise UpstreamError(f"Gemini API error: {resp.status_code}")

        try:
            return resp.json()
        except ValueError:
            log.warning("gemini.unparseable_response", status=resp.status_code)
            return None


def _safe_body(resp):
    try:
        return resp.json()
    except ValueError:
        return resp.text
