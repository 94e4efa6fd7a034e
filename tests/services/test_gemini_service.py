from unittest.mock import MagicMock, patch

import pytest
import requests

from promptvault.errors import GeminiNotConfigured, UpstreamError
from promptvault.services.gemini_service import GeminiService
from promptvault.services.prompt_builder import FALLBACK_TEXT


def _resp(status, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body if body is not None else {}
    return resp


class TestGeminiService:

    def test_generate_sends_instruction_and_cleans_output(self, app, gemini_response):
        with patch('requests.post') as mock_post:
            mock_post.return_value = _resp(200, gemini_response("**Refined** `prompt` #1"))

            result = GeminiService(app.config).generate("make it better", "Gemini")

        assert result == "Refined prompt 1"
        args, kwargs = mock_post.call_args
        assert args[0].endswith("/models/gemini-1.5-flash-latest:generateContent")
        assert kwargs["params"] == {"key": "test-key"}
        assert kwargs["timeout"] == app.config["UPSTREAM_TIMEOUT"]
        sent = kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert "make it better" in sent
        assert "Gemini language model" in sent

    def test_generate_all_asks_for_labeled_variants(self, app, gemini_response):
        with patch('requests.post') as mock_post:
            mock_post.return_value = _resp(200, gemini_response("For Gemini: a\nFor ChatGPT: b\nFor Claude: c"))
            result = GeminiService(app.config).generate("idea", "All")

        sent = mock_post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert "For ChatGPT:" in sent and "For Claude:" in sent
        assert result.startswith("For Gemini: a")

    @pytest.mark.parametrize("prompt,model", [("", "Gemini"), ("x", ""), (None, None)])
    def test_generate_requires_prompt_and_model(self, app, prompt, model):
        with patch('requests.post') as mock_post:
            with pytest.raises(ValueError):
                GeminiService(app.config).generate(prompt, model)
            mock_post.assert_not_called()

    def test_missing_api_key(self, app):
        app.config["GEMINI_API_KEY"] = None
        with pytest.raises(GeminiNotConfigured):
            GeminiService(app.config).generate("x", "Claude")

    def test_client_error_is_not_retried(self, app):
        with patch('requests.post') as mock_post:
            mock_post.return_value = _resp(400, {"error": {"message": "bad"}})
            with pytest.raises(UpstreamError):
                GeminiService(app.config).generate("x", "Claude")
            assert mock_post.call_count == 1

    def test_server_error_is_retried_once(self, app, gemini_response):
        with patch('requests.post') as mock_post:
            mock_post.side_effect = [_resp(503), _resp(200, gemini_response("ok"))]
            assert GeminiService(app.config).generate("x", "Claude") == "ok"
            assert mock_post.call_count == 2

    def test_gives_up_after_single_retry(self, app):
        with patch('requests.post') as mock_post:
            mock_post.side_effect = requests.ConnectionError("down")
            with pytest.raises(UpstreamError):
                GeminiService(app.config).generate("x", "Claude")
            assert mock_post.call_count == 2

    def test_unexpected_shape_returns_placeholder(self, app):
        with patch('requests.post') as mock_post:
            mock_post.return_value = _resp(200, {"promptFeedback": {"blockReason": "SAFETY"}})
            assert GeminiService(app.config).generate("x", "Claude") == FALLBACK_TEXT
