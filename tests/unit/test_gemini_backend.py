"""
tests/unit/test_gemini_backend.py

Tests for the Gemini upstream backend against httpx.MockTransport.

Verifies:
✔ One combined prompt body (instruction first, user message second)
✔ Model path is normalized and the key travels as a query parameter
✔ Non-2xx → Failure with status and raw body
✔ Timeouts, transport errors, invalid JSON and non-string text → Failure
✔ Missing generated text → Success with the placeholder reply
✔ Model listing follows pagination and raises ModelDiscoveryError on failure
✔ The API key never appears in our log records
"""

import json
import logging

import httpx
import pytest

from inference import GeminiModelBackend, ModelCandidate, ModelDiscoveryError
from inference.gemini import NO_CONTENT_REPLY, build_prompt_text

BASE_URL = "https://upstream.test/v1beta"
API_KEY = "secret-key-123"


def make_backend(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiModelBackend(api_key=f"  {API_KEY}\n", base_url=BASE_URL, client=client)


def reply_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


FLASH = ModelCandidate.from_identifier("gemini-1.5-flash")


class TestPromptBody:

    def test_build_prompt_text_order_and_separator(self):
        text = build_prompt_text("Be a CA.", "Old or new regime?")
        assert text == "System: Be a CA.\nUser: Old or new regime?"

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["key"] = request.url.params.get("key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=reply_body("ok"))

        backend = make_backend(handler)
        await backend.invoke(FLASH, "Be a CA.", "Old or new regime?")

        assert seen["method"] == "POST"
        assert seen["path"] == "/v1beta/models/gemini-1.5-flash:generateContent"
        assert seen["key"] == API_KEY
        assert seen["body"] == {
            "contents": [{"parts": [{"text": "System: Be a CA.\nUser: Old or new regime?"}]}]
        }

    def test_api_key_is_trimmed(self):
        backend = GeminiModelBackend(api_key="  abc \n")
        assert backend.api_key == "abc"


class TestGenerateOutcomes:

    @pytest.mark.asyncio
    async def test_success_extracts_first_text(self):
        backend = make_backend(lambda r: httpx.Response(200, json=reply_body("Prepay early.")))

        outcome = await backend.invoke(FLASH, "sys", "msg")

        assert outcome.ok
        assert outcome.reply_text == "Prepay early."
        assert outcome.model == "models/gemini-1.5-flash"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"candidates": []},
        {},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
    ])
    async def test_missing_text_is_placeholder_success(self, body):
        backend = make_backend(lambda r: httpx.Response(200, json=body))

        outcome = await backend.invoke(FLASH, "sys", "msg")

        assert outcome.ok
        assert outcome.reply_text == NO_CONTENT_REPLY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
    async def test_non_success_status_is_failure(self, status):
        error = {"error": {"code": status, "message": "models/x is not found"}}
        backend = make_backend(lambda r: httpx.Response(status, json=error))

        outcome = await backend.invoke(FLASH, "sys", "msg")

        assert not outcome.ok
        assert outcome.status_code == status
        assert "is not found" in outcome.error_body

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        outcome = await make_backend(handler).invoke(FLASH, "sys", "msg")

        assert not outcome.ok
        assert outcome.cause == "timeout"

    @pytest.mark.asyncio
    async def test_transport_error_is_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        outcome = await make_backend(handler).invoke(FLASH, "sys", "msg")

        assert not outcome.ok
        assert outcome.cause == "transport_error"

    @pytest.mark.asyncio
    async def test_invalid_json_is_failure(self):
        backend = make_backend(lambda r: httpx.Response(200, text="<html>oops</html>"))

        outcome = await backend.invoke(FLASH, "sys", "msg")

        assert not outcome.ok
        assert outcome.cause == "invalid_json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [{"oops": 1}, ["a", "b"], 42, True])
    async def test_non_string_text_is_failure(self, text):
        backend = make_backend(lambda r: httpx.Response(200, json=reply_body(text)))

        outcome = await backend.invoke(FLASH, "sys", "msg")

        assert not outcome.ok
        assert outcome.cause == "malformed_response"
        assert outcome.model == "models/gemini-1.5-flash"


class TestListModels:

    @pytest.mark.asyncio
    async def test_single_page(self):
        models = [{"name": "models/gemini-pro", "supportedGenerationMethods": ["generateContent"]}]
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"models": models})

        result = await make_backend(handler).list_models()

        assert result == models
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/v1beta/models"
        assert seen[0].url.params["key"] == API_KEY

    @pytest.mark.asyncio
    async def test_follows_page_tokens(self):
        pages = {
            None: {"models": [{"name": "models/a"}], "nextPageToken": "p2"},
            "p2": {"models": [{"name": "models/b"}], "nextPageToken": "p3"},
            "p3": {"models": [{"name": "models/c"}]},
        }

        def handler(request):
            return httpx.Response(200, json=pages[request.url.params.get("pageToken")])

        result = await make_backend(handler).list_models()

        assert [m["name"] for m in result] == ["models/a", "models/b", "models/c"]

    @pytest.mark.asyncio
    async def test_non_success_raises(self):
        backend = make_backend(lambda r: httpx.Response(403, json={"error": "denied"}))
        with pytest.raises(ModelDiscoveryError):
            await backend.list_models()

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(ModelDiscoveryError):
            await make_backend(handler).list_models()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"models": "nope"}),
    ])
    async def test_bad_body_raises(self, response):
        backend = make_backend(lambda r: response)
        with pytest.raises(ModelDiscoveryError):
            await backend.list_models()


class TestCredentialHygiene:

    @pytest.mark.asyncio
    async def test_key_not_in_log_records(self, caplog):
        backend = make_backend(lambda r: httpx.Response(500, text="upstream exploded"))

        with caplog.at_level(logging.DEBUG, logger="inference"):
            await backend.invoke(FLASH, "sys", "msg")

        ours = [r for r in caplog.records if r.name.startswith("inference")]
        assert ours
        for record in ours:
            assert API_KEY not in record.getMessage()
            assert API_KEY not in str(record.__dict__)
