"""
Tests for the ChatGateway request/response cycle.

Verifies:
✔ Context selects the persona instruction
✔ Unknown / missing context falls back to the default persona
✔ Missing message is forwarded as an empty user message
✔ Success → 200 with reply text
✔ Exhaustion → 500 with the fixed apology, no upstream details
✔ Scalar JSON values in the request body are read as text
"""

import pytest

from gateway import APOLOGY_REPLY, ChatGateway, ChatRequest, FINOVA_PROMPTS
from inference import FallbackOrchestrator, ModelCandidate, StubModelBackend

CANDIDATES = [
    ModelCandidate.from_identifier("gemini-1.5-flash"),
    ModelCandidate.from_identifier("gemini-pro"),
]


def make_gateway(catalog, backend):
    return ChatGateway(catalog, FallbackOrchestrator(backend, candidates=CANDIDATES))


class TestPersonaSelection:

    @pytest.mark.asyncio
    async def test_known_context(self, catalog, stub_backend):
        gateway = make_gateway(catalog, stub_backend)

        await gateway.handle("How does prepayment help?", "prepayment")

        request = stub_backend.requests[0]
        assert request.system_instruction == FINOVA_PROMPTS["prepayment"]
        assert request.user_message == "How does prepayment help?"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("context", ["xyz", "", None])
    async def test_unknown_context_uses_default(self, catalog, stub_backend, context):
        gateway = make_gateway(catalog, stub_backend)

        result = await gateway.handle("hello", context)

        assert result.status_code == 200
        assert stub_backend.requests[0].system_instruction == FINOVA_PROMPTS["home"]

    @pytest.mark.asyncio
    async def test_missing_message_forwarded_empty(self, catalog, stub_backend):
        gateway = make_gateway(catalog, stub_backend)

        result = await gateway.handle(None, "tax")

        assert result.status_code == 200
        assert stub_backend.requests[0].user_message == ""


class TestResultMapping:

    @pytest.mark.asyncio
    async def test_success_maps_to_reply(self, catalog, stub_backend):
        gateway = make_gateway(catalog, stub_backend)

        result = await gateway.handle("hi", "home")

        assert result.status_code == 200
        assert result.reply == "Prepaying cuts the <b>Principal</b>."

    @pytest.mark.asyncio
    async def test_fallback_success_still_200(self, catalog):
        backend = StubModelBackend(reply="from pro", failing=["gemini-1.5-flash"])
        gateway = make_gateway(catalog, backend)

        result = await gateway.handle("hi", "mf")

        assert result.status_code == 200
        assert result.reply == "from pro"

    @pytest.mark.asyncio
    async def test_exhaustion_maps_to_apology(self, catalog):
        backend = StubModelBackend(failing=["gemini-1.5-flash", "gemini-pro"])
        gateway = make_gateway(catalog, backend)

        result = await gateway.handle("hi", "ipo")

        assert result.status_code == 500
        assert result.reply == APOLOGY_REPLY
        assert "503" not in result.reply
        assert "stub upstream" not in result.reply


class TestChatRequestSchema:

    @pytest.mark.parametrize("value, expected", [
        (42, "42"),
        (2.5, "2.5"),
        (True, "true"),
        (False, "false"),
        ("tax", "tax"),
        (None, None),
    ])
    def test_scalars_read_as_text(self, value, expected):
        request = ChatRequest.model_validate({"message": value, "context": value})

        assert request.message == expected
        assert request.context == expected
