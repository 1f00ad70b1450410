"""
Chat Gateway

One request/response cycle: context → instruction → fallback chain → reply.

Rules:
- Upstream status codes and error bodies never reach the caller
- Every failure is reported with the same apology and status 500
- No message pre-validation, no conversation state
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from inference import FallbackOrchestrator

from .prompts import PromptCatalog
from .schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

APOLOGY_REPLY = "I am having trouble connecting. Please check the server logs."

router = APIRouter(prefix="/api", tags=["Chat"])


@dataclass(frozen=True)
class ChatResult:
    reply: str
    status_code: int


class ChatGateway:
    """Composition root for one chat turn."""

    def __init__(
        self,
        catalog: PromptCatalog,
        orchestrator: FallbackOrchestrator,
    ):
        self.catalog = catalog
        self.orchestrator = orchestrator

    async def handle(
        self,
        message: Optional[str],
        context: Optional[str],
    ) -> ChatResult:
        instruction = self.catalog.resolve(context)
        if context not in self.catalog:
            logger.debug(f"Unknown context {context!r}, using default persona")

        outcome = await self.orchestrator.try_generate(instruction, message or "")

        if outcome.ok:
            logger.info(
                "Chat reply generated",
                extra={"context": context, "model": outcome.model},
            )
            return ChatResult(reply=outcome.reply_text, status_code=200)

        logger.error(
            f"Chat failed after {len(outcome.attempts)} attempt(s)",
            extra={"context": context, "cause": outcome.cause},
        )
        return ChatResult(reply=APOLOGY_REPLY, status_code=500)


def get_gateway(request: Request) -> ChatGateway:
    return request.app.state.gateway


@router.post("/chat", response_model=ChatResponse)
async def chat(payload: ChatRequest, gateway: ChatGateway = Depends(get_gateway)):
    """Answer one chat message in the persona selected by context."""
    result = await gateway.handle(payload.message, payload.context)
    return JSONResponse(
        content=ChatResponse(reply=result.reply).model_dump(),
        status_code=result.status_code,
    )
