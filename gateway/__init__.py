"""Chat Gateway - Module Exports"""

from .chat import APOLOGY_REPLY, ChatGateway, ChatResult, router
from .cors import CORS_REJECTION, OriginAdmissionMiddleware
from .origin import OriginDecision, OriginGuard, OriginPolicy
from .prompts import DEFAULT_CONTEXT, FINOVA_PROMPTS, PromptCatalog
from .schemas import ChatRequest, ChatResponse

__all__ = [
    # Origin admission
    "OriginPolicy",
    "OriginDecision",
    "OriginGuard",
    "OriginAdmissionMiddleware",
    "CORS_REJECTION",
    # Prompts
    "PromptCatalog",
    "FINOVA_PROMPTS",
    "DEFAULT_CONTEXT",
    # Chat
    "ChatGateway",
    "ChatResult",
    "ChatRequest",
    "ChatResponse",
    "APOLOGY_REPLY",
    "router",
]
