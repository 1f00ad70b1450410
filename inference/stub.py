from typing import Any, Dict, Iterable, List, Optional

from .base import ModelBackend, ModelDiscoveryError
from .types import (
    Failure,
    GenerationOutcome,
    GenerationRequest,
    Success,
    normalize_model_id,
)

DEFAULT_STUB_MODELS: List[Dict[str, Any]] = [
    {
        "name": "models/gemini-1.5-flash",
        "supportedGenerationMethods": ["generateContent", "countTokens"],
    },
    {
        "name": "models/gemini-1.5-pro",
        "supportedGenerationMethods": ["generateContent", "countTokens"],
    },
]


class StubModelBackend(ModelBackend):
    """
    Deterministic fake upstream for local development and tests.

    Models listed in ``failing`` answer with an HTTP 503 Failure; every other
    model succeeds with ``reply``. Calls are recorded so tests can assert
    which candidates were tried and how often discovery ran.
    """

    def __init__(
        self,
        reply: str = "This is a stubbed response.",
        failing: Iterable[str] = (),
        models: Optional[List[Dict[str, Any]]] = None,
        discovery_fails: bool = False,
    ):
        self.reply = reply
        self.failing = {normalize_model_id(m) for m in failing}
        self.models = DEFAULT_STUB_MODELS if models is None else models
        self.discovery_fails = discovery_fails
        self.requests: List[GenerationRequest] = []
        self.list_calls = 0

    @property
    def attempted_models(self) -> List[str]:
        return [r.target.normalized for r in self.requests]

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        self.requests.append(request)
        model = request.target.normalized

        if model in self.failing:
            return Failure(
                status_code=503,
                error_body=f"stub upstream unavailable for {model}",
                model=model,
            )

        return Success(reply_text=self.reply, model=model)

    async def list_models(self) -> List[Dict[str, Any]]:
        self.list_calls += 1
        if self.discovery_fails:
            raise ModelDiscoveryError("Model list failed: stub")
        return list(self.models)
