"""
Upstream boundary for text generation.

This package isolates the gateway from the upstream provider: one backend
interface, model discovery with an owned cache, and the fallback chain.

Supported backends:
- GeminiModelBackend: Google Generative Language API (httpx)
- StubModelBackend: Deterministic fake upstream (local dev / tests)

Example usage:
    from inference import StubModelBackend, ModelResolver, FallbackOrchestrator

    backend = StubModelBackend()
    orchestrator = FallbackOrchestrator(backend, resolver=ModelResolver(backend))
    outcome = await orchestrator.try_generate("You are helpful.", "Hello")
"""

from .types import (
    Failure,
    GenerationOutcome,
    GenerationRequest,
    ModelCandidate,
    ModelSource,
    Success,
    normalize_model_id,
)
from .base import ModelBackend, ModelDiscoveryError
from .stub import StubModelBackend
from .gemini import GeminiModelBackend
from .resolver import DEFAULT_MODEL, ModelCache, ModelResolver
from .fallback import FallbackOrchestrator

__all__ = [
    "Failure",
    "GenerationOutcome",
    "GenerationRequest",
    "ModelCandidate",
    "ModelSource",
    "Success",
    "normalize_model_id",
    "ModelBackend",
    "ModelDiscoveryError",
    "StubModelBackend",
    "GeminiModelBackend",
    "DEFAULT_MODEL",
    "ModelCache",
    "ModelResolver",
    "FallbackOrchestrator",
]
