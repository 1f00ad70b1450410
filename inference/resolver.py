"""
Model discovery and candidate ordering.

The upstream provider renames and retires model identifiers independently
of our deploys, so the preferred model is discovered once per process and
cached. Discovery failures degrade to a hardcoded default which is cached
too: it stands until the cache is cleared or the process restarts.

Invariants:
- At most one successful discovery per cache lifetime (concurrent first
  calls may both discover; both write an equivalent value)
- No lock is held across the listing call
- Candidate order is fixed by configuration, never by runtime outcomes
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .base import ModelBackend, ModelDiscoveryError
from .types import ModelCandidate, ModelSource

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-pro"
GENERATE_CAPABILITY = "generateContent"
# Tier markers in preference order: fast tier before general tier
TIER_PREFERENCE = ("flash", "pro")


class ModelCache:
    """Holds at most one resolved model identifier. Owned, not global."""

    def __init__(self, identifier: Optional[str] = None):
        self._identifier = identifier

    def get(self) -> Optional[str]:
        return self._identifier

    def set(self, identifier: str) -> None:
        self._identifier = identifier

    def clear(self) -> None:
        self._identifier = None


def select_preferred(
    models: Iterable[Dict[str, Any]],
    tiers: Sequence[str] = TIER_PREFERENCE,
) -> Optional[str]:
    """Pick the first generation-capable model of the best available tier."""
    usable = [
        m["name"]
        for m in models
        if isinstance(m.get("name"), str)
        and GENERATE_CAPABILITY in (m.get("supportedGenerationMethods") or [])
    ]
    for tier in tiers:
        for name in usable:
            if tier in name:
                return name
    return None


def _dedupe(candidates: Iterable[ModelCandidate]) -> List[ModelCandidate]:
    seen = set()
    ordered = []
    for candidate in candidates:
        if candidate.normalized in seen:
            continue
        seen.add(candidate.normalized)
        ordered.append(candidate)
    return ordered


class ModelResolver:
    """
    Supplies the ordered candidate list for the fallback chain.

    Modes:
      - "static":    the configured identifiers, in order
      - "discovery": the discovered preferred model, then the configured
                     identifiers as trailing fallbacks
    """

    def __init__(
        self,
        backend: ModelBackend,
        cache: Optional[ModelCache] = None,
        mode: ModelSource = "discovery",
        static_models: Sequence[str] = (),
        default_model: str = DEFAULT_MODEL,
    ):
        self.backend = backend
        self.cache = cache if cache is not None else ModelCache()
        self.mode = mode
        self.static_models = [m for m in static_models if m.strip()]
        self.default_model = default_model

    async def resolve_preferred(self) -> ModelCandidate:
        """
        Return the preferred model, discovering it on the first call.

        Never raises: discovery errors and empty listings cache and return
        the default model.
        """
        cached = self.cache.get()
        if cached is not None:
            return ModelCandidate.from_identifier(cached)

        selected = self.default_model
        try:
            models = await self.backend.list_models()
            discovered = select_preferred(models)
            if discovered:
                logger.info(f"Discovered valid model: {discovered}")
                selected = discovered
            else:
                logger.warning(
                    f"No usable model in listing of {len(models)}, "
                    f"using default: {self.default_model}"
                )
        except ModelDiscoveryError as e:
            logger.error(f"Model discovery failed, using default: {e}")

        self.cache.set(selected)
        return ModelCandidate.from_identifier(selected)

    async def get_candidate_order(self) -> List[ModelCandidate]:
        configured = [ModelCandidate.from_identifier(m) for m in self.static_models]

        if self.mode == "static":
            if not configured:
                configured = [ModelCandidate.from_identifier(self.default_model)]
            return _dedupe(configured)

        preferred = await self.resolve_preferred()
        return _dedupe([preferred, *configured])

    def invalidate(self) -> None:
        """Drop the cached model so the next request rediscovers."""
        logger.info("Model cache invalidated")
        self.cache.clear()


__all__ = [
    "DEFAULT_MODEL",
    "ModelCache",
    "ModelResolver",
    "select_preferred",
]
