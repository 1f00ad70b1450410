import logging
from typing import List, Optional, Sequence

from .base import ModelBackend
from .resolver import ModelResolver
from .types import Failure, GenerationOutcome, ModelCandidate

logger = logging.getLogger(__name__)

EXHAUSTED_CAUSE = "all_candidates_failed"


class FallbackOrchestrator:
    """
    Drives the backend across the ordered candidate list.

    Rules:
    - Candidates are tried in configured order, never reordered
    - Each candidate gets exactly one attempt per request
    - First Success wins
    - Exhaustion yields one aggregated Failure carrying every attempt
    """

    def __init__(
        self,
        backend: ModelBackend,
        resolver: Optional[ModelResolver] = None,
        candidates: Optional[Sequence[ModelCandidate]] = None,
    ):
        """
        Args:
            backend:    Upstream invoker used for every attempt
            resolver:   Supplies the candidate order per request
            candidates: Fixed candidate order; used when no resolver is given
        """
        if resolver is None and candidates is None:
            raise ValueError("FallbackOrchestrator needs a resolver or a candidate list")
        self.backend = backend
        self.resolver = resolver
        self.candidates = list(candidates) if candidates is not None else None

    async def candidate_order(self) -> List[ModelCandidate]:
        if self.resolver is not None:
            return await self.resolver.get_candidate_order()
        return list(self.candidates or [])

    async def try_generate(
        self,
        system_instruction: str,
        user_message: str,
    ) -> GenerationOutcome:
        order = await self.candidate_order()
        attempts: List[Failure] = []

        for position, candidate in enumerate(order, start=1):
            outcome = await self.backend.invoke(
                candidate, system_instruction, user_message
            )
            if outcome.ok:
                if attempts:
                    logger.info(
                        f"Fallback succeeded on candidate {position}/{len(order)}: "
                        f"{candidate.normalized}"
                    )
                return outcome

            logger.warning(
                f"Candidate {candidate.normalized} failed: {outcome.describe()}",
                extra={
                    "model": candidate.normalized,
                    "status_code": outcome.status_code,
                    "cause": outcome.cause,
                },
            )
            attempts.append(outcome)

        logger.error(
            f"All {len(order)} model candidates failed",
            extra={"models": [c.normalized for c in order]},
        )
        return Failure(cause=EXHAUSTED_CAUSE, attempts=attempts)
