from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .types import GenerationOutcome, GenerationRequest, ModelCandidate


class ModelDiscoveryError(Exception):
    """Model listing could not be fetched or parsed."""


class ModelBackend(ABC):
    """
    Abstract upstream boundary.
    Gateway code must depend ONLY on this interface.
    """

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        """Run one generation call against request.target. Never raises."""
        raise NotImplementedError

    @abstractmethod
    async def list_models(self) -> List[Dict[str, Any]]:
        """Return the provider's model descriptors. Raises ModelDiscoveryError."""
        raise NotImplementedError

    async def invoke(
        self,
        candidate: ModelCandidate,
        system_instruction: str,
        user_message: str,
    ) -> GenerationOutcome:
        """Build a GenerationRequest for one candidate and generate."""
        request = GenerationRequest(
            system_instruction=system_instruction,
            user_message=user_message,
            target=candidate,
        )
        return await self.generate(request)
