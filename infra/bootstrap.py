"""
Infrastructure initialization and bootstrap.

Builds the gateway object graph from a GatewayConfig. Instances are owned by
the application (app.state), not stored in a process-wide singleton, so tests
can build a fresh graph or hand in a pre-populated ModelCache.
"""

from typing import Optional

import httpx

from gateway import ChatGateway, OriginGuard, PromptCatalog
from inference import FallbackOrchestrator, ModelBackend, ModelCache, ModelResolver

from .config import GatewayConfig, get_config


class InfraBootstrap:
    """Bootstrap the gateway based on configuration."""

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        backend: Optional[ModelBackend] = None,
        cache: Optional[ModelCache] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            config:  Gateway configuration (defaults to the environment)
            backend: Override the configured upstream backend
            cache:   Model cache to share or pre-populate
            client:  Shared HTTP client for the Gemini backend
        """
        self.config = config or get_config()
        self.backend = backend or self.config.create_llm_backend(client=client)
        self.cache = cache if cache is not None else ModelCache()
        self.resolver = self.config.create_resolver(self.backend, cache=self.cache)
        self.origin_guard = self.config.create_origin_guard()
        self.catalog = self.config.create_prompt_catalog()
        self.orchestrator = FallbackOrchestrator(self.backend, resolver=self.resolver)
        self.gateway = ChatGateway(self.catalog, self.orchestrator)

    def get_gateway(self) -> ChatGateway:
        return self.gateway

    def get_origin_guard(self) -> OriginGuard:
        return self.origin_guard

    def get_resolver(self) -> ModelResolver:
        return self.resolver

    def get_catalog(self) -> PromptCatalog:
        return self.catalog
