"""
Gateway configuration.

Environment-based backend and model-source selection with defaults matching
the production deployment. One configuration struct parameterizes the single
ChatGateway: origin policy, prompt catalog, model source.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple

import httpx

from inference import (
    DEFAULT_MODEL,
    GeminiModelBackend,
    ModelBackend,
    ModelCache,
    ModelResolver,
    ModelSource,
    StubModelBackend,
)
from inference.gemini import DEFAULT_BASE_URL
from gateway import FINOVA_PROMPTS, OriginGuard, OriginPolicy, PromptCatalog
from gateway.prompts import DEFAULT_CONTEXT


LLMBackendType = Literal["gemini", "stub"]

DEFAULT_ALLOWED_ORIGINS = (
    "https://www.finovatools.com",
    "https://finovatools.com",
    "http://localhost:5500",
    "http://127.0.0.1:5500",
)
DEFAULT_TRUSTED_SUFFIXES = ("finovatools.com",)
DEFAULT_DEV_PREFIXES = ("http://localhost:5500", "http://127.0.0.1:5500")


def _csv(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass
class GatewayConfig:
    """Gateway configuration from environment."""

    # Upstream
    llm_backend: LLMBackendType = "gemini"
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 30.0

    # Models
    model_source: ModelSource = "discovery"
    static_models: Tuple[str, ...] = ()
    default_model: str = DEFAULT_MODEL

    # Origin admission
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    trusted_suffixes: Tuple[str, ...] = DEFAULT_TRUSTED_SUFFIXES
    dev_prefixes: Tuple[str, ...] = DEFAULT_DEV_PREFIXES

    # Prompts
    prompts: Dict[str, str] = field(default_factory=lambda: dict(FINOVA_PROMPTS))
    default_context: str = DEFAULT_CONTEXT

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - LLM: gemini with runtime model discovery
        - Origins: finovatools.com (and subdomains) plus local dev on :5500
        """
        model_source = os.getenv("MODEL_SOURCE", "discovery").lower()
        if model_source not in ("static", "discovery"):
            raise ValueError(f"MODEL_SOURCE must be 'static' or 'discovery', got {model_source!r}")

        llm_backend = os.getenv("LLM_BACKEND", "gemini").lower()
        if llm_backend not in ("gemini", "stub"):
            raise ValueError(f"LLM_BACKEND must be 'gemini' or 'stub', got {llm_backend!r}")

        return cls(
            # Upstream
            llm_backend=llm_backend,  # type: ignore
            api_key=os.getenv("GEMINI_API_KEY", "").strip(),
            base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
            timeout_s=float(os.getenv("UPSTREAM_TIMEOUT_S", "30")),

            # Models
            model_source=model_source,  # type: ignore
            static_models=_csv("GEMINI_MODELS", ()),
            default_model=os.getenv("GEMINI_DEFAULT_MODEL", DEFAULT_MODEL),

            # Origin admission
            allowed_origins=_csv("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS),
            trusted_suffixes=_csv("TRUSTED_DOMAIN_SUFFIXES", DEFAULT_TRUSTED_SUFFIXES),
            dev_prefixes=_csv("DEV_ORIGIN_PREFIXES", DEFAULT_DEV_PREFIXES),
        )

    def create_llm_backend(self, client: Optional[httpx.AsyncClient] = None) -> ModelBackend:
        """Create the upstream backend based on configuration."""
        if self.llm_backend == "stub":
            return StubModelBackend()
        return GeminiModelBackend(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout_s=self.timeout_s,
            client=client,
        )

    def create_resolver(
        self,
        backend: ModelBackend,
        cache: Optional[ModelCache] = None,
    ) -> ModelResolver:
        return ModelResolver(
            backend,
            cache=cache,
            mode=self.model_source,
            static_models=self.static_models,
            default_model=self.default_model,
        )

    def create_origin_guard(self) -> OriginGuard:
        return OriginGuard(
            OriginPolicy(
                allowed_origins=self.allowed_origins,
                trusted_suffixes=self.trusted_suffixes,
                dev_prefixes=self.dev_prefixes,
            )
        )

    def create_prompt_catalog(self) -> PromptCatalog:
        return PromptCatalog(self.prompts, default_context=self.default_context)


def get_config() -> GatewayConfig:
    """Get gateway configuration from the environment."""
    return GatewayConfig.from_env()
