import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from .base import ModelBackend, ModelDiscoveryError
from .types import Failure, GenerationOutcome, GenerationRequest, Success

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GENERATE_METHOD = "generateContent"
NO_CONTENT_REPLY = "No response generated."

# Upper bound on listing pages followed during discovery
_MAX_LIST_PAGES = 10


def build_prompt_text(system_instruction: str, user_message: str) -> str:
    """Combine instruction and user message into one labelled prompt body."""
    return f"System: {system_instruction}\nUser: {user_message}"


def _extract_text(data: Any) -> Any:
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


class GeminiModelBackend(ModelBackend):
    """
    Google Generative Language backend.

    Uses :generateContent with the instruction and the user message combined
    into a single text part, and GET /models for discovery.

    The API key travels as the ``key`` query parameter and is never logged;
    log records carry the model name only.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Gemini backend.

        Args:
            api_key:   Upstream credential (whitespace is trimmed)
            base_url:  API root, without trailing slash
            timeout_s: Deadline applied by the HTTP client to each call
            client:    Optional shared AsyncClient (tests inject a mock transport)
        """
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = client

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            yield client

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        """
        Generate a reply with one model.

        Flow:
          1. POST {base}/{models/...}:generateContent
          2. Non-2xx or a non-string text part → Failure
          3. 2xx → first candidate's first text part, or the
             NO_CONTENT_REPLY placeholder when none was generated
        """
        model = request.target.normalized
        url = f"{self.base_url}/{model}:{GENERATE_METHOD}"
        payload = {
            "contents": [{
                "parts": [{
                    "text": build_prompt_text(
                        request.system_instruction, request.user_message
                    )
                }]
            }]
        }

        try:
            async with self._http() as client:
                response = await client.post(
                    url,
                    params={"key": self.api_key},
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout_s,
                )
        except httpx.TimeoutException:
            logger.warning("Upstream timeout", extra={"model": model})
            return Failure(cause="timeout", model=model)
        except httpx.RequestError as e:
            logger.warning(
                f"Upstream request failed: {type(e).__name__}",
                extra={"model": model},
            )
            return Failure(cause="transport_error", error_body=str(e), model=model)

        if not response.is_success:
            error_text = response.text
            logger.error(
                f"Upstream API error: {response.status_code}",
                extra={
                    "model": model,
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            return Failure(
                status_code=response.status_code,
                error_body=error_text,
                model=model,
            )

        try:
            data = response.json()
        except ValueError:
            logger.error("Upstream returned invalid JSON", extra={"model": model})
            return Failure(cause="invalid_json", error_body=response.text, model=model)

        text = _extract_text(data)
        if text is not None and not isinstance(text, str):
            logger.error(
                f"Upstream text part is not a string: {type(text).__name__}",
                extra={"model": model},
            )
            return Failure(cause="malformed_response", error_body=response.text, model=model)

        if not text:
            logger.info("Upstream generated no content", extra={"model": model})
            return Success(reply_text=NO_CONTENT_REPLY, model=model)

        return Success(reply_text=text, model=model)

    async def list_models(self) -> List[Dict[str, Any]]:
        """
        Fetch every model descriptor, following nextPageToken.

        Raises:
            ModelDiscoveryError: transport error, non-2xx status or bad body
        """
        models: List[Dict[str, Any]] = []
        params: Dict[str, str] = {"key": self.api_key}

        async with self._http() as client:
            for _ in range(_MAX_LIST_PAGES):
                try:
                    response = await client.get(
                        f"{self.base_url}/models",
                        params=params,
                        timeout=self.timeout_s,
                    )
                except httpx.RequestError as e:
                    raise ModelDiscoveryError(
                        f"Model list request failed: {type(e).__name__}"
                    ) from e

                if not response.is_success:
                    raise ModelDiscoveryError(
                        f"Model list failed: {response.status_code}"
                    )

                try:
                    data = response.json()
                    page = data.get("models", [])
                except (ValueError, AttributeError) as e:
                    raise ModelDiscoveryError("Model list body is not a JSON object") from e

                if not isinstance(page, list):
                    raise ModelDiscoveryError("Model list 'models' is not a list")
                models.extend(m for m in page if isinstance(m, dict))

                token = data.get("nextPageToken")
                if not token:
                    break
                params = {"key": self.api_key, "pageToken": token}

        return models
