"""Chat completion clients."""

import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx

from keyword_rag.config import LLMSettings, get_settings
from keyword_rag.exceptions import ErrorCode, LLMError
from keyword_rag.llm.models import GenerationResult, Message
from keyword_rag.logging_config import get_logger
from keyword_rag.observability.metrics import track_llm_request

logger = get_logger(__name__)


class LLMClient(ABC):
    """Abstract base class for chat completion clients."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Name of the model requests go to."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationResult:
        """Generate the next assistant turn for a conversation.

        Raises:
            LLMError: If generation fails.
        """
        ...


class OpenAICompatibleClient(LLMClient):
    """Client for ``/chat/completions`` endpoints.

    Works with OpenAI itself and with compatible servers such as Ollama
    or vLLM by changing ``LLM_BASE_URL``.
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: LLM configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().llm
        self._client = client
        self._owns_client = client is None

    @property
    def model_name(self) -> str:
        return self._settings.model

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        api_key = self._settings.api_key.get_secret_value()
        return {"Authorization": f"Bearer {api_key}"} if api_key else {}

    def _payload(
        self,
        messages: Sequence[Message],
        temperature: float | None,
        max_tokens: int | None,
    ) -> dict[str, Any]:
        return {
            "model": self._settings.model,
            "messages": [message.to_payload() for message in messages],
            "temperature": self._settings.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self._settings.max_tokens,
        }

    async def complete(
        self,
        messages: Sequence[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationResult:
        client = await self._get_client()
        url = f"{self._settings.base_url.rstrip('/')}/chat/completions"
        started = time.perf_counter()

        try:
            response = await client.post(
                url,
                json=self._payload(messages, temperature, max_tokens),
                headers=self._headers(),
            )
            response.raise_for_status()
            result = _parse_completion(response.json(), self._settings.model)
        except httpx.TimeoutException as e:
            self._record_failure(started)
            raise LLMError(
                "LLM request timed out",
                code=ErrorCode.LLM_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e
        except httpx.HTTPStatusError as e:
            self._record_failure(started)
            status = e.response.status_code
            logger.error("LLM request failed with status %d", status)
            code = ErrorCode.LLM_RATE_LIMIT if status == 429 else ErrorCode.LLM_SERVICE_ERROR
            raise LLMError(
                "Rate limit exceeded" if status == 429 else f"LLM service returned {status}",
                code=code,
                details={"status_code": status},
            ) from e
        except httpx.RequestError as e:
            self._record_failure(started)
            logger.error("LLM connection error: %s", e)
            raise LLMError(
                f"Failed to connect to LLM service: {e}",
                details={"url": url},
            ) from e
        except ValueError as e:
            self._record_failure(started)
            raise LLMError(
                f"Invalid response from LLM: {e}",
                details={"error": str(e)},
            ) from e
        except LLMError:
            self._record_failure(started)
            raise

        track_llm_request(
            model=result.model,
            duration=time.perf_counter() - started,
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
        )
        return result

    def _record_failure(self, started: float) -> None:
        track_llm_request(
            model=self._settings.model,
            duration=time.perf_counter() - started,
            prompt_tokens=0,
            completion_tokens=0,
            success=False,
        )


def _parse_completion(data: dict[str, Any], default_model: str) -> GenerationResult:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise LLMError(
            f"Invalid response from LLM: {e}",
            details={"error": str(e)},
        ) from e

    usage = data.get("usage") or {}
    return GenerationResult(
        content=content or "",
        model=data.get("model", default_model),
        prompt_tokens=usage.get("prompt_tokens", 0),
        completion_tokens=usage.get("completion_tokens", 0),
    )
