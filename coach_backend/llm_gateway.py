import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from coach_backend.config import CFG, Config

logger = logging.getLogger(__name__)


class LLMGatewayError(Exception):
    """Base for every failure of a single chat-completion call."""


class TransportError(LLMGatewayError):
    """No usable HTTP exchange: connection refused, DNS, timeout."""


class ProviderError(LLMGatewayError):
    """The provider answered with an error or an unusable body."""


class LLMGateway:
    """One chat-completion request per `send`; no retries, no caching."""

    def __init__(self, cfg: Config = CFG, client: Optional[Any] = None):
        self.cfg = cfg
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.cfg.openai_api_key,
                base_url=self.cfg.llm_base_url or None,
                timeout=self.cfg.llm_timeout,
                max_retries=0,
            )
        return self._client

    @property
    def available(self) -> bool:
        return self._client is not None or bool(self.cfg.openai_api_key)

    async def send(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        if not system_prompt:
            raise ValueError("system_prompt must not be empty")
        if not model:
            raise ValueError("model must not be empty")
        if not 0 <= temperature <= 1:
            raise ValueError(f"temperature out of range: {temperature}")
        if max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive: {max_tokens}")
        if not self.available:
            raise ProviderError("OPENAI_API_KEY missing")

        logger.debug("chat request model=%s system_len=%d user_len=%d",
                     model, len(system_prompt), len(user_prompt or ""))
        try:
            resp = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt or ""},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except (openai.APIConnectionError, openai.APITimeoutError) as err:
            raise TransportError(str(err)) from err
        except openai.APIStatusError as err:
            raise ProviderError(f"{err.status_code}: {err.message}") from err
        except openai.OpenAIError as err:
            raise ProviderError(str(err)) from err

        data = resp.model_dump() if hasattr(resp, "model_dump") else resp
        if not isinstance(data, dict):
            raise ProviderError("unexpected response body")
        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ProviderError(f"provider error: {message}")
        choices = data.get("choices") or []
        if not choices:
            raise ProviderError("response has no choices")
        content = ((choices[0] or {}).get("message") or {}).get("content")
        logger.debug("chat response model=%s content_len=%d", model, len(content or ""))
        return content or ""
