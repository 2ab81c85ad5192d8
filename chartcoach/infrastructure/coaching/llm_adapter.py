"""
Adapter: OpenAI-compatible chat completions over HTTP.

Implements the LLMPort with a single ``requests.post`` per call. Chart
screenshots are sent as ``image_url`` content parts on the user turn,
which routes the call to the vision model.
"""

import json
import logging
from typing import Any, Optional, Sequence

import requests

from chartcoach.domain.coaching.errors import (
    LLMProviderError,
    ProviderNotConfiguredError,
)
from chartcoach.domain.coaching.ports import LLMPort

logger = logging.getLogger(__name__)


class OpenAIChatAdapter(LLMPort):
    """Chat-completions client configured from settings."""

    def __init__(
        self,
        api_key: str,
        model: str,
        vision_model: Optional[str] = None,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        default_max_tokens: Optional[int] = None,
    ) -> None:
        self._api_key = api_key or ""
        self._model = model
        self._vision_model = vision_model or model
        self._url = base_url.rstrip("/") + "/chat/completions"
        self._timeout = timeout
        self._default_max_tokens = default_max_tokens

    def is_configured(self) -> bool:
        return bool(self._api_key.strip())

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: Optional[int] = None,
        images: Sequence[str] = (),
    ) -> str:
        if not self.is_configured():
            raise ProviderNotConfiguredError()

        payload = self._build_payload(
            system_prompt, user_prompt, temperature, max_tokens, images
        )
        try:
            response = requests.post(
                url=self._url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                data=json.dumps(payload),
                timeout=self._timeout,
            )
            response.raise_for_status()
            result = response.json()
        except requests.RequestException as exc:
            logger.error("Chat completion request failed: %s", type(exc).__name__)
            raise LLMProviderError(str(exc)) from exc
        except ValueError as exc:
            raise LLMProviderError("provider returned a non-JSON body") from exc

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMProviderError("unexpected completion shape") from exc

        usage = result.get("usage") if isinstance(result, dict) else None
        if usage:
            logger.debug("Completion usage: %s", usage)
        return (content or "").strip()

    def _build_payload(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: Optional[int],
        images: Sequence[str],
    ) -> dict[str, Any]:
        user_content: Any = user_prompt
        if images:
            user_content = [{"type": "text", "text": user_prompt}] + [
                {"type": "image_url", "image_url": {"url": url}} for url in images
            ]

        payload: dict[str, Any] = {
            "model": self._vision_model if images else self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": temperature,
        }
        limit = max_tokens or self._default_max_tokens
        if limit:
            payload["max_tokens"] = limit
        return payload
