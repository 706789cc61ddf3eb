from __future__ import annotations

import os
from typing import Optional, Sequence

from openai import AsyncOpenAI

from app.ai.types import ModelResponse


class OpenAIProvider:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 1.0,
    ):
        self._temperature = temperature
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        # One invoker attempt must be exactly one HTTP call, so SDK retries stay off.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            max_retries=0,
        )

    async def complete(
        self,
        messages: Sequence[dict[str, str]],
        *,
        system: str | None,
        model: str,
        max_output_tokens: int,
    ) -> ModelResponse:
        payload = list(messages)
        if system:
            payload.insert(0, {"role": "system", "content": system})

        response = await self._client.chat.completions.create(
            model=model,
            messages=payload,
            temperature=self._temperature,
            max_completion_tokens=max_output_tokens,
        )

        choice = response.choices[0] if response.choices else None
        text = (choice.message.content if choice and choice.message else None) or ""
        usage = getattr(response, "usage", None)
        return ModelResponse(
            text=text.strip(),
            finish_reason=choice.finish_reason if choice else None,
            model=getattr(response, "model", None) or model,
            prompt_tokens=getattr(usage, "prompt_tokens", None),
            completion_tokens=getattr(usage, "completion_tokens", None),
        )
