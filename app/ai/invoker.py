from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

from app.ai.types import (
    ChatMessage,
    MessageList,
    ModelProvider,
    ModelResponse,
    PromptInput,
    ProviderRequest,
    RawPrompt,
    to_prompt_input,
)
from app.core.errors import ModelTimeoutError

logger = logging.getLogger(__name__)


def flatten_content(content: Any) -> str:
    """Collapse composite message content (strings or text parts) into plain text."""
    if isinstance(content, str):
        return content
    if isinstance(content, (list, tuple)):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, Mapping):
                parts.append(str(part.get("text") or ""))
            else:
                parts.append(str(getattr(part, "text", "") or ""))
        return "\n".join(parts)
    if content is None:
        return ""
    return str(content)


def _inline_content(message: ChatMessage) -> str:
    if isinstance(message.content, str):
        return message.content
    return json.dumps(message.content, ensure_ascii=False)


def normalize_prompt(prompt: PromptInput) -> ProviderRequest:
    if isinstance(prompt, RawPrompt):
        return ProviderRequest(system=None, messages=({"role": "user", "content": prompt.text},))

    system_parts = [flatten_content(m.content) for m in prompt.messages if m.role == "system"]
    turns = tuple(
        {"role": m.role, "content": _inline_content(m)} for m in prompt.messages if m.role != "system"
    )
    system = "\n\n".join(part for part in system_parts if part) or None
    return ProviderRequest(system=system, messages=turns)


def _discard_outcome(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()


class ModelInvoker:
    def __init__(
        self,
        provider: ModelProvider,
        *,
        model: str,
        max_output_tokens: int = 64000,
        retries: int = 2,
        timeout_ms: int = 120000,
    ):
        self._provider = provider
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._retries = retries
        self._timeout_ms = timeout_ms

    async def _attempt(self, request: ProviderRequest, *, model: str, max_output_tokens: int, timeout_ms: int) -> ModelResponse:
        call = asyncio.ensure_future(
            self._provider.complete(
                list(request.messages),
                system=request.system,
                model=model,
                max_output_tokens=max_output_tokens,
            )
        )
        done, _ = await asyncio.wait({call}, timeout=timeout_ms / 1000)
        if call not in done:
            # The late call is left to finish on its own; its outcome is dropped.
            call.add_done_callback(_discard_outcome)
            raise ModelTimeoutError()
        return call.result()

    async def invoke(
        self,
        prompt_or_messages: PromptInput | str | list[Any],
        model: str | None = None,
        max_output_tokens: int | None = None,
        retries: int | None = None,
        timeout_ms: int | None = None,
    ) -> ModelResponse:
        request = normalize_prompt(to_prompt_input(prompt_or_messages))
        resolved_model = model or self._model
        resolved_tokens = max_output_tokens or self._max_output_tokens
        resolved_timeout = timeout_ms or self._timeout_ms
        remaining = max(1, self._retries if retries is None else retries)

        while True:
            try:
                response = await self._attempt(
                    request,
                    model=resolved_model,
                    max_output_tokens=resolved_tokens,
                    timeout_ms=resolved_timeout,
                )
            except Exception as exc:  # noqa: BLE001 - every failure consumes one attempt
                remaining -= 1
                if remaining <= 0:
                    logger.error("model_invoke_failed model=%s: %s", resolved_model, exc)
                    raise
                logger.warning("model_invoke_retry attempts_left=%s error=%s", remaining, exc)
                continue

            logger.info(
                "model_invoke_complete model=%s finish_reason=%s prompt_tokens=%s completion_tokens=%s",
                response.model,
                response.finish_reason,
                response.prompt_tokens,
                response.completion_tokens,
            )
            return response
