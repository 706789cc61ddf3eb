from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, Union


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str | list[Any]


@dataclass(frozen=True)
class RawPrompt:
    text: str


@dataclass(frozen=True)
class MessageList:
    messages: tuple[ChatMessage, ...]


PromptInput = Union[RawPrompt, MessageList]


@dataclass(frozen=True)
class ProviderRequest:
    """Canonical provider payload: optional system prompt plus ordered chat turns."""

    system: str | None
    messages: tuple[dict[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ModelResponse:
    text: str
    finish_reason: str | None = None
    model: str | None = None
    prompt_tokens: int | None = None
    completion_tokens: int | None = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"


def _as_chat_message(item: ChatMessage | Mapping[str, Any]) -> ChatMessage:
    if isinstance(item, ChatMessage):
        return item
    return ChatMessage(role=item.get("role", "user"), content=item.get("content", ""))


def to_prompt_input(value: PromptInput | str | Sequence[ChatMessage | Mapping[str, Any]] | Any) -> PromptInput:
    if isinstance(value, (RawPrompt, MessageList)):
        return value
    if isinstance(value, str):
        return RawPrompt(text=value)
    if isinstance(value, (list, tuple)):
        return MessageList(messages=tuple(_as_chat_message(item) for item in value))
    return RawPrompt(text=str(value))


class ModelProvider(Protocol):
    async def complete(
        self,
        messages: Sequence[dict[str, str]],
        *,
        system: str | None,
        model: str,
        max_output_tokens: int,
    ) -> ModelResponse: ...
