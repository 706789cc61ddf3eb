import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    max_output_tokens: int
    retries: int
    timeout_ms: int


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-5-mini").strip()
    return AIConfig(
        provider=provider,
        model=model,
        max_output_tokens=_int_env("AI_MAX_OUTPUT_TOKENS", 64000),
        retries=_int_env("AI_RETRIES", 2),
        timeout_ms=_int_env("AI_TIMEOUT_MS", 120000),
    )
