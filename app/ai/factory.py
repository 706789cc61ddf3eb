from functools import lru_cache

from app.ai.config import load_ai_config
from app.ai.invoker import ModelInvoker
from app.ai.providers.openai_provider import OpenAIProvider


@lru_cache(maxsize=1)
def get_model_invoker() -> ModelInvoker:
    cfg = load_ai_config()

    if cfg.provider != "openai":
        raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")

    return ModelInvoker(
        OpenAIProvider(),
        model=cfg.model,
        max_output_tokens=cfg.max_output_tokens,
        retries=cfg.retries,
        timeout_ms=cfg.timeout_ms,
    )
