from contextlib import asynccontextmanager
import logging

from app.rendering.templates import get_template_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    try:
        get_template_cache().get()
    except OSError as exc:
        logger.warning("template_warmup_failed: %s", exc)
    yield
