from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, Template

from app.core.config import settings
from app.schemas.resume import RenderData

logger = logging.getLogger(__name__)


def _format_key(key: Any) -> Any:
    return key


def _join(array: Any, separator: str = ", ") -> str:
    if isinstance(array, (list, tuple)):
        return separator.join(str(item) for item in array)
    return ""


class TemplateCache:
    """Compiled resume template, rebuilt only when the resolved source path changes."""

    def __init__(self, templates_dir: str | Path, template_name: str):
        self._templates_dir = Path(templates_dir)
        self._template_name = template_name
        self._lock = threading.Lock()
        self._template: Template | None = None
        self._source_path: Path | None = None
        self._env = Environment(
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._env.filters["format_key"] = _format_key
        self._env.filters["join"] = _join

    @property
    def source_path(self) -> Path | None:
        return self._source_path

    def _resolve_path(self) -> Path:
        return (self._templates_dir / self._template_name).resolve()

    def get(self) -> Template:
        current = self._resolve_path()
        with self._lock:
            if self._template is None or self._source_path != current:
                source = current.read_text(encoding="utf-8")
                self._template = self._env.from_string(source)
                self._source_path = current
                logger.info("template_compiled path=%s", current)
            return self._template

    def render(self, data: RenderData) -> str:
        html = self.get().render(**data.model_dump())
        logger.info("template_rendered chars=%s", len(html))
        return html


_default_cache: TemplateCache | None = None
_default_lock = threading.Lock()


def get_template_cache() -> TemplateCache:
    global _default_cache
    with _default_lock:
        if _default_cache is None:
            _default_cache = TemplateCache(settings.templates_dir, settings.resume_template)
        return _default_cache
