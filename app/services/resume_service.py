from __future__ import annotations

import hashlib
import json
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Awaitable, Callable

from app.ai.factory import get_model_invoker
from app.ai.invoker import ModelInvoker
from app.core.errors import PostingRejectedError
from app.core.profile_store import ProfileStore, default_profile_store
from app.features.experience import calculate_experience_years
from app.features.posting_classifier import classify_posting
from app.parsing.model_output import sanitize_model_output
from app.prompts.resume_prompt import adjusted_experience_years, build_resume_prompt
from app.rendering.pdf import render_pdf
from app.rendering.templates import TemplateCache, get_template_cache
from app.schemas.resume import ModelContent, PostingClassification, Profile, RenderData
from app.services.resume_assembler import assemble_render_data

logger = logging.getLogger("app.resume")

PdfRenderer = Callable[[str], Awaitable[bytes]]

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


def sanitize_filename(value: str) -> str:
    return _NON_ALNUM_RE.sub("_", value or "").strip("_")


def build_filename(name: str, company: str, role: str) -> str:
    return f"{sanitize_filename(name)}_{sanitize_filename(company)}_{sanitize_filename(role)}.pdf"


def _short_hash(value: str | None) -> str:
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


async def generate_model_content(invoker: ModelInvoker, profile: Profile, jd: str, years: int) -> ModelContent:
    response = await invoker.invoke(build_resume_prompt(profile, jd, years))
    if response.truncated:
        logger.warning(
            "model_output_truncated completion_tokens=%s; retrying with concise prompt",
            response.completion_tokens,
        )
        response = await invoker.invoke(build_resume_prompt(profile, jd, years, concise=True))
        logger.info(
            "model_retry_complete finish_reason=%s completion_tokens=%s",
            response.finish_reason,
            response.completion_tokens,
        )
    return sanitize_model_output(response.text, response.finish_reason)


@dataclass(frozen=True)
class GeneratedResume:
    pdf: bytes
    filename: str
    classification: PostingClassification
    render_data: RenderData


class ResumeService:
    def __init__(
        self,
        *,
        profile_store: ProfileStore,
        template_cache: TemplateCache,
        invoker: ModelInvoker | None = None,
        pdf_renderer: PdfRenderer = render_pdf,
        clock: Callable[[], datetime] | None = None,
    ):
        self._profile_store = profile_store
        self._template_cache = template_cache
        self._invoker = invoker
        self._pdf_renderer = pdf_renderer
        self._clock = clock or datetime.now

    def _get_invoker(self) -> ModelInvoker:
        if self._invoker is None:
            self._invoker = get_model_invoker()
        return self._invoker

    async def generate(self, *, profile_id: str, jd: str, company: str, role: str) -> GeneratedResume:
        started_at = time.perf_counter()
        classification = classify_posting(jd)
        if classification.rejected:
            raise PostingRejectedError(classification)

        profile = self._profile_store.load(profile_id)
        calculated = calculate_experience_years(profile.experience, now=self._clock())
        years = adjusted_experience_years(calculated)

        logger.info(
            json.dumps(
                {
                    "event": "resume_request",
                    "profile": profile_id,
                    "jd_len": len(jd),
                    "jd_hash": _short_hash(jd),
                    "experience_years": calculated,
                    "prompt_years": years,
                }
            )
        )

        content = await generate_model_content(self._get_invoker(), profile, jd, years)
        render_data = assemble_render_data(profile, content)
        html = self._template_cache.render(render_data)
        pdf = await self._pdf_renderer(html)

        filename = build_filename(profile.name, company, role)
        logger.info(
            json.dumps(
                {
                    "event": "resume_complete",
                    "filename": filename,
                    "pdf_bytes": len(pdf),
                    "duration_ms": int((time.perf_counter() - started_at) * 1000),
                }
            )
        )
        return GeneratedResume(
            pdf=pdf,
            filename=filename,
            classification=classification,
            render_data=render_data,
        )


@lru_cache(maxsize=1)
def get_resume_service() -> ResumeService:
    return ResumeService(
        profile_store=default_profile_store(),
        template_cache=get_template_cache(),
    )
