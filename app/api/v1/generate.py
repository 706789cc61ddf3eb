from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from app.core.errors import PostingRejectedError, ProfileNotFoundError
from app.core.rate_limit import rate_limit
from app.schemas.generate import GenerateRequest, PostingRejectedResponse
from app.services.resume_service import ResumeService, get_resume_service

logger = logging.getLogger(__name__)

router = APIRouter()

_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("profile", "Profile required"),
    ("jd", "Job description required"),
    ("company", "Company name required"),
    ("role", "Role name required"),
)

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_payload(request: Request) -> GenerateRequest:
    """Read the body leniently; anything unusable becomes an empty request."""
    content_type = request.headers.get("content-type", "").lower()
    raw: Any
    if content_type.startswith(_FORM_CONTENT_TYPES):
        raw = dict(await request.form())
    else:
        body = await request.body()
        try:
            raw = json.loads(body) if body.strip() else {}
        except (ValueError, UnicodeDecodeError):
            logger.info("generate_body_unparseable content_type=%s bytes=%s", content_type, len(body))
            raw = {}
    if not isinstance(raw, dict):
        raw = {}
    return GenerateRequest.model_validate(raw)


def _missing_field_message(payload: GenerateRequest) -> str | None:
    for field_name, message in _REQUIRED_FIELDS:
        value = getattr(payload, field_name)
        if not value or not value.strip():
            return message
    return None


@router.post("/generate", summary="Generate a tailored resume PDF")
@rate_limit()
async def generate_resume(
    request: Request,
    service: ResumeService = Depends(get_resume_service),
):
    payload = await _read_payload(request)
    missing = _missing_field_message(payload)
    if missing:
        return PlainTextResponse(missing, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        result = await service.generate(
            profile_id=payload.profile.strip(),
            jd=payload.jd,
            company=payload.company,
            role=payload.role,
        )
    except PostingRejectedError as exc:
        body = PostingRejectedResponse(
            error=str(exc),
            locationType=exc.classification.reason_code or "unknown",
        )
        return JSONResponse(body.model_dump(), status_code=status.HTTP_400_BAD_REQUEST)
    except ProfileNotFoundError as exc:
        logger.info("profile_not_found profile=%s", exc.profile_id)
        return PlainTextResponse(str(exc), status_code=status.HTTP_404_NOT_FOUND)
    except Exception as exc:  # noqa: BLE001
        logger.exception("resume_generation_failed profile=%s company=%s", payload.profile, payload.company)
        return PlainTextResponse(
            f"PDF generation failed: {exc}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return Response(
        content=result.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
