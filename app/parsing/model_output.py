"""Turn free-form model output into validated resume content.

The model is asked for a bare JSON object but routinely wraps it in code
fences, prefaces it with chatter, leaves trailing commas, or forgets to escape
quotes inside bullet text. This module strips those artifacts, slices out the
object, makes a single repair attempt when parsing fails and validates the
required keys. Truncated responses are handled by the caller before this
point (see ``app.services.resume_service.generate_model_content``).
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from app.core.errors import (
    InvalidJSONError,
    MalformedContentError,
    MissingFieldsError,
    ModelRefusalError,
    NoJSONFoundError,
)
from app.schemas.resume import ModelContent

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "summary", "skills", "experience")

_REFUSAL_PREFIXES = ("i'm sorry", "i cannot", "i apologize")
_FENCE_RE = re.compile(r"```(?:json|javascript)?\s*", re.IGNORECASE)
_PREFACE_RE = re.compile(r"^(?:here is|here's|this is|the json is):?\s*", re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_CLOSING_FOLLOWERS = frozenset(",:}]")


def check_refusal(text: str) -> None:
    lowered = text.strip().lower()
    if lowered.startswith(_REFUSAL_PREFIXES):
        logger.error("model_refusal preview=%r", text[:200])
        raise ModelRefusalError(
            "AI refused to generate resume. The prompt may be too complex. "
            "Please try again with a shorter job description or simpler requirements."
        )


def strip_artifacts(text: str) -> str:
    cleaned = _FENCE_RE.sub("", text).strip()
    return _PREFACE_RE.sub("", cleaned)


def extract_json_object(text: str) -> str:
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last <= first:
        logger.error("model_output_no_json length=%s", len(text))
        raise NoJSONFoundError()
    return text[first : last + 1].strip()


def _escape_inner_quotes(text: str) -> str:
    """Escape quotes that sit inside a string value.

    A quote inside a string closes it only when the next non-space character
    is structural (``, : } ]``) or the text ends; any other quote is escaped.
    Valid JSON passes through unchanged.
    """
    out: list[str] = []
    in_string = False
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if not in_string:
            if char == '"':
                in_string = True
            out.append(char)
            index += 1
            continue

        if char == "\\":
            out.append(text[index : index + 2])
            index += 2
            continue
        if char == '"':
            lookahead = index + 1
            while lookahead < length and text[lookahead].isspace():
                lookahead += 1
            if lookahead >= length or text[lookahead] in _CLOSING_FOLLOWERS:
                in_string = False
                out.append(char)
            else:
                out.append('\\"')
            index += 1
            continue
        out.append(char)
        index += 1
    return "".join(out)


def repair_json_text(text: str) -> str:
    without_commas = _TRAILING_COMMA_RE.sub(r"\1", text)
    return _escape_inner_quotes(without_commas)


def parse_json_with_repair(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as parse_error:
        logger.warning(
            "model_output_parse_failed error=%s length=%s head=%r tail=%r",
            parse_error,
            len(text),
            text[:1000],
            text[-500:],
        )
        try:
            parsed = json.loads(repair_json_text(text))
        except json.JSONDecodeError as repair_error:
            logger.error("model_output_repair_failed error=%s", repair_error)
            raise InvalidJSONError(
                f"AI returned invalid JSON: {parse_error}. "
                f"Repair attempt also failed ({repair_error}). Please try again."
            ) from parse_error
        logger.info("model_output_repaired length=%s", len(text))
        return parsed


def validate_content(payload: Any) -> ModelContent:
    if not isinstance(payload, dict):
        raise MalformedContentError("AI response was not a JSON object.")

    missing = [key for key in REQUIRED_FIELDS if not payload.get(key)]
    if missing:
        present = list(payload.keys())
        logger.error("model_output_missing_fields missing=%s present=%s", missing, present)
        raise MissingFieldsError(
            "AI response missing required fields (title, summary, skills, or experience). "
            f"Present keys: {', '.join(present) or 'none'}",
            present_keys=present,
        )

    try:
        content = ModelContent.model_validate(payload)
    except ValidationError as exc:
        logger.error("model_output_invalid_shape errors=%s", exc.error_count())
        raise MalformedContentError(f"AI response has an unexpected shape: {exc}") from exc

    for index, entry in enumerate(content.experience, start=1):
        if not entry.details:
            logger.warning("model_output_entry_without_details index=%s title=%r", index, entry.title)
    logger.info(
        "model_output_valid skill_categories=%s experience_entries=%s",
        len(content.skills),
        len(content.experience),
    )
    return content


def sanitize_model_output(text: str | None, finish_reason: str | None = None) -> ModelContent:
    raw = (text or "").strip()
    if finish_reason == "length":
        logger.warning("model_output_still_truncated length=%s", len(raw))

    check_refusal(raw)
    cleaned = strip_artifacts(raw)
    candidate = extract_json_object(cleaned)
    payload = parse_json_with_repair(candidate)
    return validate_content(payload)
