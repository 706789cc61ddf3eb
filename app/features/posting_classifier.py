from __future__ import annotations

import logging

from app.schemas.resume import PostingClassification, RejectionReason

logger = logging.getLogger(__name__)

_HYBRID_KEYWORDS: tuple[str, ...] = (
    "hybrid",
    "hybrid work",
    "hybrid model",
    "hybrid schedule",
    "days in office",
    "days per week in office",
    "in-office days",
    "office presence",
    "some days in office",
)
_ONSITE_KEYWORDS: tuple[str, ...] = (
    "on-site",
    "onsite",
    "on site",
    "in-office",
    "in office",
    "office based",
    "office-based",
    "must be located in",
    "must be based in",
    "must relocate",
    "relocation required",
    "physical presence required",
    "in person",
    "local candidates",
    "candidates must be in",
    "candidates must reside",
)
_REMOTE_KEYWORDS: tuple[str, ...] = (
    "remote",
    "work from home",
    "fully remote",
    "100% remote",
    "remote-first",
    "distributed team",
)
_ENTRY_LEVEL_KEYWORDS: tuple[str, ...] = ("junior role", "entry level", "entry-level")
_INTERNSHIP_KEYWORDS: tuple[str, ...] = (" intern ", "internship")

_REJECTION_MESSAGES: dict[RejectionReason, str] = {
    "hybrid": (
        "This position is HYBRID (requires some office days). This tool is designed for "
        "REMOTE-ONLY positions. Please provide a fully remote job description."
    ),
    "onsite": (
        "This position is ONSITE/IN-PERSON. This tool is designed for REMOTE-ONLY positions. "
        "Please provide a fully remote job description."
    ),
    "entry-level": (
        "This position is ENTRY LEVEL. This tool is designed for MID-LEVEL and SENIOR positions. "
        "Please provide a more senior job description."
    ),
}


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def classify_posting(text: str | None) -> PostingClassification:
    lowered = (text or "").lower()

    is_hybrid = _contains_any(lowered, _HYBRID_KEYWORDS)
    has_onsite = _contains_any(lowered, _ONSITE_KEYWORDS)
    has_remote = _contains_any(lowered, _REMOTE_KEYWORDS)
    has_junior = _contains_any(lowered, _ENTRY_LEVEL_KEYWORDS)
    has_intern = _contains_any(lowered, _INTERNSHIP_KEYWORDS)

    # A posting that mentions both junior and intern phrasing triggers neither.
    is_junior = has_junior and not has_intern
    is_intern = has_intern and not has_junior
    is_onsite = has_onsite and not has_remote

    reason: RejectionReason | None = None
    if is_hybrid:
        reason = "hybrid"
    elif is_onsite:
        reason = "onsite"
    elif is_junior or is_intern:
        reason = "entry-level"

    classification = PostingClassification(
        is_hybrid=is_hybrid,
        is_onsite=is_onsite,
        has_remote_signal=has_remote,
        is_entry_level=is_junior,
        is_intern=is_intern,
        decision="reject" if reason else "proceed",
        reason_code=reason,
        message=_REJECTION_MESSAGES[reason] if reason else None,
    )
    if reason:
        logger.info("posting_rejected reason=%s", reason)
    else:
        logger.info("posting_accepted remote_signal=%s", has_remote)
    return classification
