from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from app.features.dates import parse_date
from app.schemas.resume import Experience

logger = logging.getLogger(__name__)

_SECONDS_PER_YEAR = 365 * 24 * 60 * 60


def _start_date(entry: Experience | Mapping[str, Any]) -> str | None:
    if isinstance(entry, Mapping):
        value = entry.get("start_date")
    else:
        value = getattr(entry, "start_date", None)
    return value if isinstance(value, str) else None


def calculate_experience_years(
    experience: Sequence[Experience | Mapping[str, Any]] | None,
    *,
    now: datetime | None = None,
) -> int:
    """Whole years between the earliest parseable start date and now."""
    current = now or datetime.now()
    valid_dates = [
        parsed
        for parsed in (parse_date(_start_date(entry), now=current) for entry in (experience or []))
        if parsed is not None
    ]
    if not valid_dates:
        logger.warning("experience_years_no_valid_dates entries=%s", len(experience or []))
        return 0

    earliest = min(valid_dates)
    years = (current - earliest).total_seconds() / _SECONDS_PER_YEAR
    return max(0, math.floor(years + 0.5))
