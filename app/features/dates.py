from __future__ import annotations

import logging
import re
from datetime import datetime

from dateutil import parser as dateparser

logger = logging.getLogger(__name__)

_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})/(\d{4})\s*$")


def parse_date(value: str | None, *, now: datetime | None = None) -> datetime | None:
    """Normalize a free-text resume date to a naive local datetime.

    Handles "Present", "MM/YYYY" and anything dateutil understands. Returns
    None instead of raising when the text cannot be parsed.
    """
    if not value:
        return None
    trimmed = str(value).strip()
    if not trimmed:
        return None

    current = now or datetime.now()
    if trimmed.lower() == "present":
        return current

    match = _MONTH_YEAR_RE.match(trimmed)
    if match:
        month, year = int(match.group(1)), int(match.group(2))
        try:
            return datetime(year, month, 1)
        except ValueError:
            logger.warning("date_parse_failed value=%r reason=month_out_of_range", value)
            return None

    try:
        parsed = dateparser.parse(trimmed, default=datetime(current.year, 1, 1))
    except (ValueError, OverflowError) as exc:
        logger.warning("date_parse_failed value=%r: %s", value, exc)
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
