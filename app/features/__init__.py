from .dates import parse_date
from .experience import calculate_experience_years
from .posting_classifier import classify_posting

__all__ = [
    "parse_date",
    "calculate_experience_years",
    "classify_posting",
]
