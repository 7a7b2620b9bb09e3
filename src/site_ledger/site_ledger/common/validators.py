from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_year_month


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_iso_date(value: Optional[str], field_name: str) -> date:
    text = require_non_empty(value, field_name)
    try:
        return parse_iso_date(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def require_year_month(value: Optional[str], field_name: str) -> date:
    text = require_non_empty(value, field_name)
    try:
        return parse_year_month(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM")
