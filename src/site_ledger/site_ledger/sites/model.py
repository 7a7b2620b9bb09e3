from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Site:
    id: str
    name: str
    address: Optional[str] = None


@dataclass(frozen=True)
class SiteAssignment:
    site_id: Optional[str]
    site_name: Optional[str]
    active: bool = True
    assigned_date: Optional[date] = None


@dataclass(frozen=True)
class SiteOption:
    """Filter option shown in the site picker."""

    value: str
    label: str
