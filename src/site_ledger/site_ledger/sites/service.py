from __future__ import annotations

import logging

from ..core.constants import ALL_SITES, ALL_SITES_LABEL, UNASSIGNED_SITE_NAME
from .model import SiteOption
from .repository import SiteRepository

logger = logging.getLogger(__name__)


class SiteDirectoryService:
    """Site filter options; lookups failing here must not block the calendar."""

    def __init__(self, sites: SiteRepository):
        self._sites = sites

    def site_options(self) -> list[SiteOption]:
        options = [SiteOption(value=ALL_SITES, label=ALL_SITES_LABEL)]
        try:
            sites = self._sites.list_sites()
        except Exception:
            logger.exception("Site directory lookup failed")
            return options
        options.extend(SiteOption(value=s.id, label=s.name) for s in sites)
        return options

    def site_labels(self) -> dict[str, str]:
        return {o.value: o.label for o in self.site_options() if o.value != ALL_SITES}

    def assignment_options(self, identity: str) -> list[SiteOption]:
        try:
            assignments = self._sites.list_assignments(identity)
        except Exception:
            logger.exception("Site assignment lookup failed for %s", identity)
            return []

        # Later duplicates replace the label but keep the first position.
        by_site: dict[str, SiteOption] = {}
        for a in assignments:
            if not a.active or not a.site_id:
                continue
            name = (a.site_name or "").strip()
            by_site[a.site_id] = SiteOption(value=a.site_id, label=name or UNASSIGNED_SITE_NAME)
        return list(by_site.values())
