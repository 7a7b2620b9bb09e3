from __future__ import annotations

from src.site_ledger.site_ledger.core.constants import ALL_SITES, ALL_SITES_LABEL, UNASSIGNED_SITE_NAME
from src.site_ledger.site_ledger.sites.model import Site, SiteAssignment, SiteOption
from src.site_ledger.site_ledger.sites.service import SiteDirectoryService


class FakeSites:
    def __init__(self, sites=(), assignments=(), fail=False):
        self._sites = list(sites)
        self._assignments = list(assignments)
        self._fail = fail

    def list_sites(self):
        if self._fail:
            raise ConnectionError("down")
        return self._sites

    def list_assignments(self, identity):
        if self._fail:
            raise ConnectionError("down")
        return self._assignments


def test_site_options_start_with_all_sites():
    svc = SiteDirectoryService(FakeSites([Site(id="1", name="강남 현장"), Site(id="2", name="송도")]))
    options = svc.site_options()
    assert options[0] == SiteOption(value=ALL_SITES, label=ALL_SITES_LABEL)
    assert [o.value for o in options[1:]] == ["1", "2"]
    assert svc.site_labels() == {"1": "강남 현장", "2": "송도"}


def test_lookup_failure_leaves_only_all_sites():
    svc = SiteDirectoryService(FakeSites(fail=True))
    assert svc.site_options() == [SiteOption(value=ALL_SITES, label=ALL_SITES_LABEL)]
    assert svc.assignment_options("me") == []


def test_assignment_options_skip_inactive_and_dedupe():
    svc = SiteDirectoryService(
        FakeSites(
            assignments=[
                SiteAssignment(site_id="1", site_name="강남"),
                SiteAssignment(site_id="2", site_name="판교", active=False),
                SiteAssignment(site_id=None, site_name="없음"),
                SiteAssignment(site_id="3", site_name="  "),
                SiteAssignment(site_id="1", site_name="강남 2공구"),
            ]
        )
    )
    assert svc.assignment_options("me") == [
        SiteOption(value="1", label="강남 2공구"),
        SiteOption(value="3", label=UNASSIGNED_SITE_NAME),
    ]
