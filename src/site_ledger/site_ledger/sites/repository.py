from __future__ import annotations

from typing import Protocol, Sequence

from .model import Site, SiteAssignment


class SiteRepository(Protocol):
    def list_sites(self) -> Sequence[Site]:
        raise NotImplementedError

    def list_assignments(self, identity: str) -> Sequence[SiteAssignment]:
        """Newest assignment first."""

        raise NotImplementedError
