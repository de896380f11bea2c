"""Fingerprint matching of resolved CNAMEs against the provider registry."""

from typing import Iterator, Optional

from .registry import ProviderRecord, ProviderRegistry


class FingerprintMatcher:
    """Finds the providers whose CNAME pattern matches a resolved name."""

    def __init__(self, registry: ProviderRegistry):
        self.registry = registry

    def candidates(self, cname: Optional[str]) -> Iterator[ProviderRecord]:
        """
        Yield matching providers in registry order.

        A pattern matches when it is found anywhere in the CNAME (regex
        search, not full-string equality).

        Args:
            cname: Resolved canonical name, possibly None

        Yields:
            ProviderRecord: Providers whose CNAME pattern matches
        """
        if not cname:
            return
        for record in self.registry:
            if record.matches_cname(cname):
                yield record

    def first_match(self, cname: Optional[str]) -> Optional[ProviderRecord]:
        return next(self.candidates(cname), None)
