"""CNAME resolution for tko-subs."""

import logging
from typing import List, Optional

import dns.exception
import dns.name
import dns.resolver

from .utils import ScanContext

logger = logging.getLogger(__name__)

MAX_CNAME_HOPS = 8
FALLBACK_NAMESERVERS = ("8.8.8.8", "1.1.1.1")


class CnameResolver:
    """Resolves the canonical name a subdomain points at."""

    def __init__(self, nameservers: Optional[List[str]] = None, timeout: float = 5.0):
        try:
            self.resolver = dns.resolver.Resolver()
        except dns.resolver.NoResolverConfiguration:
            logger.warning(f"No system resolver configuration, falling back to {FALLBACK_NAMESERVERS}")
            self.resolver = dns.resolver.Resolver(configure=False)
            self.resolver.nameservers = list(FALLBACK_NAMESERVERS)
        if nameservers:
            self.resolver.nameservers = nameservers
        self.resolver.timeout = timeout
        self.resolver.lifetime = timeout

    def resolve(self, domain: str, context: Optional[ScanContext] = None) -> Optional[str]:
        """
        Follow the CNAME chain of a domain to its canonical name.

        DNS failures are not surfaced: a failed lookup and a name without a
        CNAME record both give None.

        Args:
            domain: Domain to resolve
            context: Scan context bounding the lookup time

        Returns:
            Optional[str]: Canonical name without the trailing dot, or None

        Raises:
            ScanTimeout: If the context is cancelled or out of time
        """
        canonical = None
        current = domain
        for _ in range(MAX_CNAME_HOPS):
            target = self._lookup(current, context)
            if not target or target == canonical:
                break
            canonical = current = target
        return canonical

    def _lookup(self, name: str, context: Optional[ScanContext]) -> Optional[str]:
        lifetime = self.resolver.lifetime
        if context is not None:
            context.check()
            lifetime = min(lifetime, context.remaining())

        try:
            answers = self.resolver.resolve(name, 'CNAME', lifetime=lifetime)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return None
        except dns.exception.DNSException as e:
            logger.debug(f"CNAME lookup failed for {name}: {e}")
            return None
        except ValueError as e:
            # Raised for names dnspython refuses to encode
            logger.debug(f"Invalid name {name!r}: {e}")
            return None

        for rdata in answers:
            return str(rdata.target).rstrip('.').lower()
        return None
