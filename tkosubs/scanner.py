"""Scan orchestration for tko-subs."""

import concurrent.futures
import logging
from typing import Iterable, Iterator, Optional, Union

from .base_provider import Credentials
from .constants import (
    MSG_NOT_FOUND, MSG_READ_ERROR, MSG_TIMEOUT, MSG_UNREACHABLE, SCAN_TIMEOUT
)
from .dispatcher import Detection, TakeoverDispatcher
from .matcher import FingerprintMatcher
from .probe import ProbeEngine, ProbeStatus
from .registry import ProviderRegistry
from .resolver import CnameResolver
from .utils import ScanContext, ScanTimeout, console

logger = logging.getLogger(__name__)


class TakeoverScanner:
    """
    Drives each domain through resolution, fingerprinting, probing and takeover.

    Detection for one domain runs in a worker thread raced against a fixed
    deadline. When the deadline wins the outcome is "timedout" and the scan
    context is cancelled, which closes whatever connection the worker holds.
    Takeover attempts run after the race and are not bounded by it.

    Domains are scanned one at a time, so outcomes come out in input order.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        resolver: Optional[CnameResolver] = None,
        probe: Optional[ProbeEngine] = None,
        dispatcher: Optional[TakeoverDispatcher] = None,
        timeout: float = SCAN_TIMEOUT
    ):
        self.registry = registry
        self.matcher = FingerprintMatcher(registry)
        self.resolver = resolver or CnameResolver(timeout=timeout)
        self.probe = probe or ProbeEngine()
        self.dispatcher = dispatcher or TakeoverDispatcher(Credentials())
        self.timeout = timeout

    def detect(self, domain: str, context: ScanContext) -> Union[Detection, str]:
        """
        Resolve, fingerprint and probe a domain.

        Providers are tried in registry order and the first one whose error
        signature is confirmed wins.

        Args:
            domain: Domain to check
            context: Deadline and cancellation for this domain

        Returns:
            Union[Detection, str]: A detection, or the final outcome line

        Raises:
            ScanTimeout: If the deadline expires
        """
        cname = self.resolver.resolve(domain, context)
        logger.debug(f"{domain} -> {cname or 'no CNAME'}")

        for record in self.matcher.candidates(cname):
            context.check()
            result = self.probe.probe(domain, record, context)

            if result.status is ProbeStatus.VULNERABLE:
                return Detection(domain=domain, cname=cname, provider=record.name)
            if result.status is ProbeStatus.UNREACHABLE:
                return MSG_UNREACHABLE.format(domain=domain)
            if result.status is ProbeStatus.READ_ERROR:
                return MSG_READ_ERROR.format(domain=domain)

        return MSG_NOT_FOUND.format(domain=domain)

    def check(self, domain: str) -> str:
        """Scan one domain and return its outcome line."""
        context = ScanContext(self.timeout)
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="tko-scan")
        try:
            future = executor.submit(self.detect, domain, context)
            try:
                outcome = future.result(timeout=self.timeout)
            except concurrent.futures.TimeoutError:
                logger.debug(f"{domain} timed out, cancelling")
                context.cancel()
                return MSG_TIMEOUT
            except ScanTimeout as e:
                logger.debug(f"{domain}: {e}")
                return MSG_TIMEOUT
        finally:
            executor.shutdown(wait=False)

        if isinstance(outcome, Detection):
            return self.dispatcher.dispatch(outcome)
        return outcome

    def scan(self, domains: Iterable[str]) -> Iterator[str]:
        for domain in domains:
            yield self.check(domain)

    def run(self, domains: Iterable[str]) -> int:
        """Print one outcome line per domain, returning how many were scanned."""
        count = 0
        for line in self.scan(domains):
            console.print(line, markup=False)
            count += 1
        return count
