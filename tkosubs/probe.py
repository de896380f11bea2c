"""HTTP(S) liveness and error-signature probe for tko-subs."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import requests
import urllib3

from .constants import (
    CONNECT_TIMEOUT, DEFAULT_USER_AGENT, READ_CHUNK_SIZE, REQUEST_TIMEOUT, TLS_HANDSHAKE_TIMEOUT
)
from .registry import ProviderRecord
from .utils import ScanContext, ScanTimeout

# Certificate checks are off for every probe
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger(__name__)


class ProbeStatus(Enum):
    CLEAN = "clean"
    VULNERABLE = "vulnerable"
    UNREACHABLE = "unreachable"
    READ_ERROR = "read_error"


@dataclass
class ProbeResult:
    """Outcome of probing one domain for one provider."""
    status: ProbeStatus
    url: str
    status_code: Optional[int] = None
    error: Optional[str] = None


class ProbeEngine:
    """
    Fetches a candidate domain and checks the body for a provider's error page.

    Certificate validation is disabled: services being de-provisioned often
    serve stale or mismatched certificates. Connect, TLS handshake and the
    whole request (body included) are each bounded, and the tightest of those
    bounds and the scan context's deadline applies.
    """

    def __init__(
        self,
        connect_timeout: float = CONNECT_TIMEOUT,
        tls_handshake_timeout: float = TLS_HANDSHAKE_TIMEOUT,
        request_timeout: float = REQUEST_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session_factory: Callable[[], requests.Session] = requests.Session
    ):
        self.connect_timeout = connect_timeout
        self.tls_handshake_timeout = tls_handshake_timeout
        self.request_timeout = request_timeout
        self.user_agent = user_agent
        self.session_factory = session_factory

    def build_session(self) -> requests.Session:
        session = self.session_factory()
        session.verify = False
        session.headers.update({'User-Agent': self.user_agent})
        return session

    def probe(self, domain: str, record: ProviderRecord, context: Optional[ScanContext] = None) -> ProbeResult:
        """
        Probe a domain and match the response body against a provider's signature.

        Args:
            domain: Domain to fetch
            record: Provider whose CNAME pattern matched the domain
            context: Scan context for deadline and cancellation

        Returns:
            ProbeResult: CLEAN, VULNERABLE, UNREACHABLE or READ_ERROR

        Raises:
            ScanTimeout: If any of the time bounds is exhausted
        """
        url = f"{record.scheme}://{domain}"
        context = context or ScanContext(self.request_timeout)
        deadline = min(time.monotonic() + self.request_timeout, context.deadline)
        context.check()

        session = self.build_session()
        context.on_cancel(session.close)
        try:
            try:
                response = session.get(
                    url,
                    timeout=self._timeouts(deadline),
                    stream=True,
                    allow_redirects=True
                )
            except requests.exceptions.Timeout as e:
                raise ScanTimeout(f"request to {url} timed out") from e
            except requests.exceptions.RequestException as e:
                if context.cancelled:
                    raise ScanTimeout(f"request to {url} cancelled") from e
                logger.debug(f"Cannot reach {url}: {e}")
                return ProbeResult(ProbeStatus.UNREACHABLE, url, error=str(e))

            context.on_cancel(response.close)
            with response:
                try:
                    body = self._read_body(response, deadline, context)
                except ScanTimeout:
                    raise
                except (requests.exceptions.RequestException, OSError) as e:
                    if context.expired() or time.monotonic() >= deadline:
                        raise ScanTimeout(f"reading {url} timed out") from e
                    logger.error(f"Trouble reading response from {url}: {e}")
                    return ProbeResult(ProbeStatus.READ_ERROR, url, response.status_code, str(e))
        finally:
            session.close()

        if record.matches_body(body):
            logger.debug(f"{url} matches the {record.name} error signature")
            return ProbeResult(ProbeStatus.VULNERABLE, url, response.status_code)
        return ProbeResult(ProbeStatus.CLEAN, url, response.status_code)

    def _timeouts(self, deadline: float):
        remaining = max(0.001, deadline - time.monotonic())
        connect = min(self.connect_timeout, self.tls_handshake_timeout, remaining)
        return connect, remaining

    def _read_body(self, response: requests.Response, deadline: float, context: ScanContext) -> str:
        chunks = []
        for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
            if context.expired() or time.monotonic() >= deadline:
                raise ScanTimeout(f"reading {response.url} exceeded the request deadline")
            if chunk:
                chunks.append(chunk)
        return _decode(b"".join(chunks), response.encoding)


def _decode(data: bytes, encoding: Optional[str]) -> str:
    try:
        return data.decode(encoding or 'utf-8', errors='replace')
    except LookupError:
        return data.decode('utf-8', errors='replace')
