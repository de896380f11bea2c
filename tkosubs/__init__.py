"""
tko-subs

Detects subdomains whose CNAME points at a de-provisioned hosting service and
re-claims the service where automated takeover is supported.
"""

from .base_provider import Credentials, ProviderAPIError, RateLimitError, TakeoverProvider
from .constants import VERSION
from .dispatcher import Detection, TakeoverDispatcher
from .matcher import FingerprintMatcher
from .probe import ProbeEngine, ProbeResult, ProbeStatus
from .registry import ProviderRecord, ProviderRegistry
from .resolver import CnameResolver
from .scanner import TakeoverScanner

__version__ = VERSION
__all__ = [
    'Credentials',
    'CnameResolver',
    'Detection',
    'FingerprintMatcher',
    'ProbeEngine',
    'ProbeResult',
    'ProbeStatus',
    'ProviderAPIError',
    'ProviderRecord',
    'ProviderRegistry',
    'RateLimitError',
    'TakeoverDispatcher',
    'TakeoverProvider',
    'TakeoverScanner'
]
