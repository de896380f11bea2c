"""Routes confirmed detections to the provider able to take them over."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Type

import requests

from .base_provider import Credentials, ProviderAPIError, TakeoverProvider, console
from .constants import MSG_TAKEOVER_FAILED, MSG_UNSUPPORTED
from .github_pages import GitHubPagesProvider
from .heroku import HerokuProvider

logger = logging.getLogger(__name__)

# Providers with automated takeover support
SUPPORTED_PROVIDERS = (GitHubPagesProvider, HerokuProvider)


@dataclass(frozen=True)
class Detection:
    """A domain confirmed as dangling for a provider."""
    domain: str
    cname: Optional[str]
    provider: str


class TakeoverDispatcher:
    """Hands detections to the matching provider adapter, or reports them."""

    def __init__(
        self,
        credentials: Credentials,
        providers: Iterable[Type[TakeoverProvider]] = SUPPORTED_PROVIDERS,
        session_factory=requests.Session
    ):
        self.providers: Dict[str, TakeoverProvider] = {
            provider.name: provider(credentials, session_factory()) for provider in providers
        }

    def get_provider(self, name: str) -> Optional[TakeoverProvider]:
        return self.providers.get(name.lower())

    def dispatch(self, detection: Detection) -> str:
        """
        Attempt the takeover of a detected domain.

        Args:
            detection: Confirmed dangling domain

        Returns:
            str: Outcome line for the domain
        """
        provider = self.get_provider(detection.provider)
        if provider is None:
            console.print(
                f"Found: Misconfigured {detection.provider} website at {detection.domain}",
                markup=False
            )
            return MSG_UNSUPPORTED.format(provider=detection.provider)

        logger.info(f"Attempting {provider.name} takeover of {detection.domain} (CNAME {detection.cname})")
        try:
            return provider.attempt(detection.domain)
        except ProviderAPIError as e:
            logger.error(f"{provider.name} takeover of {detection.domain} failed: {e}")
            return MSG_TAKEOVER_FAILED.format(domain=detection.domain, provider=provider.name, reason=e)
