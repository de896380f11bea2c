"""Base takeover provider class for tko-subs."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from .utils import console


class ProviderAPIError(Exception):
    """A provider API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ProviderAPIError):
    """A provider API call was rejected by rate limiting."""


class MissingCredentialsError(ProviderAPIError):
    """Credentials needed for a takeover are not configured."""


@dataclass(frozen=True)
class Credentials:
    """Secrets used by the takeover providers."""
    github_token: Optional[str] = None
    heroku_username: Optional[str] = None
    heroku_api_key: Optional[str] = None
    heroku_app_name: Optional[str] = None


class TakeoverProvider(ABC):
    """Base class for providers whose dangling resources can be re-claimed."""

    name: str = ""
    api_url: str = ""
    timeout: float = 30

    def __init__(self, credentials: Credentials, session: Optional[requests.Session] = None):
        """
        Initialize the provider.

        Args:
            credentials: Secrets for the provider API
            session: HTTP session used for API calls
        """
        self.credentials = credentials
        self.session = session or requests.Session()
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @abstractmethod
    def attempt(self, domain: str) -> str:
        """
        Claim the resource behind a dangling domain.

        Args:
            domain: Vulnerable domain

        Returns:
            str: Outcome line for the domain

        Raises:
            ProviderAPIError: If the takeover cannot proceed
        """
        pass

    def request(self, method: str, path: str, **kwargs) -> Any:
        """
        Call the provider API and return the decoded JSON body.

        Raises:
            RateLimitError: If the call was rate limited
            ProviderAPIError: For any other failed call
        """
        url = f"{self.api_url}{path}"
        kwargs.setdefault('timeout', self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ProviderAPIError(f"{method} {path} failed: {e}") from e

        if self.is_rate_limited(response):
            raise RateLimitError(f"{method} {path} rate limited", response.status_code)
        if not response.ok:
            raise ProviderAPIError(
                f"{method} {path} returned {response.status_code}: {_error_message(response)}",
                response.status_code
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text

    def is_rate_limited(self, response: requests.Response) -> bool:
        return response.status_code == 429

    def best_effort(self, step: str, call: Callable[[], Any]) -> Any:
        """Run an API step, logging and skipping it if rate limited."""
        try:
            return call()
        except RateLimitError:
            self.logger.warning(f"hit rate limit during {step}")
            return None


def _error_message(response: requests.Response) -> str:
    try:
        return response.json().get('message', response.reason)
    except (ValueError, AttributeError):
        return response.reason or ""
