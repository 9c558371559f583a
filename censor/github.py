"""
GitHub REST client - the side effects of the censor bot.

Fetches a repository's censor.yml, edits issue, pull request and comment
bodies, and posts the explanatory comment. HTTP failures are raised as
httpx.HTTPStatusError and left to the caller.
"""

import logging
import os
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 30.0


class GitHubClient:
    """
    Minimal GitHub API client for the calls the bot needs.

    Example:
        github = GitHubClient(token=os.getenv("GITHUB_TOKEN"))
        github.edit_issue("getsentry", "sentry", 21, "api_token=redacted")
        github.create_comment("getsentry", "sentry", 21, "I just edited this for you")

    Pull requests are edited through the issues API, which accepts pull
    request numbers.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_API_URL,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            token: GitHub token. Requests are anonymous without one.
            base_url: API root, override for GitHub Enterprise.
            client: Preconfigured httpx.Client (e.g. with a mock transport).
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = client or httpx.Client(timeout=REQUEST_TIMEOUT)
        self._client.base_url = base_url
        self._client.headers.update(headers)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = self._client.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    def get_file(self, owner: str, repo: str, path: str) -> Optional[str]:
        """
        Fetch the raw contents of a file on the default branch.

        Returns:
            The file contents, or None if the file does not exist.
        """
        response = self._client.get(
            f"/repos/{owner}/{repo}/contents/{path}",
            headers={"Accept": "application/vnd.github.raw+json"},
        )
        if response.status_code == 404:
            logger.debug(f"No {path} in {owner}/{repo}")
            return None
        response.raise_for_status()
        return response.text

    def edit_issue(self, owner: str, repo: str, number: int, body: str) -> dict[str, Any]:
        """Replace the body of an issue or pull request."""
        return self._request(
            "PATCH", f"/repos/{owner}/{repo}/issues/{number}", json={"body": body}
        ).json()

    def edit_comment(self, owner: str, repo: str, comment_id: int, body: str) -> dict[str, Any]:
        """Replace the body of an issue comment."""
        return self._request(
            "PATCH", f"/repos/{owner}/{repo}/issues/comments/{comment_id}", json={"body": body}
        ).json()

    def create_comment(self, owner: str, repo: str, number: int, body: str) -> dict[str, Any]:
        """Post a new comment on an issue or pull request."""
        return self._request(
            "POST", f"/repos/{owner}/{repo}/issues/{number}/comments", json={"body": body}
        ).json()


def get_github_client() -> GitHubClient:
    """Create a GitHubClient using environment credentials."""
    return GitHubClient(
        token=os.getenv("GITHUB_TOKEN"),
        base_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL),
    )
