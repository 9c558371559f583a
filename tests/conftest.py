"""
Pytest configuration and shared fixtures for Issue Censor tests.

Uses httpx.MockTransport to record GitHub API calls for safe, isolated
testing without a real GitHub token.
"""

import copy
import json
import os
import sys

import httpx
import pytest

# Add parent directory to path for server imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from censor import CensorConfig, GitHubClient, Rule  # noqa: E402

API_URL = "https://api.github.test"

CENSOR_YML = """\
message: I just edited this for you
rules:
  - pattern: '(api_token=)\\w+'
    replacement: '$1redacted'
    message: do not post your api token
"""


@pytest.fixture(autouse=True)
def set_github_env(monkeypatch):
    """
    Set mock GitHub settings and clear the dry run switch.
    This runs automatically before each test.
    """
    monkeypatch.setenv("GITHUB_TOKEN", "testing")
    monkeypatch.setenv("GITHUB_API_URL", API_URL)
    monkeypatch.delenv("DRY_RUN", raising=False)
    monkeypatch.delenv("CENSOR_CONFIG", raising=False)


class GitHubRecorder:
    """Fake GitHub API that records every request it receives."""

    def __init__(self, config_text=CENSOR_YML, status_code=200):
        self.config_text = config_text
        self.status_code = status_code
        self.requests = []
        self.github = GitHubClient(
            token="testing",
            base_url=API_URL,
            client=httpx.Client(transport=httpx.MockTransport(self._handle)),
        )

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            if self.config_text is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, text=self.config_text)
        return httpx.Response(self.status_code, json={"id": 1})

    def calls(self, method, path_suffix=""):
        """Return the JSON bodies of recorded requests matching method and path."""
        return [
            json.loads(request.content)
            for request in self.requests
            if request.method == method and request.url.path.endswith(path_suffix)
        ]

    @property
    def writes(self):
        return [request for request in self.requests if request.method != "GET"]


@pytest.fixture
def github_recorder():
    """Provide a recording fake GitHub serving the sample censor.yml."""
    recorder = GitHubRecorder()
    yield recorder
    recorder.github.close()


@pytest.fixture
def api_token_rule():
    return Rule(
        pattern=r"(api_token=)\w+",
        replacement="$1redacted",
        message="do not post your api token",
    )


@pytest.fixture
def sample_config(api_token_rule):
    return CensorConfig(rules=(api_token_rule,), message="I just edited this for you")


_PAYLOADS = {
    "issues": {
        "action": "opened",
        "repository": {"name": "sentry", "owner": {"login": "getsentry"}},
        "issue": {
            "id": 123,
            "number": 21,
            "user": {"login": "dr_example"},
            "title": "Issue title",
            "body": "api_token=deadbeef012 ",
        },
        "installation": {"id": 99},
    },
    "pull_request": {
        "action": "opened",
        "repository": {"name": "sentry", "owner": {"login": "getsentry"}},
        "pull_request": {
            "id": 456,
            "number": 22,
            "user": {"login": "dr_example"},
            "title": "Pull Request title",
            "body": "Here is my api_token=deadbeef012",
        },
        "installation": {"id": 99},
    },
    "issue_comment": {
        "action": "created",
        "repository": {"name": "sentry", "owner": {"login": "getsentry"}},
        "issue": {"id": 123, "number": 21},
        "comment": {
            "id": 789,
            "user": {"login": "dr_evil"},
            "body": "Found my api_token=deadbeef012",
        },
        "installation": {"id": 99},
    },
}


@pytest.fixture
def payloads():
    """Webhook payloads for each censored event, keyed by event name."""
    return copy.deepcopy(_PAYLOADS)
