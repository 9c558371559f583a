"""
Event dispatch - decides when the engine runs and performs the side effects.

Handles the GitHub webhook events:
    - issues         (issue body, edited through the issues API)
    - pull_request   (pull request body, edited through the issues API)
    - issue_comment  (comment body, edited through the comments API)

Only "opened", "edited" and "created" actions are censored. The explanatory
note is always posted on the parent issue or pull request.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .config import CONFIG_PATH, CensorConfig, parse_config_text
from .engine import RedactionEngine, RedactionResult
from .github import GitHubClient
from .message import compose

logger = logging.getLogger(__name__)

# Actions that create or change the body of an item
CENSORED_ACTIONS = frozenset({"opened", "edited", "created"})


class ItemKind(str, Enum):
    """Kind of item an event carries, named after its payload key."""
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    COMMENT = "comment"


# Webhook event name -> item kind
EVENT_KINDS = {
    "issues": ItemKind.ISSUE,
    "pull_request": ItemKind.PULL_REQUEST,
    "issue_comment": ItemKind.COMMENT,
}


@dataclass
class EventOutcome:
    """What handling one event did, or would have done in a dry run."""
    kind: Optional[ItemKind]
    handled: bool = False
    result: Optional[RedactionResult] = None
    edited_body: Optional[str] = None
    comment: Optional[str] = None
    dry_run: bool = False
    reason: str = ""


def is_dry_run() -> bool:
    """True if the DRY_RUN environment variable asks to skip side effects."""
    return os.getenv("DRY_RUN", "").strip().lower() in ("1", "true", "yes", "on")


def should_censor(event_name: str, action: Optional[str]) -> bool:
    """True if this event and action may change the body of an item."""
    return event_name in EVENT_KINDS and action in CENSORED_ACTIONS


def extract_texts(payload: dict[str, Any], kind: ItemKind) -> tuple[str, str]:
    """
    Get the current and previous body from an event payload.

    The previous body only exists on "edited" events, and only when the
    body (not just the title) changed.
    """
    item = payload.get(kind.value) or {}
    current = item.get("body") or ""
    changes = payload.get("changes") or {}
    previous = (changes.get("body") or {}).get("from") or ""
    return current, previous


def _issue_number(payload: dict[str, Any]) -> Optional[int]:
    item = payload.get("issue") or payload.get("pull_request") or {}
    return item.get("number")


def handle_event(
    event_name: str,
    payload: dict[str, Any],
    github: GitHubClient,
    config: Optional[CensorConfig] = None,
    dry_run: Optional[bool] = None,
) -> EventOutcome:
    """
    Check the body of the event's item and edit it if it violates a rule.

    Args:
        event_name: Webhook event name (X-GitHub-Event header).
        payload: Webhook payload.
        github: Client used for the config lookup and the side effects.
        config: Rules to apply. Fetched from the repository when None.
        dry_run: Skip side effects. Defaults to the DRY_RUN environment variable.

    Returns:
        An EventOutcome describing the edit and the comment.

    Raises:
        ConfigurationError: If the repository's censor.yml is invalid.
        httpx.HTTPError: If a GitHub call fails.
    """
    kind = EVENT_KINDS.get(event_name)
    action = payload.get("action")
    if dry_run is None:
        dry_run = is_dry_run()

    if not should_censor(event_name, action):
        return EventOutcome(kind=kind, dry_run=dry_run, reason=f"ignored {event_name}.{action}")

    repository = payload["repository"]
    owner = repository["owner"]["login"]
    repo = repository["name"]

    # Only proceed if there is a config and it defines rules
    if config is None:
        config = parse_config_text(github.get_file(owner, repo, CONFIG_PATH))
    if config is None:
        return EventOutcome(kind=kind, dry_run=dry_run, reason="no rules configured")

    item = payload[kind.value]
    current, previous = extract_texts(payload, kind)
    result = RedactionEngine(config.rules).apply(current, previous)

    if not result.changed:
        return EventOutcome(kind=kind, handled=True, result=result, dry_run=dry_run, reason="clean")

    number = _issue_number(payload)
    slug = f"{owner}/{repo}#{number}-{item.get('id')}"
    logger.info(f"Editing {slug} due to {len(result.fired_rules)} violated rules")
    logger.debug(f"Changing {kind.value} {slug}: {result.final_text!r}")

    if not dry_run:
        if kind is ItemKind.COMMENT:
            github.edit_comment(owner, repo, item["id"], result.final_text)
        else:
            github.edit_issue(owner, repo, number, result.final_text)

    outcome = EventOutcome(
        kind=kind,
        handled=True,
        result=result,
        edited_body=result.final_text,
        dry_run=dry_run,
        reason="edited",
    )

    message = compose(config.message, result.fired_rules)
    if message == "":
        logger.debug("Skipping comment as no messages are configured")
        return outcome

    # Always comment on the issue, regardless of whether this was an issue or a comment
    logger.debug(f"Posting comment on {owner}/{repo}#{number}: {message!r}")
    if not dry_run:
        github.create_comment(owner, repo, number, message)
    outcome.comment = message
    return outcome
