"""
Issue Censor - MCP Server for censoring GitHub issues, pull requests and comments

A local MCP (Model Context Protocol) server that applies a repository's
censor.yml rules to text and to GitHub webhook events. Matched spans (API
tokens, passwords, ...) are rewritten and a note explains the edit.

Tools:
    - censor_text: Apply censor rules to a text, no side effects
    - handle_github_event: Censor the item of a webhook event on GitHub

Safety Constraints:
    - Only "opened", "edited" and "created" actions are censored
    - A rule that already matched the previous revision never fires again
    - DRY_RUN=1 computes and logs every edit without calling GitHub
"""

import logging
import os
import sys
from typing import Any

import httpx
from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from censor import ConfigurationError, RedactionEngine, compose, handle_event, load_from_yaml
from censor.config import CONFIG_PATH
from censor.github import get_github_client

# Load environment variables from .env file
load_dotenv()

# Logs go to stderr, stdout belongs to the stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize MCP server
mcp = FastMCP(
    "issue-censor",
    instructions="MCP Server for censoring sensitive data in GitHub issues, pull requests and comments"
)


def get_config_path(config_path: str = "") -> str:
    """Resolve the censor.yml to use for local censoring."""
    return config_path or os.getenv("CENSOR_CONFIG", CONFIG_PATH)


@mcp.tool()
def censor_text(text: str, previous_text: str = "", config_path: str = "") -> dict[str, Any]:
    """
    Apply censor rules to a text without touching GitHub.

    Rules run in the order they are declared in censor.yml. A rule that
    already matched previous_text is skipped to avoid edit loops.

    Args:
        text: The text to censor (issue, pull request or comment body).
        previous_text: The previous revision of the text, empty if none.
        config_path: Path to a censor.yml. Defaults to $CENSOR_CONFIG,
                     then .github/censor.yml in the working directory.

    Returns:
        A dictionary containing:
        - status: "success", "skipped" or "error"
        - changed: Whether any rule rewrote the text
        - text: The censored text
        - fired_rules: Patterns of the rules that fired, in order
        - comment: The note to post, empty if none is configured

    Example usage:
        censor_text("api_token=deadbeef012 ")
        censor_text("api_token=redacted", previous_text="api_token=abcdef")
    """
    path = get_config_path(config_path)

    try:
        config = load_from_yaml(path)
        if config is None:
            return {
                "status": "skipped",
                "config_path": path,
                "message": "No rules configured"
            }

        result = RedactionEngine(config.rules).apply(text, previous_text)

        return {
            "status": "success",
            "config_path": path,
            "changed": result.changed,
            "text": result.final_text,
            "fired_rules": [rule.pattern for rule in result.fired_rules],
            "comment": compose(config.message, result.fired_rules)
        }

    except FileNotFoundError:
        return {
            "status": "error",
            "config_path": path,
            "message": f"Config file not found: {path}"
        }
    except (OSError, UnicodeDecodeError) as e:
        return {
            "status": "error",
            "config_path": path,
            "message": f"Could not read config file {path}: {str(e)}"
        }
    except ConfigurationError as e:
        return {
            "status": "error",
            "config_path": path,
            "message": f"Invalid configuration: {e}"
        }


@mcp.tool()
def handle_github_event(event_name: str, payload: dict[str, Any]) -> dict[str, Any]:
    """
    Censor the issue, pull request or comment carried by a GitHub webhook event.

    The rules are read from .github/censor.yml of the event's repository.
    When the body violates a rule it is edited in place and a comment
    explaining the edit is posted on the issue or pull request.

    Args:
        event_name: The webhook event name: "issues", "pull_request" or
                    "issue_comment". Other events are ignored.
        payload: The webhook payload as delivered by GitHub.

    Returns:
        A dictionary containing:
        - status: "success", "skipped" or "error"
        - event: The event name and action
        - edited: Whether the body was (or in a dry run would be) edited
        - body: The censored body, if edited
        - comment: The comment posted, if any
        - dry_run: Whether side effects were skipped

    Example usage:
        handle_github_event("issues", {"action": "opened", "issue": {...}, ...})
    """
    event = f"{event_name}.{payload.get('action')}"

    try:
        with get_github_client() as github:
            outcome = handle_event(event_name, payload, github)

        if not outcome.handled:
            return {
                "status": "skipped",
                "event": event,
                "message": outcome.reason
            }

        return {
            "status": "success",
            "event": event,
            "edited": outcome.edited_body is not None,
            "body": outcome.edited_body,
            "comment": outcome.comment,
            "fired_rules": [rule.pattern for rule in outcome.result.fired_rules],
            "dry_run": outcome.dry_run
        }

    except ConfigurationError as e:
        return {
            "status": "error",
            "event": event,
            "message": f"Invalid configuration: {e}"
        }
    except httpx.HTTPStatusError as e:
        return {
            "status": "error",
            "event": event,
            "message": f"GitHub Error ({e.response.status_code}): {e.response.text}"
        }
    except httpx.HTTPError as e:
        return {
            "status": "error",
            "event": event,
            "message": f"GitHub request failed: {str(e)}"
        }
    except (KeyError, TypeError) as e:
        return {
            "status": "error",
            "event": event,
            "message": f"Malformed payload: {str(e)}"
        }


if __name__ == "__main__":
    # Run the MCP server using stdio transport
    mcp.run()
