"""
Censor Module - Rule-driven redaction of issue, pull request and comment bodies

This module rewrites text that violates a repository's censor rules and
builds the note explaining the edit.

Architecture:
    - Rule: One pattern/replacement/message record from censor.yml
    - RedactionEngine: Applies rules in order, guarded against edit loops
    - compose: Joins the general message and the fired rules' messages
    - handle_event: Runs the engine for GitHub webhook events

Example:
    from censor import Rule, RedactionEngine, compose

    rule = Rule(pattern=r"(api_token=)\\w+", replacement="$1redacted",
                message="do not post your api token")
    result = RedactionEngine([rule]).apply("api_token=deadbeef012 ")
    # result.final_text: "api_token=redacted "
    compose("I just edited this for you", result.fired_rules)
    # "I just edited this for you do not post your api token"
"""

from .rule import ConfigurationError, Rule
from .engine import RedactionEngine, RedactionResult, apply
from .message import compose
from .config import CensorConfig, load_config, load_from_yaml, parse_config_text
from .events import EventOutcome, ItemKind, handle_event
from .github import GitHubClient

__all__ = [
    "ConfigurationError", "Rule",
    "RedactionEngine", "RedactionResult", "apply",
    "compose",
    "CensorConfig", "load_config", "load_from_yaml", "parse_config_text",
    "EventOutcome", "ItemKind", "handle_event",
    "GitHubClient",
]
