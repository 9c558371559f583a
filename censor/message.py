"""Compose the note posted after an item was censored."""

from typing import Iterable, Optional

from .rule import Rule


def compose(general_message: Optional[str], fired_rules: Iterable[Rule]) -> str:
    """
    Join the general message and each fired rule's message with single spaces.

    Rules without a message contribute nothing. An empty string means no
    note should be posted.
    """
    parts = [general_message] + [rule.message for rule in fired_rules]
    return " ".join(part for part in parts if part).strip()
