"""
RedactionEngine - Core engine for censoring issue, pull request and comment bodies.

This engine orchestrates:
1. Applying censor rules strictly in declaration order
2. The loop guard against the previous revision of the text
3. Tracking which rules actually fired

It is stateless: every call to apply() is independent and reentrant.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .rule import Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedactionResult:
    """Outcome of one pass of the engine over a text."""
    original_text: str
    final_text: str
    fired_rules: tuple[Rule, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        """False for a no-op outcome: text unchanged and nothing fired."""
        return self.final_text != self.original_text


class RedactionEngine:
    """
    Engine for censoring text with an ordered list of rules.

    Each rule sees the output of the rules before it, never the original
    text. A rule whose pattern already matched the previous revision of
    the text is skipped: the current match is assumed to be left over from
    an earlier correction (our own placeholder, or a chain reaction from
    another rule) and firing again would loop.

    Example:
        engine = RedactionEngine([
            Rule(pattern=r"(api_token=)\\w+", replacement="$1redacted"),
        ])

        result = engine.apply("api_token=deadbeef012 ")
        # result.final_text: "api_token=redacted "
        # result.fired_rules: (Rule(...),)

        result = engine.apply("api_token=redacted", "api_token=abcdef")
        # result.changed: False

    Errors:
        A rule that fails to compile raises ConfigurationError. The engine
        does not skip it or catch it.
    """

    def __init__(self, rules: Iterable[Rule] = ()):
        """
        Initialize the RedactionEngine.

        Args:
            rules: Rules to apply, in order.
        """
        self._rules: tuple[Rule, ...] = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def apply(self, current_text: Optional[str], previous_text: Optional[str] = None) -> RedactionResult:
        """
        Censor the given text.

        Args:
            current_text: The text to censor. None is treated as empty.
            previous_text: The revision before current_text, empty or None
                           on creation.

        Returns:
            A RedactionResult. fired_rules is empty iff the text did not change.

        Raises:
            ConfigurationError: If a rule pattern or modifier is invalid.
        """
        original = current_text or ""
        previous = previous_text or ""
        text = original
        fired: list[Rule] = []

        for rule in self._rules:
            compiled = rule.compile()

            if not compiled.search(text):
                continue

            if compiled.search(previous):
                # Already violated before, we are likely in a loop
                logger.debug(f"Loop guard suppressed rule {rule.pattern!r}")
                continue

            fired.append(rule)
            text = rule.substitute(compiled, text)

        if text == original:
            # Rules cancelled each other out
            fired = []

        return RedactionResult(original_text=original, final_text=text, fired_rules=tuple(fired))


def apply(rules: Iterable[Rule], current_text: Optional[str], previous_text: Optional[str] = None) -> RedactionResult:
    """
    Apply rules to current_text with previous_text as loop guard.

    Convenience wrapper around RedactionEngine for one-off use.
    """
    return RedactionEngine(rules).apply(current_text, previous_text)
