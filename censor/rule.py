"""
Censor Rule - A single pattern/replacement/message record.

Rules are loaded from a repository's censor.yml and applied in the order
they are declared. The rule file dialect comes from a JavaScript bot, so
this module understands its flags and replacement tokens:

    - modifier: "gi" by default (global + case-insensitive)
    - replacement: "$1", "$&", "$<name>", "$$" etc. are expanded
    - pattern: "(?<name>...)" named groups are accepted

Example:
    rule = Rule(pattern=r"(api_token=)\\w+", replacement="$1redacted")
    compiled = rule.compile()
    rule.substitute(compiled, "api_token=deadbeef")
    # "api_token=redacted"
"""

from dataclasses import dataclass
from typing import Optional
import re


# Default modifier used when a rule does not declare one
DEFAULT_MODIFIER = "gi"

# Modifier letters understood by the rule dialect. "g" changes how many
# occurrences are replaced, "u" is implied by Python str patterns.
_MODIFIER_FLAGS = {
    "g": 0,
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,
}

# "(?<name>" but not lookbehind "(?<=" / "(?<!", nor "\(?<" escaped by an odd
# run of backslashes
_NAMED_GROUP = re.compile(r"(?<!\\)((?:\\\\)*)\(\?<(?![=!])")

# $$, $&, $`, $', $1..$99, $<name>
_REPLACEMENT_TOKEN = re.compile(r"\$(\$|&|`|'|\d{1,2}|<[^>]*>)")


class ConfigurationError(ValueError):
    """Raised when a rule or a rule file cannot be used as configured."""


def parse_modifier(modifier: Optional[str]) -> tuple[int, bool]:
    """
    Translate a modifier string into Python regex flags.

    Args:
        modifier: Flag letters such as "gi". Empty or None means the default.

    Returns:
        A tuple of (flags, is_global).

    Raises:
        ConfigurationError: On unknown or repeated flag letters.
    """
    modifier = modifier or DEFAULT_MODIFIER
    flags = 0
    seen = set()
    for letter in modifier:
        if letter not in _MODIFIER_FLAGS:
            raise ConfigurationError(f"Unsupported regex modifier '{letter}' in '{modifier}'")
        if letter in seen:
            raise ConfigurationError(f"Repeated regex modifier '{letter}' in '{modifier}'")
        seen.add(letter)
        flags |= _MODIFIER_FLAGS[letter]
    return flags, "g" in seen


def compile_pattern(pattern: str, modifier: Optional[str] = None) -> re.Pattern[str]:
    """
    Compile a rule pattern with its modifier.

    Raises:
        ConfigurationError: If the pattern or the modifier is invalid.
    """
    if not isinstance(pattern, str):
        raise ConfigurationError(f"Rule pattern must be a string, got {type(pattern).__name__}")
    flags, _ = parse_modifier(modifier)
    try:
        return re.compile(_NAMED_GROUP.sub(r"\1(?P<", pattern), flags)
    except re.error as e:
        raise ConfigurationError(f"Invalid rule pattern '{pattern}': {e}") from e


def expand_replacement(match: re.Match[str], template: str) -> str:
    """
    Expand the "$" tokens of a replacement template for one match.

    Group references that point past the last group stay literal, groups
    that did not participate in the match expand to an empty string.
    """
    group_count = match.re.groups

    def _group(index: int) -> str:
        return match.group(index) or ""

    def _token(token: re.Match[str]) -> str:
        value = token.group(1)
        if value == "$":
            return "$"
        if value == "&":
            return match.group(0)
        if value == "`":
            return match.string[:match.start()]
        if value == "'":
            return match.string[match.end():]
        if value.startswith("<"):
            if not match.re.groupindex:
                return token.group(0)
            return match.groupdict().get(value[1:-1]) or ""

        # Two digits win when that group exists, otherwise fall back to one
        index = int(value)
        if 1 <= index <= group_count:
            return _group(index)
        if len(value) == 2 and 1 <= int(value[0]) <= group_count:
            return _group(int(value[0])) + value[1]
        return token.group(0)

    return _REPLACEMENT_TOKEN.sub(_token, template)


@dataclass(frozen=True)
class Rule:
    """A single censor rule, in the order it was declared."""
    pattern: str  # regex source, e.g. "(api_token=)\\w+"
    modifier: str = DEFAULT_MODIFIER  # flag letters, e.g. "gi"
    replacement: str = ""  # e.g. "$1redacted", empty deletes the match
    message: Optional[str] = None  # note posted when this rule fires

    @property
    def is_global(self) -> bool:
        """True if every occurrence is replaced, not only the first."""
        return parse_modifier(self.modifier)[1]

    def compile(self) -> re.Pattern[str]:
        """Compile this rule's pattern with its modifier."""
        return compile_pattern(self.pattern, self.modifier)

    def substitute(self, compiled: re.Pattern[str], text: str) -> str:
        """Replace the matches of ``compiled`` in ``text`` with this rule's replacement."""
        replacement = self.replacement or ""
        return compiled.sub(
            lambda match: expand_replacement(match, replacement),
            text,
            count=0 if self.is_global else 1,
        )

    def __repr__(self) -> str:
        return f"<Rule: {self.pattern}>"
