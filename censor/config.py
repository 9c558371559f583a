"""
Censor configuration - loads censor.yml into an ordered rule list.

Example censor.yml:

    message: I just edited this for you
    rules:
      - pattern: '(api_token=)\\w+'
        replacement: '$1redacted'
        message: do not post your api token
      - pattern: 'password:\\s*\\S+'
        modifier: i
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .rule import DEFAULT_MODIFIER, ConfigurationError, Rule

# Configuration file used to activate the bot
CONFIG_NAME = "censor.yml"

# Where the configuration file lives inside a repository
CONFIG_PATH = f".github/{CONFIG_NAME}"


@dataclass(frozen=True)
class CensorConfig:
    """Rules of a repository plus the general message sent with every note."""
    rules: tuple[Rule, ...] = field(default_factory=tuple)
    message: Optional[str] = None


def _optional_str(value: Any, where: str) -> Optional[str]:
    """Accept a YAML scalar as text; numbers are kept as written."""
    if value is None:
        return None
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ConfigurationError(f"{where} must be a string")
    return str(value)


def parse_rule(entry: Any, index: int = 0) -> Rule:
    """
    Build a Rule from one entry of the rules list.

    Raises:
        ConfigurationError: If the entry is not a mapping with a string pattern.
    """
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Rule #{index} must be a mapping, got {type(entry).__name__}")
    if not isinstance(entry.get("pattern"), str) or not entry["pattern"]:
        raise ConfigurationError(f"Rule #{index} is missing a 'pattern'")

    return Rule(
        pattern=entry["pattern"],
        modifier=_optional_str(entry.get("modifier"), f"Rule #{index} 'modifier'") or DEFAULT_MODIFIER,
        replacement=_optional_str(entry.get("replacement"), f"Rule #{index} 'replacement'") or "",
        message=_optional_str(entry.get("message"), f"Rule #{index} 'message'"),
    )


def load_config(data: Any) -> Optional[CensorConfig]:
    """
    Normalize a parsed censor.yml.

    Returns:
        A CensorConfig, or None if the data defines no rules at all (the
        bot is not active for this repository).

    Raises:
        ConfigurationError: If the data is not shaped like a censor.yml.
    """
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigurationError(f"{CONFIG_NAME} must be a mapping, got {type(data).__name__}")

    rules = data.get("rules")
    if rules is None:
        return None
    if not isinstance(rules, list):
        raise ConfigurationError(f"'rules' in {CONFIG_NAME} must be a list")

    message = _optional_str(data.get("message"), f"'message' in {CONFIG_NAME}")

    return CensorConfig(
        rules=tuple(parse_rule(entry, index) for index, entry in enumerate(rules)),
        message=message,
    )


def parse_config_text(text: Optional[str]) -> Optional[CensorConfig]:
    """Parse the raw contents of a censor.yml."""
    if not text:
        return None
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid {CONFIG_NAME}: {e}") from e
    return load_config(data)


def load_from_yaml(path: Union[str, Path]) -> Optional[CensorConfig]:
    """Load config from a YAML file on disk."""
    return parse_config_text(Path(path).read_text(encoding="utf-8"))
