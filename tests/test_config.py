"""
Tests for censor.yml loading.

Tests cover:
- Parsing rules in declaration order
- Defaults for modifier, replacement and message
- Inactive configs (no file, no rules)
- Malformed configs
"""

import pytest

from censor import ConfigurationError, Rule, load_config, load_from_yaml, parse_config_text
from censor.config import parse_rule

from conftest import CENSOR_YML


class TestLoadConfig:
    """Test suite for config loading."""

    def test_parses_sample_file(self, sample_config):
        config = parse_config_text(CENSOR_YML)

        assert config == sample_config

    def test_rule_order_is_kept(self):
        config = load_config({"rules": [{"pattern": "b"}, {"pattern": "a"}, {"pattern": "b"}]})

        assert [rule.pattern for rule in config.rules] == ["b", "a", "b"]

    def test_rule_defaults(self):
        config = load_config({"rules": [{"pattern": "secret", "modifier": ""}]})

        assert config.rules == (Rule(pattern="secret", modifier="gi", replacement="", message=None),)
        assert config.message is None

    def test_explicit_fields(self):
        rule = parse_rule({"pattern": "x", "modifier": "m", "replacement": "y", "message": "z"})

        assert rule == Rule(pattern="x", modifier="m", replacement="y", message="z")

    def test_scalar_messages_are_read_alike(self):
        """Should accept numeric messages at both levels the same way."""
        config = load_config({"message": 404, "rules": [{"pattern": "x", "message": 1.5}]})

        assert config.message == "404"
        assert config.rules[0].message == "1.5"

    def test_missing_rules_is_inactive(self):
        assert load_config({"message": "hello"}) is None
        assert load_config(None) is None
        assert parse_config_text("") is None
        assert parse_config_text(None) is None

    def test_empty_rule_list_is_active(self):
        config = load_config({"rules": []})

        assert config is not None
        assert config.rules == ()

    def test_load_from_yaml(self, tmp_path, sample_config):
        path = tmp_path / "censor.yml"
        path.write_text(CENSOR_YML)

        assert load_from_yaml(path) == sample_config

    def test_invalid_patterns_are_not_compiled_at_load(self):
        """Should leave pattern validation to the engine run."""
        config = load_config({"rules": [{"pattern": "(unclosed"}]})

        assert config.rules[0].pattern == "(unclosed"


class TestMalformedConfig:
    """Test that broken files raise ConfigurationError."""

    @pytest.mark.parametrize("data", [
        ["not", "a", "mapping"],
        {"rules": "pattern"},
        {"rules": ["pattern"]},
        {"rules": [{"replacement": "x"}]},
        {"rules": [{"pattern": ""}]},
        {"rules": [{"pattern": "x", "message": ["a"]}]},
        {"rules": [{"pattern": "x"}], "message": {"a": 1}},
        {"rules": [{"pattern": "x"}], "message": True},
        {"rules": [{"pattern": "x", "message": False}]},
    ])
    def test_malformed(self, data):
        with pytest.raises(ConfigurationError):
            load_config(data)

    def test_invalid_yaml(self):
        with pytest.raises(ConfigurationError):
            parse_config_text("rules: [unclosed")
