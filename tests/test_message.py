"""Tests for the note composer."""

from censor import Rule, apply, compose


class TestCompose:
    """Test suite for compose()."""

    def test_general_and_rule_messages(self, api_token_rule):
        """Should build the note from the example rule file."""
        result = apply([api_token_rule], "api_token=deadbeef012 ", "")

        assert result.final_text == "api_token=redacted "
        assert compose("I just edited this for you", result.fired_rules) == (
            "I just edited this for you do not post your api token"
        )

    def test_only_rule_messages(self):
        rules = [Rule(pattern="a", message="first."), Rule(pattern="b", message="second.")]

        assert compose(None, rules) == "first. second."

    def test_rules_without_message_contribute_nothing(self):
        rules = [Rule(pattern="a"), Rule(pattern="b", message="only me")]

        assert compose("", rules) == "only me"

    def test_nothing_to_say(self):
        """Should return an empty string so the caller skips the note."""
        assert compose(None, [Rule(pattern="a")]) == ""
        assert compose(None, []) == ""

    def test_surrounding_whitespace_is_trimmed(self):
        assert compose("  edited ", [Rule(pattern="a", message="bye  ")]) == "edited  bye"
