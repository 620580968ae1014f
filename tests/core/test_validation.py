"""Tests for name, label and number validation."""

import pytest

from stepgraph.core.validation import (
    is_positive_integer,
    is_valid_state_machine_name,
    label_errors,
    validate_state_machine_name,
)


class TestValidateStateMachineName:
    """Tests for validate_state_machine_name function."""

    def test_valid_simple_name(self):
        """Simple name should be valid."""
        validate_state_machine_name("orders")  # Should not raise

    def test_valid_punctuation(self):
        """The allowed punctuation is accepted."""
        validate_state_machine_name("Orders+v2!@.(x)-=_'")

    def test_valid_max_length(self):
        """Exactly 80 chars should be valid."""
        validate_state_machine_name("a" * 80)

    def test_invalid_too_long(self):
        """Name over 80 chars should be rejected."""
        with pytest.raises(ValueError, match="between 1 and 80 characters"):
            validate_state_machine_name("a" * 81)

    def test_invalid_empty(self):
        """Empty name should be rejected."""
        with pytest.raises(ValueError, match="between 1 and 80"):
            validate_state_machine_name("")

    def test_invalid_spaces(self):
        """Spaces should be rejected."""
        with pytest.raises(ValueError, match="must match"):
            validate_state_machine_name("my machine")

    def test_invalid_slash(self):
        """Slashes should be rejected."""
        with pytest.raises(ValueError, match="Received: a/b"):
            validate_state_machine_name("a/b")


class TestIsValidStateMachineName:
    """Tests for is_valid_state_machine_name function."""

    def test_valid(self):
        """Valid names return True."""
        assert is_valid_state_machine_name("orders-v2") is True

    def test_invalid(self):
        """Invalid names return False."""
        assert is_valid_state_machine_name("") is False
        assert is_valid_state_machine_name("has space") is False
        assert is_valid_state_machine_name("a" * 81) is False


class TestLabelErrors:
    """Tests for Distributed Map label checks."""

    def test_no_label(self):
        """A missing label is valid."""
        assert label_errors(None) == []

    def test_single_character(self):
        """A single letter label is valid."""
        assert label_errors("s") == []

    def test_too_long(self):
        """Labels over 40 characters are rejected."""
        assert label_errors("a" * 45) == ["label must be 40 characters or less"]

    def test_max_length(self):
        """Exactly 40 characters is valid."""
        assert label_errors("a" * 40) == []

    @pytest.mark.parametrize("label", ["has space", "tab\there", "a*b", "a{b}", "x\\s", "ctrl\u0001", "c1\u0085"])
    def test_forbidden_characters(self, label):
        """Whitespace, special and control characters are rejected."""
        assert label_errors(label) == ["label cannot contain any whitespace or special characters"]

    def test_both_problems_reported(self):
        """Length and character problems are reported together."""
        assert len(label_errors("a " * 21)) == 2

    @pytest.mark.parametrize("label", ["", " ", "\t\n"])
    def test_blank(self, label):
        """Empty and whitespace only labels are rejected."""
        assert label_errors(label) == ["label must contain at least one non-whitespace character"]


class TestIsPositiveInteger:
    """Tests for is_positive_integer function."""

    def test_whole_numbers(self):
        """Zero and whole numbers up to 2**53 - 1 are accepted."""
        assert is_positive_integer(0)
        assert is_positive_integer(10)
        assert is_positive_integer(5.0)
        assert is_positive_integer(2**53 - 1)

    def test_rejected_values(self):
        """Negatives, fractions, booleans and huge numbers are rejected."""
        assert not is_positive_integer(-1)
        assert not is_positive_integer(1.5)
        assert not is_positive_integer(True)
        assert not is_positive_integer(2**53)
