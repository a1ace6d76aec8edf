"""Tests for the exception hierarchy."""

from xml_node_tree.shared import (
    ConfigError,
    ConfigValidationError,
    DepthLimitError,
    InputTooLargeError,
    MalformedInputError,
    NodeTreeError,
    WriteFailureError,
)


class TestErrorHierarchy:
    """Test exception inheritance."""

    def test_all_errors_share_a_base(self) -> None:
        """Test every library error derives from NodeTreeError."""
        for error_class in (
            MalformedInputError,
            DepthLimitError,
            InputTooLargeError,
            WriteFailureError,
            ConfigError,
            ConfigValidationError,
        ):
            assert issubclass(error_class, NodeTreeError)

    def test_limit_errors_are_malformed_input(self) -> None:
        """Test limit violations can be caught as malformed input."""
        assert issubclass(DepthLimitError, MalformedInputError)
        assert issubclass(InputTooLargeError, MalformedInputError)

    def test_config_validation_error_is_value_error(self) -> None:
        """Test validation errors can be caught as ValueError."""
        assert issubclass(ConfigValidationError, ValueError)


class TestMalformedInputError:
    """Test position reporting."""

    def test_position_in_message(self) -> None:
        """Test a known position is appended to the message."""
        error = MalformedInputError("Bad tag", line=3, column=7, offset=40)

        assert str(error) == "Bad tag (line 3, column 7)"
        assert (error.line, error.column, error.offset) == (3, 7, 40)

    def test_without_position(self) -> None:
        """Test the message is unchanged when no position is known."""
        error = MalformedInputError("Document has no root element")

        assert str(error) == "Document has no root element"
        assert error.line is None
        assert error.offset is None


class TestConfigValidationError:
    """Test configuration error details."""

    def test_field_and_suggestions(self) -> None:
        """Test field name and suggestions are kept."""
        error = ConfigValidationError("bad", field_name="indent", suggestions=["use spaces"])

        assert error.field_name == "indent"
        assert error.suggestions == ["use spaces"]

    def test_suggestions_default_to_empty(self) -> None:
        """Test suggestions default to an empty list."""
        assert ConfigValidationError("bad").suggestions == []
