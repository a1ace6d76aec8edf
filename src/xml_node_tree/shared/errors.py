"""Exception hierarchy for the node tree.

Absence (a missing attribute, child or path) is never an error; these
exceptions cover malformed input, failing output sinks and bad configuration.
"""

from typing import List, Optional


class NodeTreeError(Exception):
    """Base exception for all node tree errors."""


class MalformedInputError(NodeTreeError):
    """Raised when input text is not well-formed markup.

    The position of the offending token is attached when it is known.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> None:
        self.line = line
        self.column = column
        self.offset = offset
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class DepthLimitError(MalformedInputError):
    """Raised when element nesting exceeds the configured maximum depth."""


class InputTooLargeError(MalformedInputError):
    """Raised when the input exceeds the configured maximum size."""


class WriteFailureError(NodeTreeError):
    """Raised when the output sink rejects serialized data."""


class ConfigError(NodeTreeError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []
