"""XML Node Tree.

A small tree model for XML documents: parse markup into :class:`Node`
objects, navigate and edit them with path-based helpers, and serialize them
back to markup.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), serialize()
- Level 2: Configured processing - NodeTreeConfig with parser and
  serializer settings
- Level 3: Components - NodeTreeBuilder, NodeSerializer, XMLTokenizer
"""

__version__ = "0.1.0"
__author__ = "XML Node Tree Team"

# Level 1: Simple functions
from .api import (
    parse,
    parse_bytes,
    parse_file,
    parse_string,
    serialize,
    serialize_bytes,
    serialize_to,
    write_file,
)

# Level 2: Configuration and errors
from .shared import (
    ConfigError,
    ConfigValidationError,
    DepthLimitError,
    InputTooLargeError,
    MalformedInputError,
    NodeTreeConfig,
    NodeTreeError,
    ParserConfig,
    SerializerConfig,
    WriteFailureError,
)

# Level 3: Components and the tree model
from .tokenization import XMLTokenizer
from .tree import Node, NodeSerializer, NodeTreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Tree model
    "Node",

    # Level 1: Simple functions
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_string",
    "serialize",
    "serialize_bytes",
    "serialize_to",
    "write_file",

    # Level 2: Configuration and errors
    "NodeTreeConfig",
    "ParserConfig",
    "SerializerConfig",
    "ConfigError",
    "ConfigValidationError",
    "DepthLimitError",
    "InputTooLargeError",
    "MalformedInputError",
    "NodeTreeError",
    "WriteFailureError",

    # Level 3: Components
    "NodeSerializer",
    "NodeTreeBuilder",
    "XMLTokenizer",
]
