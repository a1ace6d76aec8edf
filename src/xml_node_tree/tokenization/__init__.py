"""XML tokenization layer.

Converts markup text into a lazily produced stream of tokens for the tree
builder. Tokenization is strict: lexical errors raise
:class:`~xml_node_tree.shared.MalformedInputError`.
"""

from .tokenizer import (
    PREDEFINED_ENTITIES,
    Token,
    TokenPosition,
    TokenType,
    XMLTokenizer,
    is_name_char,
    is_name_start_char,
    is_valid_xml_char,
)

__all__ = [
    "PREDEFINED_ENTITIES",
    "Token",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
    "is_name_char",
    "is_name_start_char",
    "is_valid_xml_char",
]
