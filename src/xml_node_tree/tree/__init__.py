"""Node tree model, deserialization and serialization.

Key Components:
    Node: A markup element with attributes, text, children and the
        navigation/mutation operations
    NodeTreeBuilder: Builds a Node tree from markup text
    NodeSerializer: Writes a Node tree as markup text
"""

from .builder import NodeTreeBuilder
from .node import Node
from .serializer import NodeSerializer, escape_attribute, escape_text

__all__ = [
    "Node",
    "NodeTreeBuilder",
    "NodeSerializer",
    "escape_attribute",
    "escape_text",
]
