"""Serialization of node trees to markup text.

Output is written depth-first in pre-order to any text sink with a ``write``
method. A sink that raises while being written to aborts serialization with
:class:`WriteFailureError`; how much was written before the failure is
unspecified.
"""

import io
import time
from typing import Callable, Optional, TextIO

from xml_node_tree.shared import SerializerConfig, WriteFailureError, get_logger

from .node import Node

_TEXT_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\r": "&#13;",
})

_ATTRIBUTE_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
})


def escape_text(text: str) -> str:
    """Escape character data for element content."""
    return text.translate(_TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    """Escape an attribute value for use inside double quotes.

    Whitespace control characters become character references so they
    survive attribute-value normalization in other parsers.
    """
    return value.translate(_ATTRIBUTE_ESCAPES)


class NodeSerializer:
    """Writes a :class:`Node` tree as markup text."""

    def __init__(
        self,
        config: Optional[SerializerConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or SerializerConfig()
        self.logger = get_logger(__name__, correlation_id, "node_serializer")

    def serialize(self, node: Node) -> str:
        """Serialize ``node`` and its subtree to a string."""
        buffer = io.StringIO()
        self.write(node, buffer)
        return buffer.getvalue()

    def write(self, node: Node, sink: TextIO) -> None:
        """Serialize ``node`` and its subtree into ``sink``.

        Raises:
            WriteFailureError: the sink rejected the output
            ValueError: a node in the tree has an empty tag
        """
        start_time = time.time()

        def emit(data: str) -> None:
            try:
                sink.write(data)
            except (OSError, ValueError) as e:
                raise WriteFailureError(f"Output sink rejected data: {e}") from e

        if self.config.xml_declaration:
            emit(f'<?xml version="1.0" encoding="{self.config.encoding.upper()}"?>\n')

        element_count = self._write_element(node, emit, 0)

        self.logger.debug(
            "Serialization completed",
            extra={
                "root_tag": node.tag,
                "element_count": element_count,
                "pretty": self.config.pretty,
                "processing_time": time.time() - start_time,
            }
        )

    def _write_element(self, node: Node, emit: Callable[[str], None], depth: int) -> int:
        """Write one element and its subtree; return the number of elements."""
        if not node.tag:
            raise ValueError("Cannot serialize a node with an empty tag")

        names = node.attributes.keys()
        if self.config.sort_attributes:
            names = sorted(names)
        tag_parts = [node.tag]
        for name in names:
            tag_parts.append(f'{name}="{escape_attribute(node.attributes[name])}"')
        opening = " ".join(tag_parts)

        if not node.children and not node.inner_text:
            if self.config.short_empty_elements:
                emit(f"<{opening}/>")
            else:
                emit(f"<{opening}></{node.tag}>")
            return 1

        emit(f"<{opening}>")
        if node.inner_text:
            emit(escape_text(node.inner_text))

        count = 1
        # Whitespace after text would become the last text segment when read back
        pretty = self.config.pretty and not node.inner_text
        for child in node.children:
            if pretty:
                emit("\n" + self.config.indent * (depth + 1))
            count += self._write_element(child, emit, depth + 1)

        if pretty and node.children:
            emit("\n" + self.config.indent * depth)
        emit(f"</{node.tag}>")
        return count
