"""Tree building from token streams.

:class:`NodeTreeBuilder` performs a recursive descent over the tokens of one
document and returns its root :class:`Node`. The parse is all-or-nothing:
any malformation raises :class:`MalformedInputError` and no partial tree is
returned.
"""

import time
from typing import Iterator, Optional

from xml_node_tree.shared import (
    DepthLimitError,
    MalformedInputError,
    ParserConfig,
    get_logger,
)
from xml_node_tree.tokenization import Token, TokenType, XMLTokenizer

from .node import Node

_ELEMENT_START = (TokenType.START_TAG, TokenType.EMPTY_TAG)


def _error_at(message: str, token: Token) -> MalformedInputError:
    return MalformedInputError(
        message,
        line=token.position.line,
        column=token.position.column,
        offset=token.position.offset,
    )


class NodeTreeBuilder:
    """Builds a :class:`Node` tree from markup text."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the tree builder.

        Args:
            config: Parser configuration (depth and size limits)
            correlation_id: Optional correlation ID for call tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")
        self._element_count = 0

    def build(self, text: str) -> Node:
        """Parse ``text`` and return the root node.

        Raises:
            MalformedInputError: the document is not well-formed
        """
        start_time = time.time()
        self._element_count = 0
        tokens = XMLTokenizer(self.config, self.correlation_id).iter_tokens(text)

        root: Optional[Node] = None
        for token in tokens:
            if token.type in _ELEMENT_START:
                if root is not None:
                    raise _error_at(
                        f"Unexpected element <{token.value}> after root element", token
                    )
                root = self._build_element(token, tokens, 1)
            elif token.type == TokenType.TEXT:
                if token.value.strip():
                    raise _error_at("Text is not allowed outside the root element", token)
            elif token.type == TokenType.CDATA:
                raise _error_at("CDATA is not allowed outside the root element", token)
            elif token.type == TokenType.END_TAG:
                raise _error_at(f"Unexpected end tag </{token.value}>", token)
            elif token.type == TokenType.DOCTYPE and root is not None:
                raise _error_at("DOCTYPE must precede the root element", token)

        if root is None:
            raise MalformedInputError("Document has no root element")

        self.logger.debug(
            "Tree building completed",
            extra={
                "root_tag": root.tag,
                "element_count": self._element_count,
                "processing_time": time.time() - start_time,
            }
        )
        return root

    def _build_element(self, start: Token, tokens: Iterator[Token], depth: int) -> Node:
        """Build the element opened by ``start``, consuming tokens up to its end tag."""
        if depth > self.config.max_depth:
            raise DepthLimitError(
                f"Element nesting exceeds maximum depth of {self.config.max_depth}",
                line=start.position.line,
                column=start.position.column,
                offset=start.position.offset,
            )

        node = Node(start.value, attributes=dict(start.attributes))
        self._element_count += 1
        if start.type == TokenType.EMPTY_TAG:
            return node

        for token in tokens:
            if token.type in _ELEMENT_START:
                node.append_child(self._build_element(token, tokens, depth + 1))
            elif token.is_character_data:
                # One text slot per node: later segments replace earlier ones
                node.inner_text = token.value.strip()
            elif token.type == TokenType.END_TAG:
                if token.value != node.tag:
                    raise _error_at(
                        f"Mismatched end tag </{token.value}>, expected </{node.tag}>",
                        token,
                    )
                return node
            elif token.type == TokenType.DOCTYPE:
                raise _error_at("DOCTYPE is not allowed inside an element", token)

        raise _error_at(f"Unexpected end of input: element <{node.tag}> is not closed", start)
