"""Serialization entry points.

Module-level functions turning a :class:`Node` tree into markup as a string,
as encoded bytes, into an open text stream, or into a file.
"""

from pathlib import Path
from typing import Optional, TextIO, Union

from xml_node_tree.shared import NodeTreeConfig, WriteFailureError, get_logger
from xml_node_tree.tree import Node, NodeSerializer


def _serializer(
    config: Optional[NodeTreeConfig],
    correlation_id: Optional[str],
    pretty: Optional[bool],
) -> NodeSerializer:
    config = config or NodeTreeConfig()
    if pretty is not None:
        config = config.override(serializer__pretty=pretty)
    return NodeSerializer(config.serializer, correlation_id or config.correlation_id)


def serialize(
    node: Node,
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
    pretty: Optional[bool] = None,
) -> str:
    """Serialize ``node`` and its subtree to a markup string.

    Args:
        node: Root of the subtree to serialize
        config: Optional configuration
        correlation_id: Optional correlation ID for call tracking
        pretty: Shortcut overriding ``config.serializer.pretty``

    Examples:
        >>> root = Node("a", attributes={"x": "1"})
        >>> root.create_path("b").inner_text = "hello"
        >>> serialize(root)
        '<a x="1"><b>hello</b></a>'
    """
    return _serializer(config, correlation_id, pretty).serialize(node)


def serialize_bytes(
    node: Node,
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
    pretty: Optional[bool] = None,
) -> bytes:
    """Serialize ``node`` and encode with ``config.serializer.encoding``.

    Characters the encoding cannot represent become character references.
    """
    serializer = _serializer(config, correlation_id, pretty)
    text = serializer.serialize(node)
    return text.encode(serializer.config.encoding, errors="xmlcharrefreplace")


def serialize_to(
    node: Node,
    sink: TextIO,
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
    pretty: Optional[bool] = None,
) -> None:
    """Stream ``node`` and its subtree into a text sink.

    Raises:
        WriteFailureError: the sink rejected the output
    """
    _serializer(config, correlation_id, pretty).write(node, sink)


def write_file(
    node: Node,
    file_path: Union[str, Path],
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
    pretty: Optional[bool] = None,
) -> None:
    """Write ``node`` and its subtree to a file.

    Raises:
        WriteFailureError: the file cannot be opened or written
    """
    serializer = _serializer(config, correlation_id, pretty)
    if config is not None:
        correlation_id = correlation_id or config.correlation_id
    path_obj = Path(file_path)
    logger = get_logger(__name__, correlation_id, "write_file").bind(file_path=str(path_obj))
    logger.info("Starting file write operation")

    try:
        with path_obj.open(
            "w", encoding=serializer.config.encoding, errors="xmlcharrefreplace"
        ) as file:
            serializer.write(node, file)
    except OSError as e:
        logger.error("File write operation failed")
        raise WriteFailureError(f"Cannot write {path_obj}: {e}") from e
