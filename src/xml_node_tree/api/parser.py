"""Parsing entry points.

Module-level functions turning markup from strings, bytes, files or
file-like objects into a :class:`Node` tree. Failures are logged and
re-raised to the caller unchanged.
"""

import time
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

from xml_node_tree.character import decode_bytes
from xml_node_tree.shared import (
    InputTooLargeError,
    MalformedInputError,
    NodeTreeConfig,
    get_logger,
)
from xml_node_tree.tree import Node, NodeTreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, bytearray, Path, BinaryIO, TextIO]

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


def _resolve(config: Optional[NodeTreeConfig], correlation_id: Optional[str]):
    config = config or NodeTreeConfig()
    return config, correlation_id or config.correlation_id


def _preview(content: str) -> str:
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + "..."
    return content


def parse(
    input_data: InputType,
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
) -> Node:
    """Parse markup from any supported input source.

    Args:
        input_data: Markup as string, bytes, :class:`~pathlib.Path` or an
            object with a ``read`` method returning str or bytes
        config: Optional configuration
        correlation_id: Optional correlation ID for call tracking

    Returns:
        Root node of the document

    Raises:
        MalformedInputError: the input is not well-formed markup
        TypeError: the input type is not supported

    Examples:
        >>> root = parse('<root><item id="1">Hello</item></root>')
        >>> root.find_child('item').get_attribute('id')
        '1'
    """
    if isinstance(input_data, str):
        return parse_string(input_data, config, correlation_id)
    if isinstance(input_data, (bytes, bytearray)):
        return parse_bytes(bytes(input_data), config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, config, correlation_id)
    if hasattr(input_data, "read"):
        content = input_data.read()
        if isinstance(content, (bytes, bytearray)):
            return parse_bytes(bytes(content), config, correlation_id)
        return parse_string(content, config, correlation_id)
    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def parse_string(
    xml_string: str,
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
) -> Node:
    """Parse markup from a string.

    Examples:
        >>> root = parse_string('<a x="1"><b>hello</b><b>world</b></a>')
        >>> root.find_child('b').inner_text
        'hello'
    """
    config, correlation_id = _resolve(config, correlation_id)
    logger = get_logger(__name__, correlation_id, "parse_string")
    start_time = time.time()

    logger.info(
        "Starting string parse operation",
        extra={"content_length": len(xml_string), "preview": _preview(xml_string)}
    )

    try:
        root = NodeTreeBuilder(config.parser, correlation_id).build(xml_string)
    except MalformedInputError:
        logger.error(
            "String parse operation failed",
            extra={"processing_time_ms": (time.time() - start_time) * MS_PER_SECOND}
        )
        raise

    logger.info(
        "String parse operation completed",
        extra={
            "root_tag": root.tag,
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        }
    )
    return root


def parse_bytes(
    data: bytes,
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
) -> Node:
    """Parse markup from bytes, detecting the encoding.

    The encoding comes from a byte order mark, then the XML declaration, then
    ``config.parser.fallback_encoding``.
    """
    config, correlation_id = _resolve(config, correlation_id)
    logger = get_logger(__name__, correlation_id, "parse_bytes")
    logger.info("Starting bytes parse operation", extra={"byte_count": len(data)})

    max_size = config.parser.max_input_size
    if max_size is not None and len(data) > max_size:
        raise InputTooLargeError(
            f"Input of {len(data)} bytes exceeds limit of {max_size}"
        )

    try:
        text = decode_bytes(data, config.parser, correlation_id)
    except MalformedInputError:
        logger.error("Bytes decoding failed", extra={"byte_count": len(data)})
        raise
    return parse_string(text, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[NodeTreeConfig] = None,
    correlation_id: Optional[str] = None,
) -> Node:
    """Parse markup from a file.

    Raises:
        OSError: the file cannot be read
        MalformedInputError: the content is not well-formed markup
    """
    config, correlation_id = _resolve(config, correlation_id)
    path_obj = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file").bind(file_path=str(path_obj))
    logger.info("Starting file parse operation")

    data = path_obj.read_bytes()
    return parse_bytes(data, config, correlation_id)
