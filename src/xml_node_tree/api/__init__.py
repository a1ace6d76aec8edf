"""Public API for parsing, serializing and converting node trees."""

from .adapters import (
    AdapterMetadata,
    BeautifulSoupAdapter,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
)
from .parser import parse, parse_bytes, parse_file, parse_string
from .writer import serialize, serialize_bytes, serialize_to, write_file

__all__ = [
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_string",
    "serialize",
    "serialize_bytes",
    "serialize_to",
    "write_file",
    "AdapterMetadata",
    "BeautifulSoupAdapter",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "get_adapter",
    "list_available_adapters",
]
