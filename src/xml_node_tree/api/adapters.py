"""Integration adapters for popular XML libraries.

Each adapter converts a :class:`Node` tree to the element type of another
library and back. Conversions from foreign trees follow the node model: only
the last text segment of an element is kept, and comments and processing
instructions are dropped.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from xml_node_tree.shared import get_logger
from xml_node_tree.tree import Node

from .parser import parse_string
from .writer import serialize


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


class IntegrationAdapter(ABC):
    """Base class for bidirectional conversion adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, self.metadata.name)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the target library can be imported."""

    @abstractmethod
    def to_target(self, node: Node) -> Any:
        """Convert a node tree to the target library's representation."""

    @abstractmethod
    def from_target(self, target_data: Any) -> Node:
        """Convert the target library's representation to a node tree."""


class _EtreeAdapter(IntegrationAdapter):
    """Shared conversion for libraries implementing the ElementTree API."""

    @abstractmethod
    def _etree(self) -> Any:
        """Return the module implementing the ElementTree API."""

    def to_target(self, node: Node) -> Any:
        etree = self._etree()
        element = self._to_element(node, etree)
        self.logger.debug("Converted node tree", extra={"root_tag": node.tag})
        return element

    def from_target(self, target_data: Any) -> Node:
        if hasattr(target_data, "getroot"):
            target_data = target_data.getroot()
        node = self._from_element(target_data)
        self.logger.debug("Converted element tree", extra={"root_tag": node.tag})
        return node

    def _to_element(self, node: Node, etree: Any) -> Any:
        element = etree.Element(node.tag, dict(node.attributes))
        if node.inner_text:
            element.text = node.inner_text
        for child in node.children:
            element.append(self._to_element(child, etree))
        return element

    def _from_element(self, element: Any) -> Node:
        node = Node(str(element.tag), attributes=dict(element.attrib))
        segments: List[Optional[str]] = [element.text]
        for child in element:
            # Comments and processing instructions have non-string tags
            if isinstance(child.tag, str):
                node.append_child(self._from_element(child))
            segments.append(child.tail)
        for segment in reversed(segments):
            if segment is not None:
                node.inner_text = segment.strip()
                break
        return node


class LxmlAdapter(_EtreeAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Bidirectional conversion between Node and lxml.etree",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
        except ImportError:
            return False
        return True

    def _etree(self) -> Any:
        import lxml.etree
        return lxml.etree


class ElementTreeAdapter(_EtreeAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between Node and ElementTree",
        )

    def is_available(self) -> bool:
        return True

    def _etree(self) -> Any:
        import xml.etree.ElementTree
        return xml.etree.ElementTree


class BeautifulSoupAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with BeautifulSoup.

    Conversion goes through serialized markup and the ``xml`` feature of
    BeautifulSoup, which requires lxml.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            target_library="beautifulsoup4",
            description="Bidirectional conversion between Node and BeautifulSoup",
        )

    def is_available(self) -> bool:
        try:
            from bs4 import BeautifulSoup  # noqa: F401
        except ImportError:
            return False
        return True

    def to_target(self, node: Node) -> Any:
        from bs4 import BeautifulSoup

        return BeautifulSoup(serialize(node), "xml")

    def from_target(self, target_data: Any) -> Node:
        return parse_string(str(target_data), correlation_id=self.correlation_id)


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    "lxml": LxmlAdapter,
    "elementtree": ElementTreeAdapter,
    "beautifulsoup": BeautifulSoupAdapter,
}


def get_adapter(name: str, correlation_id: Optional[str] = None) -> IntegrationAdapter:
    """Return an adapter instance by name.

    Raises:
        KeyError: no adapter is registered under ``name``
    """
    try:
        adapter_class = _ADAPTERS[name]
    except KeyError:
        raise KeyError(
            f"Unknown adapter {name!r}; available: {sorted(_ADAPTERS)}"
        ) from None
    return adapter_class(correlation_id)


def list_available_adapters() -> List[str]:
    """Names of the adapters whose target library is importable."""
    return [name for name, cls in _ADAPTERS.items() if cls().is_available()]
