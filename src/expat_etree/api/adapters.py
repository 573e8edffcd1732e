"""Integration adapters for converting trees to and from other XML libraries.

Both supported targets, the standard library's ``xml.etree.ElementTree`` and
``lxml.etree``, share the ElementTree node API, so conversion is a straight
structural copy of tag, attributes, text, tail and children. Comments and
processing instructions of a foreign tree have no Element counterpart and are
dropped on import; their tails are kept by appending them to the preceding
text or tail.
"""

from abc import ABC, abstractmethod
from types import ModuleType
from typing import Any, Dict, List, Optional, Type

from expat_etree.shared import get_logger
from expat_etree.tree import Element


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters."""

    name: str = ""
    target_library: str = ""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, f"{self.name}_adapter")

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _module(self) -> ModuleType:
        """Return the target library's ElementTree-compatible module."""

    def to_target(self, element: Element) -> Any:
        """Convert an Element subtree into a node of the target library."""
        module = self._module()
        node = _copy_to_foreign(element, module)
        self.logger.debug(
            "Converted tree to target library",
            extra={"target_library": self.target_library, "root_tag": element.tag}
        )
        return node

    def from_target(self, node: Any) -> Element:
        """Convert a node of the target library into an Element subtree."""
        if not isinstance(getattr(node, "tag", None), str):
            raise TypeError(f"{self.target_library} element expected, got {node!r}")
        return _copy_from_foreign(node)


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for the standard library's xml.etree.ElementTree."""

    name = "etree"
    target_library = "xml.etree.ElementTree"

    def is_available(self) -> bool:
        return True

    def _module(self) -> ModuleType:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(IntegrationAdapter):
    """Adapter for lxml.etree."""

    name = "lxml"
    target_library = "lxml"

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _module(self) -> ModuleType:
        import lxml.etree
        return lxml.etree


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    ElementTreeAdapter.name: ElementTreeAdapter,
    LxmlAdapter.name: LxmlAdapter,
}


def get_adapter(
    name: str, correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter instance by name.

    Returns:
        The adapter, or None if it is unknown or its library is missing
    """
    adapter_class = _ADAPTERS.get(name)
    if adapter_class is None:
        return None
    adapter = adapter_class(correlation_id)
    return adapter if adapter.is_available() else None


def list_adapters() -> List[str]:
    """Names of the adapters whose target library is installed."""
    return [name for name in _ADAPTERS if get_adapter(name) is not None]


def _copy_to_foreign(element: Element, module: ModuleType) -> Any:
    node = module.Element(element.tag, dict(element.attributes))
    node.text = element.text
    node.tail = element.tail
    for child in element.children:
        node.append(_copy_to_foreign(child, module))
    return node


def _copy_from_foreign(node: Any) -> Element:
    element = Element(node.tag, dict(node.attrib), node.text, node.tail)
    for child in node:
        if isinstance(child.tag, str):
            element.append(_copy_from_foreign(child))
        elif child.tail:
            # Comment or processing instruction: keep only its tail
            if element.children:
                last = element.children[-1]
                last.tail = (last.tail or "") + child.tail
            else:
                element.text = (element.text or "") + child.tail
    return element
