"""Public parsing API.

Provides document-level functions (from_string, load), the ElementTree
wrapper and adapters converting trees to other XML libraries.
"""

from .adapters import (
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_adapters,
)
from .document import ElementTree, from_string, load

__all__ = [
    "ElementTree",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "from_string",
    "get_adapter",
    "list_adapters",
    "load",
]
