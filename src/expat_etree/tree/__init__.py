"""Document tree for expat-backed parsing.

Key Components:
    Element: XML element with attributes, text, tail and children
    TreeBuilder: Incremental builder turning open/characters/close calls
        into an element tree
"""

from .builder import TreeBuilder
from .element import Element, create_element, sub_element

__all__ = [
    "Element",
    "TreeBuilder",
    "create_element",
    "sub_element",
]
