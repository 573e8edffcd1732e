"""Element node of the document tree."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(eq=False)
class Element:
    """A single XML element.

    An element's length is its number of children. To check whether an
    element is truly empty, check both its length and its text attribute.
    Text and tail are None when no character data was seen in that position;
    None and the empty string are different states.

    Example form::

        <tag attributes>text<child/>...</tag>tail
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    tail: Optional[str] = None
    children: List["Element"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")
        if self.attributes is None:
            self.attributes = {}

    def __repr__(self) -> str:
        return f"<Element {self.tag} attrib={self.attributes!r}>"

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator["Element"]:
        return iter(self.children)

    def __getitem__(self, index: int) -> "Element":
        return self.children[index]

    def append(self, child: "Element") -> None:
        """Add a child after the last existing child."""
        self.children.append(child)

    def extend(self, children: Iterable["Element"]) -> None:
        """Append children from a sequence, in order."""
        self.children.extend(children)

    def insert(self, index: int, child: "Element") -> None:
        """Insert child at position index."""
        if not (0 <= index <= len(self.children)):
            raise IndexError("Child index out of range")
        self.children.insert(index, child)

    def remove(self, child: "Element") -> None:
        """Remove the first child that is the same instance as child.

        Children are compared by identity, not by tag or content. Removing
        an element that is not a child does nothing.
        """
        for index, existing in enumerate(self.children):
            if existing is child:
                del self.children[index]
                return

    def clear(self) -> None:
        """Remove all children and attributes, reset text and tail to None."""
        self.attributes = {}
        self.children = []
        self.text = None
        self.tail = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value, or default when the attribute is missing."""
        return self.attributes.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Set attribute value."""
        self.attributes[key] = value

    def keys(self) -> List[str]:
        """Attribute names, in no particular order."""
        return list(self.attributes)

    def items(self) -> List[Tuple[str, str]]:
        """Attribute (name, value) pairs, in no particular order."""
        return list(self.attributes.items())


def create_element(tag: str, attributes: Optional[Dict[str, str]] = None) -> Element:
    """Create a detached element."""
    return Element(tag, dict(attributes or {}))


def sub_element(
    parent: Element, tag: str, attributes: Optional[Dict[str, str]] = None
) -> Element:
    """Create an element and append it to parent."""
    element = create_element(tag, attributes)
    parent.append(element)
    return element
