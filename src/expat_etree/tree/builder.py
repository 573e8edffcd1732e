"""Incremental tree building from open/characters/close calls.

The builder turns a sequence of primitive calls, in document order, into a
well-formed element structure. It performs no lookahead: whether pending
character data becomes the text of an element or the tail of one is decided
purely by the last structural call seen.
"""

from typing import Dict, List, Optional, Tuple

from expat_etree.shared import (
    ElementFactory,
    EmptyDocumentError,
    ParserStateError,
    TagMismatchError,
    UnclosedElementsError,
    get_logger,
)
from expat_etree.tree.element import Element


class TreeBuilder:
    """Generic element structure builder.

    Use this class to build an element structure from any event source, an
    XML tokenizer or a parser for some other XML-like format. A builder
    serves exactly one document; once finish() has returned the root it
    refuses further calls.

    Examples:
        >>> builder = TreeBuilder()
        >>> builder.open("a", {})
        <Element a attrib={}>
        >>> builder.characters("x")
        >>> builder.close("a").text
        'x'
        >>> builder.finish().tag
        'a'
    """

    def __init__(
        self,
        element_factory: Optional[ElementFactory] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            element_factory: Callable (tag, attributes) -> element used to
                create new elements; defaults to Element
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

        self._factory = element_factory or Element
        self._data: List[str] = []
        self._stack: List[Element] = []
        self._last: Optional[Element] = None
        self._root: Optional[Element] = None
        self._tail = False
        self._finished = False
        self._elements_created = 0

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._stack)

    @property
    def open_tags(self) -> Tuple[str, ...]:
        """Tags of the open elements, outermost first."""
        return tuple(element.tag for element in self._stack)

    @property
    def current(self) -> Optional[Element]:
        """Innermost open element, if any."""
        return self._stack[-1] if self._stack else None

    @property
    def started(self) -> bool:
        """Check if at least one element has been opened."""
        return self._root is not None

    @property
    def finished(self) -> bool:
        """Check if finish() has returned the root."""
        return self._finished

    def open(self, tag: str, attributes: Optional[Dict[str, str]] = None) -> Element:
        """Open a new element and return it.

        Args:
            tag: Element name
            attributes: Element attributes

        Returns:
            The opened element, already appended to its parent
        """
        self._check_usable()
        self._flush()
        element = self._factory(tag, attributes if attributes is not None else {})
        self._last = element
        if self._stack:
            self._stack[-1].append(element)
        elif self._root is None:
            self._root = element
        self._stack.append(element)
        self._tail = False
        self._elements_created += 1
        return element

    def characters(self, text: str) -> None:
        """Add character data to the current gap between structural calls."""
        self._check_usable()
        self._data.append(text)

    def close(self, tag: str) -> Element:
        """Close the innermost open element and return it.

        Args:
            tag: Element name given by the end tag

        Raises:
            TagMismatchError: If tag does not name the innermost open element
        """
        self._check_usable()
        self._flush()
        if not self._stack:
            raise TagMismatchError(expected=None, encountered=tag)
        element = self._stack.pop()
        self._last = element
        if element.tag != tag:
            raise TagMismatchError(expected=element.tag, encountered=tag)
        self._tail = True
        return element

    def finish(self) -> Element:
        """Check that the document is complete and return the toplevel element.

        Character data received after the last end tag is discarded.

        Raises:
            UnclosedElementsError: If elements are still open
            EmptyDocumentError: If no element was ever opened
        """
        self._check_usable()
        if self._stack:
            raise UnclosedElementsError(self.open_tags)
        if self._root is None:
            raise EmptyDocumentError()
        self._finished = True
        self.logger.debug(
            "Tree building completed",
            extra={
                "root_tag": self._root.tag,
                "element_count": self._elements_created,
            }
        )
        return self._root

    def _check_usable(self) -> None:
        if self._finished:
            raise ParserStateError("tree builder already finished")

    def _flush(self) -> None:
        if not self._data:
            return
        # Character data before the first element has nowhere to go
        if self._last is not None:
            text = "".join(self._data)
            if self._tail:
                if self._last.tail is not None:
                    raise ParserStateError("internal error (tail)")
                self._last.tail = text
            else:
                if self._last.text is not None:
                    raise ParserStateError("internal error (text)")
                self._last.text = text
        self._data = []
