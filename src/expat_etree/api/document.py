"""Document-level API: parse strings and files into element trees.

Every call builds a fresh ParserSession, so qualified-name caches and entity
tables never leak from one document into another. The tokenizer is released
before returning, whether parsing succeeded or not.
"""

from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

from expat_etree.parsing import ParserSession
from expat_etree.shared import ParserConfig, get_logger
from expat_etree.tree import Element

SourceType = Union[str, Path, BinaryIO, TextIO]

# Max length for content preview in logs
PREVIEW_LENGTH = 100


def from_string(
    text: Union[str, bytes],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse an XML document from a string.

    Args:
        text: Complete document as str or bytes
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root element

    Raises:
        ParseError: If the document is malformed

    Examples:
        >>> root = from_string('<root><item id="1">value</item></root>')
        >>> root[0].get("id"), root[0].text
        ('1', 'value')
    """
    with ParserSession(config, correlation_id=correlation_id) as session:
        session.logger.info(
            "Starting string parse operation",
            extra={
                "content_length": len(text),
                "preview": _preview(text),
            }
        )
        return session.parse_whole(text)


def load(
    source: SourceType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse an XML document from a file path or file-like object.

    The source is read completely before parsing starts.

    Args:
        source: Path (str or Path) or an open binary or text file
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root element

    Raises:
        OSError: If the file cannot be read
        ParseError: If the document is malformed
    """
    logger = get_logger(__name__, correlation_id, "load")
    if hasattr(source, "read"):
        content = source.read()
        logger.debug(
            "File-like object read",
            extra={
                "content_length": len(content),
                "content_type": type(content).__name__,
            }
        )
    else:
        path_obj = Path(source)
        logger.debug("Reading XML file", extra={"file_path": str(path_obj)})
        content = path_obj.read_bytes()
    return from_string(content, config, correlation_id)


def _preview(text: Union[str, bytes]) -> str:
    if isinstance(text, bytes):
        text = text[:PREVIEW_LENGTH + 1].decode("utf-8", "replace")
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


class ElementTree:
    """Wrapper around a document's root element.

    Args:
        element: Optional root element
        source: Optional path or file whose content initialises the tree
        config: Parser configuration used when source is given
    """

    def __init__(
        self,
        element: Optional[Element] = None,
        source: Optional[SourceType] = None,
        config: Optional[ParserConfig] = None
    ) -> None:
        self._root = element
        if source is not None:
            self.parse(source, config)

    @property
    def root(self) -> Optional[Element]:
        """Root element of this tree."""
        return self._root

    def getroot(self) -> Optional[Element]:
        """Return the root element of this tree."""
        return self._root

    def parse(
        self, source: SourceType, config: Optional[ParserConfig] = None
    ) -> Element:
        """Load an external XML document into this tree.

        Returns:
            The root element of the loaded document

        Raises:
            ParseError: If the document is malformed
        """
        self._root = load(source, config)
        return self._root
