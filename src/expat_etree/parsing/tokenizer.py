"""Binding to the streaming tokenizer.

The tokenizer scans raw markup and reports, strictly in document order, four
kinds of events to a TokenSink: start tags, end tags, character data and
default data (markup it does not classify, notably entity references it
could not expand). On malformed input feed() returns a non-zero status; the
error description and position can then be queried. Entity references
inside attribute values cannot travel as default data, so the tokenizer asks
the sink for their replacement text while reporting the start tag.

ExpatTokenizer implements the contract on top of ``xml.parsers.expat``.
Handlers are bound to the owning sink object, so any number of tokenizers
can be alive and fed at the same time.
"""

import codecs
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Union
from xml.parsers import expat

from expat_etree.shared import ParserStateError, UndefinedEntityError

Chunk = Union[str, bytes]
AttributePairs = List[Tuple[str, str]]

# Bytes of context returned around an error position
ERROR_CONTEXT_LENGTH = 256

# Entities expat always expands itself
PREDEFINED_ENTITY_VALUES = {
    "amp": "&", "lt": "<", "gt": ">", "apos": "'", "quot": "\"",
}

_START_TAG = re.compile(
    r"""<[^\s/>]+(?:\s+[^\s=/>]+\s*=\s*(?:"[^"]*"|'[^']*'))*\s*/?>"""
)
_ATTRIBUTE = re.compile(r"""([^\s=/>]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_REFERENCE = re.compile(r"&(#?)([^;&\s]+);")
_ATTRIBUTE_WHITESPACE = str.maketrans("\t\n", "  ")


class TokenSink(ABC):
    """Receiver of tokenizer events."""

    @abstractmethod
    def start(self, name: str, attributes: AttributePairs) -> None:
        """Start tag with its attributes in document order."""

    @abstractmethod
    def end(self, name: str) -> None:
        """End tag."""

    @abstractmethod
    def data(self, text: str) -> None:
        """Character data; one run may arrive in several fragments."""

    @abstractmethod
    def default(self, text: str) -> None:
        """Unclassified markup, such as an unexpanded entity reference."""

    def entity(self, name: str) -> str:
        """Replacement text for an entity referenced inside an attribute value.

        Called while a start tag is being reported, for references the engine
        could not expand itself.

        Raises:
            UndefinedEntityError: If the sink has no replacement for name
        """
        raise UndefinedEntityError(name)


class Tokenizer(ABC):
    """Streaming tokenizer session feeding a single TokenSink."""

    @abstractmethod
    def bind(self, sink: TokenSink) -> None:
        """Route all events of this tokenizer to sink."""

    @abstractmethod
    def feed(self, data: Chunk, final: bool = False) -> int:
        """Scan a chunk of input; returns 0 on success, else an error code."""

    @abstractmethod
    def error_description(self, code: int) -> str:
        """Describe an error code returned by feed()."""

    @abstractmethod
    def error_position(self) -> Tuple[int, int]:
        """1-based (line, column) of the last error."""

    @abstractmethod
    def current_position(self) -> Tuple[int, int]:
        """1-based (line, column) of the event being reported."""

    @abstractmethod
    def error_context(self) -> bytes:
        """Raw input starting at the position of the last error, if kept."""

    @abstractmethod
    def release(self) -> None:
        """Free the underlying engine; later calls raise ParserStateError."""

    @property
    @abstractmethod
    def released(self) -> bool:
        """Check if release() has been called."""


class ExpatTokenizer(Tokenizer):
    """Tokenizer backed by the expat engine.

    Attributes are delivered as ordered (name, value) pairs. With
    use_foreign_dtd the engine assumes an external DTD, which makes entity
    references it cannot resolve arrive as default data instead of aborting
    the scan; references to entities declared in the document's own DTD are
    still expanded by expat.

    In that mode expat drops unresolved references from attribute values
    without reporting them. Such values are rebuilt from the raw start tag,
    with replacement text supplied by the sink's entity() method.
    """

    def __init__(
        self,
        encoding: Optional[str] = None,
        namespace_separator: Optional[str] = "}",
        buffer_text: bool = False,
        use_foreign_dtd: bool = True
    ) -> None:
        """Initialize expat tokenizer.

        Args:
            encoding: Encoding overriding the document's XML declaration
            namespace_separator: Separator between namespace URI and local
                name; None disables namespace processing
            buffer_text: Let expat merge adjacent character data
            use_foreign_dtd: Assume an external DTD for every document
        """
        self._parser: Optional[expat.XMLParserType] = expat.ParserCreate(
            encoding, namespace_separator
        )
        self._parser.ordered_attributes = True
        self._parser.buffer_text = buffer_text
        if use_foreign_dtd:
            self._parser.UseForeignDTD(True)
        self._sink: Optional[TokenSink] = None

        self._encoding = encoding
        self._namespaces = namespace_separator is not None
        self._foreign_dtd = use_foreign_dtd
        self._text_input = False
        self._head = b""
        self._declared_encoding: Optional[str] = None
        self._declared_entities: Dict[str, Optional[str]] = {}

        # Input since the last reported event, for error context
        self._window = bytearray()
        self._window_start = 0
        self._last_event_index = 0

    @property
    def engine_version(self) -> str:
        """Version string of the expat library in use."""
        return expat.EXPAT_VERSION

    @property
    def released(self) -> bool:
        return self._parser is None

    def bind(self, sink: TokenSink) -> None:
        parser = self._require_parser()
        self._sink = sink
        parser.StartElementHandler = self._on_start
        parser.EndElementHandler = self._on_end
        parser.CharacterDataHandler = self._on_data
        parser.DefaultHandlerExpand = self._on_default
        parser.XmlDeclHandler = self._on_xml_decl
        parser.EntityDeclHandler = self._on_entity_decl

    def feed(self, data: Chunk, final: bool = False) -> int:
        parser = self._require_parser()
        if self._sink is None:
            raise ParserStateError("tokenizer has no event sink bound")
        if not self._head:
            self._text_input = isinstance(data, str)
        raw = data.encode("utf-8") if isinstance(data, str) else data
        if len(self._head) < 4:
            self._head += raw[:4 - len(self._head)]
        self._window += raw
        try:
            parser.Parse(data, final)
        except expat.ExpatError as e:
            return e.code
        self._trim_window()
        return 0

    def error_description(self, code: int) -> str:
        return expat.ErrorString(code)

    def error_position(self) -> Tuple[int, int]:
        parser = self._require_parser()
        # expat columns are 0-based
        return (parser.ErrorLineNumber, parser.ErrorColumnNumber + 1)

    def current_position(self) -> Tuple[int, int]:
        parser = self._require_parser()
        return (parser.CurrentLineNumber, parser.CurrentColumnNumber + 1)

    def error_context(self) -> bytes:
        parser = self._require_parser()
        offset = parser.ErrorByteIndex - self._window_start
        if offset < 0 or offset >= len(self._window):
            return b""
        return bytes(self._window[offset:offset + ERROR_CONTEXT_LENGTH])

    def release(self) -> None:
        if self._parser is None:
            raise ParserStateError("tokenizer already released")
        self._parser = None
        self._sink = None
        self._window = bytearray()

    def _require_parser(self) -> expat.XMLParserType:
        if self._parser is None:
            raise ParserStateError("tokenizer already released")
        return self._parser

    def _trim_window(self) -> None:
        cut = self._last_event_index - self._window_start
        if cut > 0:
            del self._window[:cut]
            self._window_start += cut

    def _mark(self) -> None:
        index = self._parser.CurrentByteIndex
        if index >= 0:
            self._last_event_index = index

    def _codec(self) -> str:
        """Python codec of the byte stream held in the window."""
        if self._text_input:
            return "utf-8"
        if self._head.startswith(codecs.BOM_UTF16_LE):
            return "utf-16-le"
        if self._head.startswith(codecs.BOM_UTF16_BE):
            return "utf-16-be"
        return self._encoding or self._declared_encoding or "utf-8"

    def _raw_start_tag(self) -> Optional[str]:
        """Decode the start tag being reported from the window."""
        offset = self._parser.CurrentByteIndex - self._window_start
        if offset < 0:
            return None
        codec = self._codec()
        open_bracket = "<".encode(codec)
        close_bracket = ">".encode(codec)
        width = len(close_bracket)
        # Events from expanded internal entities point at the reference
        if self._window[offset:offset + width] != open_bracket:
            return None
        position = offset + width
        while True:
            end = self._window.find(close_bracket, position)
            if end < 0:
                return None
            position = end + 1
            if (end - offset) % width:
                continue
            text = bytes(self._window[offset:end + width]).decode(codec, "replace")
            # A '>' inside a quoted value does not end the tag
            if _START_TAG.fullmatch(text):
                return text

    def _raw_attribute_values(self) -> Optional[List[str]]:
        """Raw values of the attributes expat reports, in document order."""
        text = self._raw_start_tag()
        if text is None:
            return None
        values = []
        for name, double_quoted, single_quoted in _ATTRIBUTE.findall(text[1:]):
            if self._namespaces and (name == "xmlns" or name.startswith("xmlns:")):
                continue
            values.append(double_quoted or single_quoted)
        return values

    def _has_skipped_reference(self, raw_value: str) -> bool:
        for match in _REFERENCE.finditer(raw_value):
            char_reference, name = match.groups()
            if (
                not char_reference
                and name not in PREDEFINED_ENTITY_VALUES
                and name not in self._declared_entities
            ):
                return True
        return False

    def _expand_skipped_references(self, pairs: AttributePairs) -> None:
        raw_values = self._raw_attribute_values()
        # Attributes defaulted by a DTD follow the specified ones
        if raw_values is None or len(raw_values) > len(pairs):
            return
        for index, raw_value in enumerate(raw_values):
            if self._has_skipped_reference(raw_value):
                name = pairs[index][0]
                pairs[index] = (name, self._expand_attribute_value(raw_value))

    def _expand_attribute_value(self, raw_value: str) -> str:
        text = raw_value.replace("\r\n", "\n").replace("\r", "\n")
        text = text.translate(_ATTRIBUTE_WHITESPACE)
        return _REFERENCE.sub(self._replace_reference, text)

    def _replace_reference(self, match: "re.Match[str]") -> str:
        char_reference, name = match.groups()
        if char_reference:
            if name[:1] in ("x", "X"):
                return chr(int(name[1:], 16))
            return chr(int(name))
        if name in PREDEFINED_ENTITY_VALUES:
            return PREDEFINED_ENTITY_VALUES[name]
        declared = self._declared_entities.get(name)
        if declared is not None:
            return self._expand_attribute_value(declared)
        return self._sink.entity(name)

    def _on_start(self, name: str, attributes: List[str]) -> None:
        self._mark()
        pairs = list(zip(attributes[0::2], attributes[1::2]))
        if self._foreign_dtd and pairs:
            self._expand_skipped_references(pairs)
        self._sink.start(name, pairs)

    def _on_end(self, name: str) -> None:
        self._mark()
        self._sink.end(name)

    def _on_data(self, text: str) -> None:
        self._mark()
        self._sink.data(text)

    def _on_default(self, text: str) -> None:
        self._mark()
        self._sink.default(text)

    def _on_xml_decl(
        self, version: str, encoding: Optional[str], standalone: int
    ) -> None:
        self._declared_encoding = encoding

    def _on_entity_decl(
        self,
        name: str,
        is_parameter_entity: bool,
        value: Optional[str],
        base: Optional[str],
        system_id: Optional[str],
        public_id: Optional[str],
        notation_name: Optional[str]
    ) -> None:
        if not is_parameter_entity:
            self._declared_entities[name] = value
