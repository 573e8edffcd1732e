"""Parser session: the facade between the tokenizer and the tree builder.

A ParserSession owns one tokenizer, one qualified-name resolver, one entity
resolver and one tree builder. Tokenizer events are resolved and folded into
the builder synchronously, inside the caller's feed() call. The session
moves through IDLE -> FEEDING -> (ERROR | FINISHED); CLOSED marks a session
released without producing a tree. Tokenizer resources are released exactly
once, on whichever of those terminal states is reached first.
"""

import re
import time
from enum import Enum, auto
from typing import Optional
from xml.parsers import expat

from expat_etree.parsing.entities import EntityResolver, entity_name
from expat_etree.parsing.names import QNameResolver
from expat_etree.parsing.tokenizer import (
    AttributePairs,
    Chunk,
    ExpatTokenizer,
    Tokenizer,
    TokenSink,
)
from expat_etree.shared import (
    EmptyDocumentError,
    ParseError,
    ParserConfig,
    ParserStateError,
    SessionMetrics,
    TagMismatchError,
    TokenizerError,
    UnclosedElementsError,
    UndefinedEntityError,
    get_logger,
    new_correlation_id,
)
from expat_etree.tree import Element, TreeBuilder

# Tokenizer codes that describe a structural condition
XML_ERROR_NO_ELEMENTS = expat.errors.codes[expat.errors.XML_ERROR_NO_ELEMENTS]
XML_ERROR_TAG_MISMATCH = expat.errors.codes[expat.errors.XML_ERROR_TAG_MISMATCH]
XML_ERROR_UNDEFINED_ENTITY = expat.errors.codes[
    expat.errors.XML_ERROR_UNDEFINED_ENTITY
]

_END_TAG_NAME = re.compile(rb"^(?:</)?\s*([^\s>/]+)")
_ENTITY_REF_NAME = re.compile(rb"^&([^;\s&<]+);")


class ParserState(Enum):
    """Lifecycle states of a parser session."""

    IDLE = auto()       # Created, nothing fed yet
    FEEDING = auto()    # At least one chunk accepted
    ERROR = auto()      # Failed; the captured error is re-raised on use
    FINISHED = auto()   # Final chunk accepted, root available
    CLOSED = auto()     # Released without finishing


class ParserSession(TokenSink):
    """Tokenizer-backed parse session producing an element tree.

    Sessions are single use and not thread-safe. They are context managers;
    leaving the block releases the tokenizer whether or not a tree was
    produced.

    Examples:
        Whole document:
        >>> with ParserSession() as session:
        ...     root = session.parse_whole("<a>x<b/>y</a>")
        >>> root.text, root[0].tail
        ('x', 'y')

        Chunked input:
        >>> session = ParserSession()
        >>> session.feed("<a>he")
        >>> session.feed("llo</a>", final=True).text
        'hello'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        target: Optional[TreeBuilder] = None,
        tokenizer: Optional[Tokenizer] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser session.

        Args:
            config: Session configuration; defaults to ParserConfig()
            target: Tree builder receiving the events; a fresh one is
                created from config.element_factory when omitted
            tokenizer: Tokenizer to drive; an ExpatTokenizer configured from
                config is created when omitted
            correlation_id: Correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = (
            correlation_id or self.config.correlation_id or new_correlation_id()
        )
        self.logger = get_logger(__name__, self.correlation_id, "parser_session")
        self.metrics = SessionMetrics()

        self.target = target or TreeBuilder(
            self.config.element_factory, self.correlation_id
        )
        self._names = QNameResolver(self.config.namespace_separator)
        self._entities = EntityResolver(self.config.entities)

        if tokenizer is None:
            tokenizer = ExpatTokenizer(
                encoding=self.config.encoding,
                namespace_separator=(
                    self.config.namespace_separator
                    if self.config.namespace_aware else None
                ),
                buffer_text=self.config.buffer_text,
                use_foreign_dtd=self.config.use_foreign_dtd,
            )
        self._tokenizer: Optional[Tokenizer] = tokenizer
        self._tokenizer.bind(self)

        self._state = ParserState.IDLE
        self._error: Optional[ParseError] = None
        self._root: Optional[Element] = None

        self.logger.debug(
            "Parser session created",
            extra={
                "namespace_aware": self.config.namespace_aware,
                "entity_count": len(self._entities),
            }
        )

    @property
    def state(self) -> ParserState:
        """Current lifecycle state."""
        return self._state

    @property
    def error(self) -> Optional[ParseError]:
        """Error that moved the session to ERROR, if any."""
        return self._error

    @property
    def root(self) -> Optional[Element]:
        """Root element once the session is FINISHED."""
        return self._root

    def __enter__(self) -> "ParserSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def feed(self, data: Chunk, final: bool = False) -> Optional[Element]:
        """Feed a chunk of markup.

        Args:
            data: Markup as str or bytes
            final: True when this is the last chunk

        Returns:
            The root element when final is True, otherwise None

        Raises:
            ParseError: On malformed markup, structural errors or undefined
                entities; the same instance is raised again on any later use
            ParserStateError: If the session was closed or already finished
        """
        self._check_feedable()
        tokenizer = self._tokenizer
        self._state = ParserState.FEEDING
        self.metrics.chunks_fed += 1
        self.metrics.bytes_fed += (
            len(data.encode("utf-8")) if isinstance(data, str) else len(data)
        )

        start_time = time.time()
        try:
            status = tokenizer.feed(data, final)
            if status:
                raise self._tokenizer_error(status, final)
            if not final:
                return None
            root = self.target.finish()
        except ParseError as e:
            self._fail(e)
            raise
        except Exception:
            # Failures outside the error taxonomy abandon the session
            self.close()
            raise
        finally:
            self.metrics.processing_time_ms += (time.time() - start_time) * 1000
            self.metrics.name_cache_hits = self._names.hits
            self.metrics.name_cache_misses = self._names.misses

        self._root = root
        self._state = ParserState.FINISHED
        self._release()
        self.logger.info(
            "Parse session finished",
            extra={
                "root_tag": root.tag,
                "bytes_fed": self.metrics.bytes_fed,
                "events": self.metrics.total_events,
                "processing_time_ms": self.metrics.processing_time_ms,
            }
        )
        return root

    def finish(self) -> Element:
        """Signal end of input and return the root element."""
        return self._complete(b"")

    def parse_whole(self, data: Chunk) -> Element:
        """Parse a complete document in one call and return its root."""
        return self._complete(data)

    def close(self) -> None:
        """Release tokenizer resources without finishing the tree.

        Closing an already finished, failed or closed session does nothing.
        """
        if self._state in (ParserState.IDLE, ParserState.FEEDING):
            self._state = ParserState.CLOSED
            self._release()
            self.logger.debug("Parser session closed before finishing")

    # TokenSink implementation

    def start(self, name: str, attributes: AttributePairs) -> None:
        self.metrics.start_events += 1
        resolve = self._names.resolve
        attrib = {resolve(key): value for key, value in attributes}
        self.target.open(resolve(name), attrib)

    def end(self, name: str) -> None:
        self.metrics.end_events += 1
        self.target.close(self._names.resolve(name))

    def data(self, text: str) -> None:
        self.metrics.data_events += 1
        self.target.characters(text)

    def default(self, text: str) -> None:
        self.metrics.default_events += 1
        name = entity_name(text)
        if name is None:
            # Comments, declarations and whitespace outside the root
            return
        self.target.characters(self.entity(name))

    def entity(self, name: str) -> str:
        value = self._entities.resolve(name)
        if value is None:
            line, column = self._tokenizer.current_position()
            raise UndefinedEntityError(
                name, code=XML_ERROR_UNDEFINED_ENTITY, line=line, column=column
            )
        self.metrics.entity_substitutions += 1
        return value

    # Internals

    def _check_feedable(self) -> None:
        if self._error is not None:
            raise self._error
        if self._state is ParserState.FINISHED:
            raise ParserStateError("parser session already finished")
        if self._state is ParserState.CLOSED:
            raise ParserStateError("parser session already closed")

    def _complete(self, data: Chunk) -> Element:
        root = self.feed(data, final=True)
        if root is None:
            raise ParserStateError("parser session produced no root element")
        return root

    def _tokenizer_error(self, code: int, final: bool) -> ParseError:
        """Build the error for a non-zero tokenizer status."""
        tokenizer = self._tokenizer
        description = tokenizer.error_description(code)
        line, column = tokenizer.error_position()

        if code == XML_ERROR_TAG_MISMATCH:
            # Raw name as written; prefixes are not resolved here
            match = _END_TAG_NAME.match(tokenizer.error_context())
            encountered = (
                match.group(1).decode("utf-8", "replace") if match else None
            )
            current = self.target.current
            return TagMismatchError(
                current.tag if current is not None else None,
                encountered,
                code=code, line=line, column=column,
            )
        if code == XML_ERROR_UNDEFINED_ENTITY:
            match = _ENTITY_REF_NAME.match(tokenizer.error_context())
            entity = match.group(1).decode("utf-8", "replace") if match else None
            return UndefinedEntityError(entity, code=code, line=line, column=column)
        if code == XML_ERROR_NO_ELEMENTS and final:
            if self.target.depth:
                return UnclosedElementsError(
                    self.target.open_tags, code=code, line=line, column=column
                )
            if not self.target.started:
                return EmptyDocumentError(code=code, line=line, column=column)
        return TokenizerError(description, code=code, line=line, column=column)

    def _fail(self, error: ParseError) -> None:
        self._error = error
        self._state = ParserState.ERROR
        self._release()
        self.logger.warning(
            "Parse session failed",
            extra={
                "error_type": type(error).__name__,
                "error_code": error.code,
                "line": error.line,
                "column": error.column,
            }
        )

    def _release(self) -> None:
        tokenizer, self._tokenizer = self._tokenizer, None
        if tokenizer is not None:
            tokenizer.release()
