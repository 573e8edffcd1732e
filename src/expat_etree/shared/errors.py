"""Error taxonomy for expat-backed tree building.

Every failure of a parse session surfaces as a subclass of ParseError. The
structural errors (tag mismatch, unclosed elements, empty document) may be
raised by the tree builder on its own, in which case no tokenizer code or
position is attached, or by the parser session when the tokenizer reports
the same condition, in which case code, line and column are filled in.
"""

from typing import Optional, Sequence, Tuple


class ParseError(Exception):
    """Structured parse failure with optional tokenizer code and position.

    Attributes are read-only; a ParseError never changes after it has been
    raised, so a failed session can re-raise the very same instance.
    """

    def __init__(
        self,
        description: str,
        code: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(description)
        self._description = description
        self._code = code
        self._line = line
        self._column = column

    @property
    def description(self) -> str:
        """Human readable description of the failure."""
        return self._description

    @property
    def code(self) -> Optional[int]:
        """Tokenizer error code, or None for purely structural failures."""
        return self._code

    @property
    def line(self) -> Optional[int]:
        """1-based line of the failure, when known."""
        return self._line

    @property
    def column(self) -> Optional[int]:
        """1-based column of the failure, when known."""
        return self._column

    @property
    def position(self) -> Optional[Tuple[int, int]]:
        """(line, column) pair, or None when no position was captured."""
        if self._line is None or self._column is None:
            return None
        return (self._line, self._column)

    def __str__(self) -> str:
        if self.position is None:
            return self._description
        if self._code is None:
            return (
                f"{self._description} at line {self._line} column {self._column}"
            )
        return (
            f"Error [{self._code}] at line {self._line} column {self._column}: "
            f"{self._description}"
        )


class TokenizerError(ParseError):
    """Malformed markup reported by the tokenizer."""


class TagMismatchError(ParseError):
    """End tag does not match the innermost open element."""

    def __init__(
        self,
        expected: Optional[str],
        encountered: Optional[str],
        code: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        if expected is None:
            description = f"end tag {encountered} without open element"
        else:
            description = (
                f"end tag mismatch (expected {expected}, got {encountered})"
            )
        super().__init__(description, code, line, column)
        self._expected = expected
        self._encountered = encountered

    @property
    def expected(self) -> Optional[str]:
        """Tag of the element that was open when the end tag arrived."""
        return self._expected

    @property
    def encountered(self) -> Optional[str]:
        """Tag named by the offending end tag, if it could be determined.

        When the tokenizer detects the mismatch this is the name as written
        in the end tag, prefix included, rather than its {uri}local form.
        """
        return self._encountered


class UnclosedElementsError(ParseError):
    """Input ended while elements were still open."""

    def __init__(
        self,
        open_tags: Sequence[str],
        code: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        tags = tuple(open_tags)
        super().__init__(
            f"missing end tags for {', '.join(tags)}", code, line, column
        )
        self._open_tags = tags

    @property
    def open_tags(self) -> Tuple[str, ...]:
        """Tags still open at the end of input, outermost first."""
        return self._open_tags


class EmptyDocumentError(ParseError):
    """Input ended without a single element."""

    def __init__(
        self,
        code: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__("missing toplevel element", code, line, column)


class UndefinedEntityError(ParseError):
    """Entity reference with no replacement text in the entity table."""

    def __init__(
        self,
        entity: Optional[str],
        code: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        if entity is None:
            description = "undefined entity"
        else:
            description = f"undefined entity &{entity};"
        super().__init__(description, code, line, column)
        self._entity = entity

    @property
    def entity(self) -> Optional[str]:
        """Name of the unresolved entity, without the & and ; markers."""
        return self._entity


class ParserStateError(RuntimeError):
    """Operation attempted on a released, finished or failed component."""
