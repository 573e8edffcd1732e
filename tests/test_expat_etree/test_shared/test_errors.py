"""Tests for the parse error taxonomy."""

import pytest

from expat_etree.shared import (
    EmptyDocumentError,
    ParseError,
    ParserStateError,
    TagMismatchError,
    TokenizerError,
    UnclosedElementsError,
    UndefinedEntityError,
)


class TestParseError:
    """Test the base error."""

    def test_message_with_code_and_position(self) -> None:
        """Test the full message format."""
        error = ParseError("mismatched tag", code=7, line=1, column=9)

        assert str(error) == "Error [7] at line 1 column 9: mismatched tag"
        assert error.position == (1, 9)

    def test_message_with_position_only(self) -> None:
        """Test structural errors with a position."""
        error = ParseError("broken", line=2, column=3)

        assert str(error) == "broken at line 2 column 3"

    def test_message_without_position(self) -> None:
        """Test bare description."""
        error = ParseError("broken", code=4)

        assert str(error) == "broken"
        assert error.position is None
        assert error.code == 4

    def test_attributes_are_read_only(self) -> None:
        """Test errors cannot be changed after raising."""
        error = ParseError("broken")

        with pytest.raises(AttributeError):
            error.code = 1  # type: ignore[misc]

    @pytest.mark.parametrize(
        "error_class",
        [TokenizerError, TagMismatchError, UnclosedElementsError,
         EmptyDocumentError, UndefinedEntityError],
    )
    def test_hierarchy(self, error_class) -> None:
        """Test every parse failure is a ParseError."""
        assert issubclass(error_class, ParseError)

    def test_state_error_is_not_parse_error(self) -> None:
        """Test misuse is reported separately."""
        assert issubclass(ParserStateError, RuntimeError)
        assert not issubclass(ParserStateError, ParseError)


class TestStructuralErrors:
    """Test descriptions and extra attributes."""

    def test_tag_mismatch(self) -> None:
        """Test both tags are reported."""
        error = TagMismatchError("b", "a")

        assert error.description == "end tag mismatch (expected b, got a)"
        assert error.expected == "b"
        assert error.encountered == "a"

    def test_tag_mismatch_without_open_element(self) -> None:
        """Test an end tag with nothing open."""
        error = TagMismatchError(None, "a")

        assert error.description == "end tag a without open element"

    def test_unclosed_elements(self) -> None:
        """Test open tags are listed outermost first."""
        error = UnclosedElementsError(["a", "b"], code=3, line=1, column=7)

        assert error.open_tags == ("a", "b")
        assert error.description == "missing end tags for a, b"
        assert str(error).startswith("Error [3] at line 1 column 7")

    def test_empty_document(self) -> None:
        """Test the fixed description."""
        assert EmptyDocumentError().description == "missing toplevel element"

    def test_undefined_entity(self) -> None:
        """Test the entity name is kept."""
        error = UndefinedEntityError("copy", code=11, line=1, column=4)

        assert error.entity == "copy"
        assert error.description == "undefined entity &copy;"

    def test_undefined_entity_without_name(self) -> None:
        """Test an entity whose name could not be recovered."""
        assert UndefinedEntityError(None).description == "undefined entity"
