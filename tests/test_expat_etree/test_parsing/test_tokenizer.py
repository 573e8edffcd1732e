"""Tests for the expat tokenizer binding."""

from typing import List, Tuple
from xml.parsers import expat

import pytest

from expat_etree.parsing import ExpatTokenizer, TokenSink
from expat_etree.shared import ParserStateError, UndefinedEntityError

XML_ERROR_TAG_MISMATCH = expat.errors.codes[expat.errors.XML_ERROR_TAG_MISMATCH]
XML_ERROR_NO_ELEMENTS = expat.errors.codes[expat.errors.XML_ERROR_NO_ELEMENTS]
XML_ERROR_UNDEFINED_ENTITY = expat.errors.codes[
    expat.errors.XML_ERROR_UNDEFINED_ENTITY
]


class RecordingSink(TokenSink):
    """Sink collecting events as tuples."""

    def __init__(self) -> None:
        self.events: List[Tuple] = []

    def start(self, name, attributes) -> None:
        self.events.append(("start", name, attributes))

    def end(self, name) -> None:
        self.events.append(("end", name))

    def data(self, text) -> None:
        self.events.append(("data", text))

    def default(self, text) -> None:
        self.events.append(("default", text))

    def texts(self) -> str:
        return "".join(event[1] for event in self.events if event[0] == "data")


class LookupSink(RecordingSink):
    """Sink answering entity lookups with a bracketed name."""

    def __init__(self) -> None:
        super().__init__()
        self.lookups: List[str] = []

    def entity(self, name) -> str:
        self.lookups.append(name)
        return f"[{name}]"


def make_tokenizer(**kwargs) -> Tuple[ExpatTokenizer, RecordingSink]:
    tokenizer = ExpatTokenizer(**kwargs)
    sink = RecordingSink()
    tokenizer.bind(sink)
    return tokenizer, sink


class TestEvents:
    """Test the four event kinds."""

    def test_start_data_end_in_document_order(self) -> None:
        """Test a simple element with attributes."""
        tokenizer, sink = make_tokenizer()

        status = tokenizer.feed('<a x="1" y="2">hi</a>', final=True)

        assert status == 0
        assert sink.events[0] == ("start", "a", [("x", "1"), ("y", "2")])
        assert sink.events[-1] == ("end", "a")
        assert sink.texts() == "hi"

    def test_namespaced_names_use_separator(self) -> None:
        """Test expat reports uri}local names."""
        tokenizer, sink = make_tokenizer()

        tokenizer.feed('<p:a xmlns:p="http://x" p:b="v"/>', final=True)

        assert sink.events[0] == ("start", "http://x}a", [("http://x}b", "v")])
        assert sink.events[1] == ("end", "http://x}a")

    def test_namespace_processing_disabled(self) -> None:
        """Test prefixed names stay as written without a separator."""
        tokenizer, sink = make_tokenizer(namespace_separator=None)

        tokenizer.feed('<p:a xmlns:p="http://x"/>', final=True)

        assert sink.events[0] == ("start", "p:a", [("xmlns:p", "http://x")])

    def test_comment_is_default_data(self) -> None:
        """Test unclassified markup goes to the default sink."""
        tokenizer, sink = make_tokenizer()

        tokenizer.feed("<a><!-- note --></a>", final=True)

        assert ("default", "<!-- note -->") in sink.events

    def test_predefined_and_character_references_are_data(self) -> None:
        """Test references expat resolves itself."""
        tokenizer, sink = make_tokenizer()

        tokenizer.feed("<a>&amp;&#65;</a>", final=True)

        assert sink.texts() == "&A"

    def test_internal_dtd_entities_are_expanded(self) -> None:
        """Test entities declared by the document itself."""
        tokenizer, sink = make_tokenizer()

        tokenizer.feed('<!DOCTYPE a [<!ENTITY e "expanded">]><a>&e;</a>', final=True)

        assert sink.texts() == "expanded"

    def test_undefined_entity_with_foreign_dtd_is_default_data(self) -> None:
        """Test the entity reference reaches the default sink."""
        tokenizer, sink = make_tokenizer()

        status = tokenizer.feed("<a>&undefined;</a>", final=True)

        assert status == 0
        assert ("default", "&undefined;") in sink.events

    def test_undefined_entity_without_foreign_dtd_is_error(self) -> None:
        """Test expat rejects the reference on its own."""
        tokenizer, _ = make_tokenizer(use_foreign_dtd=False)

        status = tokenizer.feed("<a>&undefined;</a>", final=True)

        assert status == XML_ERROR_UNDEFINED_ENTITY
        assert tokenizer.error_context().startswith(b"&undefined;")

    def test_chunked_feed_delivers_same_text(self) -> None:
        """Test a text run split across chunks."""
        tokenizer, sink = make_tokenizer()

        assert tokenizer.feed("<a>he") == 0
        assert tokenizer.feed("llo</a>") == 0
        assert tokenizer.feed("", final=True) == 0

        assert sink.texts() == "hello"

    def test_bytes_input(self) -> None:
        """Test byte chunks with an encoding declaration."""
        tokenizer, sink = make_tokenizer()

        data = '<?xml version="1.0" encoding="ISO-8859-1"?><a>caf\xe9</a>'
        tokenizer.feed(data.encode("iso-8859-1"), final=True)

        assert sink.texts() == "caf\xe9"


class TestErrors:
    """Test status codes and error reporting."""

    def test_mismatched_tag_status_and_context(self) -> None:
        """Test code, position and raw context of a tag mismatch."""
        tokenizer, _ = make_tokenizer()

        status = tokenizer.feed("<a><b></a>", final=True)

        assert status == XML_ERROR_TAG_MISMATCH
        assert tokenizer.error_description(status) == "mismatched tag"
        line, column = tokenizer.error_position()
        assert line == 1
        assert column >= 1
        assert b"a>" in tokenizer.error_context()

    def test_error_context_survives_chunk_boundaries(self) -> None:
        """Test context is kept for a token arriving in a later chunk."""
        tokenizer, _ = make_tokenizer()

        assert tokenizer.feed("<a><b>") == 0
        status = tokenizer.feed("</a>", final=True)

        assert status == XML_ERROR_TAG_MISMATCH
        assert b"a>" in tokenizer.error_context()

    def test_empty_document(self) -> None:
        """Test final flush with no element."""
        tokenizer, _ = make_tokenizer()

        assert tokenizer.feed("", final=True) == XML_ERROR_NO_ELEMENTS

    def test_sink_exceptions_propagate(self) -> None:
        """Test exceptions raised by the sink are not turned into codes."""

        class FailingSink(RecordingSink):
            def start(self, name, attributes) -> None:
                raise RuntimeError("boom")

        tokenizer = ExpatTokenizer()
        tokenizer.bind(FailingSink())

        with pytest.raises(RuntimeError, match="boom"):
            tokenizer.feed("<a/>", final=True)


class TestAttributeEntities:
    """Test references expat drops from attribute values."""

    def test_sink_supplies_replacement_text(self) -> None:
        """Test the sink is asked for each unresolved reference."""
        tokenizer = ExpatTokenizer()
        sink = LookupSink()
        tokenizer.bind(sink)

        tokenizer.feed('<a x="&e; and &f;" y="&amp;"/>', final=True)

        assert sink.events[0] == ("start", "a", [("x", "[e] and [f]"), ("y", "&")])
        assert sink.lookups == ["e", "f"]

    def test_document_entities_are_not_looked_up(self) -> None:
        """Test entities declared by the document stay with expat."""
        tokenizer = ExpatTokenizer()
        sink = LookupSink()
        tokenizer.bind(sink)

        tokenizer.feed('<!DOCTYPE a [<!ENTITY d "v">]><a x="&d;"/>', final=True)

        assert sink.events[0] == ("start", "a", [("x", "v")])
        assert sink.lookups == []

    def test_sink_without_lookup_rejects_reference(self) -> None:
        """Test the default lookup raises."""
        tokenizer, _ = make_tokenizer()

        with pytest.raises(UndefinedEntityError) as exc_info:
            tokenizer.feed('<a x="&e;"/>', final=True)

        assert exc_info.value.entity == "e"

    def test_no_lookup_without_foreign_dtd(self) -> None:
        """Test expat reports the reference as an error instead."""
        tokenizer = ExpatTokenizer(use_foreign_dtd=False)
        sink = LookupSink()
        tokenizer.bind(sink)

        status = tokenizer.feed('<a x="&e;"/>', final=True)

        assert status == XML_ERROR_UNDEFINED_ENTITY
        assert sink.lookups == []


class TestLifecycle:
    """Test bind and release contracts."""

    def test_feed_before_bind(self) -> None:
        """Test a tokenizer needs a sink."""
        with pytest.raises(ParserStateError, match="no event sink"):
            ExpatTokenizer().feed("<a/>")

    def test_use_after_release(self) -> None:
        """Test released tokenizers refuse work."""
        tokenizer, _ = make_tokenizer()

        tokenizer.release()

        assert tokenizer.released
        with pytest.raises(ParserStateError, match="already released"):
            tokenizer.feed("<a/>")

    def test_double_release(self) -> None:
        """Test release happens exactly once."""
        tokenizer, _ = make_tokenizer()
        tokenizer.release()

        with pytest.raises(ParserStateError):
            tokenizer.release()

    def test_engine_version(self) -> None:
        """Test the expat version is exposed."""
        assert ExpatTokenizer().engine_version.startswith("expat_")
