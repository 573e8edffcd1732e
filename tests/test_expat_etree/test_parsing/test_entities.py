"""Tests for the entity table."""

import pytest

from expat_etree.parsing import EntityResolver, entity_name


class TestEntityName:
    """Test extraction of entity names from default data."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("&copy;", "copy"),
            ("&undefined;", "undefined"),
            ("&a;", "a"),
        ],
    )
    def test_entity_references(self, raw: str, expected: str) -> None:
        """Test well-formed references."""
        assert entity_name(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "&", "&;", "copy", "<!-- c -->", "\n", "&#169;", "&copy"],
    )
    def test_other_default_data(self, raw: str) -> None:
        """Test anything else is not an entity reference."""
        assert entity_name(raw) is None


class TestEntityResolver:
    """Test lookups in the entity table."""

    def test_known_entity_resolves(self) -> None:
        """Test a declared entity."""
        resolver = EntityResolver({"copy": "©"})

        assert resolver.resolve("copy") == "©"
        assert "copy" in resolver
        assert len(resolver) == 1
        assert resolver.names() == ["copy"]
        assert resolver.items() == [("copy", "©")]

    def test_unknown_entity_returns_none(self) -> None:
        """Test a missing entity."""
        resolver = EntityResolver({"copy": "©"})

        assert resolver.resolve("nbsp") is None

    def test_empty_table(self) -> None:
        """Test the default table."""
        resolver = EntityResolver()

        assert len(resolver) == 0
        assert resolver.resolve("anything") is None

    def test_table_is_copied_at_construction(self) -> None:
        """Test later changes to the source mapping are not seen."""
        source = {"a": "1"}
        resolver = EntityResolver(source)
        source["b"] = "2"

        assert resolver.resolve("b") is None
