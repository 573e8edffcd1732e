"""Test module for expat_etree package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import expat_etree

    # Assert
    assert expat_etree is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import expat_etree

    # Assert
    assert isinstance(expat_etree.__version__, str)
    assert expat_etree.__version__ == "0.1.0"


def test_package_all_exports_resolve() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import expat_etree

    # Assert
    for name in expat_etree.__all__:
        assert hasattr(expat_etree, name), name


def test_level_one_api_parses_document() -> None:
    """Test the simplest entry point end to end."""
    # Arrange
    from expat_etree import from_string

    # Act
    root = from_string("<root><item>value</item></root>")

    # Assert
    assert root.tag == "root"
    assert root[0].text == "value"
