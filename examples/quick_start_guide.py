#!/usr/bin/env python3
"""
Quick Start Guide for expat-etree.

This example walks through whole-document parsing, chunked sessions, entity
tables, error reporting and conversion to the standard library's tree.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from expat_etree import (
    ParseError,
    ParserConfig,
    ParserSession,
    TagMismatchError,
    from_string,
)
from expat_etree.api import get_adapter

CATALOG = """<catalog xmlns:dc="http://purl.org/dc/elements/1.1/">
  <book id="123" genre="fiction">
    <dc:title>My Book</dc:title>
    <price currency="USD">19.99</price>
  </book>
</catalog>"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - expat-etree")
    print("=" * 45)

    # Step 1: Parse a whole document
    print("\n📄 Step 1: Parsing a Document")
    print("-" * 30)

    root = from_string(CATALOG)
    book = root[0]
    print(f"✅ Root tag: {root.tag}")
    print(f"📚 Book attributes: {book.attributes}")
    print(f"🏷️  Title tag: {book[0].tag}")
    print(f"💲 Price: {book[1].text} {book[1].get('currency')}")

    # Step 2: Feed a document in chunks
    print("\n📦 Step 2: Chunked Parsing")
    print("-" * 30)

    with ParserSession() as session:
        for chunk in ("<greeting>hel", "lo, wor", "ld</greeting>"):
            session.feed(chunk)
        greeting = session.finish()

    print(f"✅ Text assembled from chunks: {greeting.text!r}")
    print(f"📊 Events handled: {session.metrics.total_events}")

    # Step 3: Resolve entities from a table
    print("\n🔤 Step 3: Entity Tables")
    print("-" * 30)

    config = ParserConfig.html().with_entities(product="Widget")
    note = from_string("<note>&product; &copy; 2024</note>", config)
    print(f"✅ Expanded text: {note.text}")

    # Step 4: Handle errors
    print("\n🚨 Step 4: Error Reporting")
    print("-" * 30)

    try:
        from_string("<a><b></a>")
    except TagMismatchError as e:
        print(f"❌ {e}")
        print(f"   expected={e.expected} encountered={e.encountered}")

    try:
        from_string("<a>&unknown;</a>")
    except ParseError as e:
        print(f"❌ {type(e).__name__}: {e.description} at {e.position}")

    # Step 5: Convert to xml.etree.ElementTree
    print("\n🔄 Step 5: Library Integration")
    print("-" * 30)

    adapter = get_adapter("etree")
    node = adapter.to_target(root)
    print(f"✅ Converted to {adapter.target_library}: {node.tag}")

    print("\n🎉 Quick start completed!")


if __name__ == "__main__":
    quick_start_example()
