#!/usr/bin/env python3
"""
Quick Start Guide for XML Node Tree.

Walks through parsing a document, navigating and editing it with the path
helpers, and writing it back out.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_node_tree import (
    MalformedInputError,
    Node,
    NodeTreeConfig,
    parse_string,
    serialize,
)

LIBRARY = """
    <library name="City Library" location="Downtown" rating="4.3">
        <section name="Fiction">
            <book>
                <title>The Great Gatsby</title>
                <author>F. Scott Fitzgerald</author>
                <published>1925</published>
            </book>
            <book>
                <title>1984</title>
                <author>George Orwell</author>
                <published>1949</published>
            </book>
        </section>
        <section name="Non-Fiction">
            <book>
                <title>Educated</title>
                <author>Tara Westover</author>
                <published>2018</published>
            </book>
        </section>
    </library>"""


def quick_start_example():
    """Parse, navigate and edit a document."""

    print("🚀 QUICK START - XML Node Tree")
    print("=" * 35)

    # Step 1: Parse
    print("\n📄 Step 1: Parsing")
    print("-" * 30)

    root = parse_string(LIBRARY)
    print(f"✅ Root <{root.tag}> with {len(root.children)} sections")
    print(f"🏛️  Name: {root.get_attribute('name')}")

    # Step 2: Navigate
    print("\n🧭 Step 2: Navigation")
    print("-" * 30)

    first_title = root.find_child("title")
    print(f"📖 First title: {first_title.inner_text}")
    print(f"📍 Path: {first_title.get_path()}")
    for title in root.find_all("title"):
        print(f"  - {title.inner_text}")
    print(f"🔎 Has section/book/title: {root.check_path('section', 'book', 'title')}")
    print(f"🔎 Has section/magazine: {root.check_path('section', 'magazine')}")

    # Step 3: Edit
    print("\n✏️  Step 3: Editing")
    print("-" * 30)

    root.ensure_path("meta", "updated").inner_text = "2024-01-01"
    root.ensure_path("meta", "updated").set_attribute("by", "librarian")
    root.create_unique_path("meta", "checked").inner_text = "yes"
    fiction = root.children[0]
    removed = fiction.remove_children_with_tag("book")
    fiction.chain_append_children(
        Node("book").chain_append_child(Node("title", inner_text="Beloved")),
    )
    print(f"🗑️  Removed {removed} fiction books, added 1")

    # Step 4: Output
    print("\n🔄 Step 4: Output")
    print("-" * 30)

    print("📋 Pretty XML:")
    print(serialize(root, NodeTreeConfig.pretty()))
    print("\n📋 Compact XML:")
    print(serialize(root.find_child("meta")))
    print("\n📋 Dictionary:")
    print(json.dumps(root.find_child("meta").to_dict(), indent=2))

    print("\n🎉 Quick start complete!")


def error_handling_example():
    """Show how malformed input is reported."""

    print("\n\n⚠️  ERROR HANDLING EXAMPLE")
    print("=" * 35)

    documents = [
        "<a><b></a>",
        "<a>&nbsp;</a>",
        "<a></a><b></b>",
    ]
    for text in documents:
        try:
            parse_string(text)
        except MalformedInputError as e:
            print(f"  {text!r}: {e}")


def main():
    """Main function."""
    try:
        quick_start_example()
        error_handling_example()

        print("\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
