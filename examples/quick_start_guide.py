#!/usr/bin/env python3
"""
Quick Start Guide for the Markup AST Parser.

Walks through parsing a template, inspecting the tree, handling errors and
rendering the tree back to markup.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from markup_ast_parser import (
    MarkupParseError,
    MarkupParser,
    ParserConfig,
    VariableReference,
    parse_document,
    parse_string,
    to_markup,
)
from markup_ast_parser.tree import to_outline

TEMPLATE = """
<page title="Dashboard" user={current_user}>
  <header>
    Welcome back
    <avatar src={current_user.avatar} round/>
  </header>
  <list items={notifications}>
    <item label="Settings" href="/settings"/>
  </list>
</page>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Markup AST Parser")
    print("=" * 40)

    # Step 1: Parse a template
    print("\n📄 Step 1: Parsing a Template")
    print("-" * 30)

    root = parse_document(TEMPLATE)
    print(f"✅ Root node: <{root.name}> (id {root.id})")
    print(f"📏 Tree height: {root.height}")
    print(to_outline(root))

    # Step 2: Navigate the tree
    print("\n🔍 Step 2: Navigating the Tree")
    print("-" * 30)

    for node in root.iter_nodes():
        references = [
            attribute.value.name
            for attribute in node.attributes
            if isinstance(attribute.value, VariableReference)
        ]
        if references:
            print(f"  #{node.id} <{node.name}> parent={node.parent_id} uses {references}")

    header = root.find("header")
    print(f"📝 Header text: {header.text_content!r}")

    # Step 3: Handle errors
    print("\n⚠️  Step 3: Handling Errors")
    print("-" * 30)

    try:
        parse_document("<list><item></list>")
    except MarkupParseError as e:
        print(f"❌ {e.kind.value}: {e}")

    result = parse_string('<a x="1"{y}/>')
    print(f"Result success: {result.success}")
    if result.error:
        print(f"  - {result.error.kind.value}: {result.error}")

    # Step 4: Configure and reuse a parser
    print("\n⚙️  Step 4: Configured Parser")
    print("-" * 30)

    parser = MarkupParser(ParserConfig.strict())
    for text in ["<a/>", "<a/> trailing text", "<a><b><c/></b></a>"]:
        outcome = parser.parse(text)
        status = "✅" if outcome.success else "❌"
        print(f"{status} {text!r}")
    print(f"📊 Success rate: {parser.statistics['success_rate']:.0%}")

    # Step 5: Render back to markup
    print("\n🔁 Step 5: Round Trip")
    print("-" * 30)

    rendered = to_markup(root)
    print(rendered)
    print(f"✅ Re-parses to the same tree: {parse_document(rendered) == root}")


if __name__ == "__main__":
    quick_start_example()
