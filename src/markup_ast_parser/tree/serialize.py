"""Render AST trees back to markup, JSON or an indented outline.

Every writer walks the tree with an explicit stack, so any tree the parser
accepts can be rendered regardless of the interpreter's recursion limit.
"""

import json
from typing import Any, List, Optional, Tuple, Union

from .nodes import Attribute, Body, Literal, Node, Text, VariableReference

INDENT = "  "


def attribute_to_markup(attribute: Attribute) -> str:
    """Render one attribute in source form."""
    if attribute.value is None:
        return attribute.name
    if isinstance(attribute.value, Literal):
        return f'{attribute.name}="{attribute.value.value}"'
    return f"{attribute.name}={{{attribute.value.name}}}"


def to_markup(node: Node) -> str:
    """Render a tree as compact markup.

    Text runs are written verbatim, so the output re-parses to a structurally
    identical tree as long as no text run contains ``<`` or ``>``. Trees built
    by the parser never hold two adjacent text runs; hand-built ones that do
    come back with the runs merged.
    """
    parts: List[str] = []
    # Pending closing tags are pushed as plain strings
    stack: List[Union[str, Body]] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Text):
            parts.append(item.value)
        else:
            parts.append("<" + item.name)
            parts.extend(" " + attribute_to_markup(a) for a in item.attributes)
            if item.self_closing:
                parts.append("/>")
                continue
            parts.append(">")
            stack.append(f"</{item.name}>")
            stack.extend(reversed(item.children))
    return "".join(parts)


def dump_json(data: Any, indent: Optional[int] = 2) -> str:
    """Serialize nested dicts and lists the way ``json.dumps`` does.

    Produces the same text as ``json.dumps(data, indent=indent,
    ensure_ascii=False)`` but without recursing per nesting level, so
    ``Node.to_dict`` output of any depth can be written.
    """
    parts: List[str] = []
    # Work items are either literal text or (value, nesting level) pairs
    work: List[Union[str, Tuple[Any, int]]] = [(data, 0)]
    while work:
        item = work.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        value, level = item
        if isinstance(value, dict):
            opening, closing = "{", "}"
            entries = [
                (json.dumps(str(key), ensure_ascii=False) + ": ", child)
                for key, child in value.items()
            ]
        elif isinstance(value, (list, tuple)):
            opening, closing = "[", "]"
            entries = [("", child) for child in value]
        else:
            parts.append(json.dumps(value, ensure_ascii=False))
            continue

        if not entries:
            parts.append(opening + closing)
            continue

        if indent is None:
            first_separator, separator = "", ", "
        else:
            first_separator = "\n" + " " * (indent * (level + 1))
            separator = "," + first_separator
            closing = "\n" + " " * (indent * level) + closing

        parts.append(opening)
        work.append(closing)
        for index in range(len(entries) - 1, -1, -1):
            prefix, child = entries[index]
            work.append((child, level + 1))
            work.append((first_separator if index == 0 else separator) + prefix)
    return "".join(parts)


def to_json(node: Node, indent: Optional[int] = 2) -> str:
    """Dump a tree as JSON."""
    return dump_json(node.to_dict(), indent=indent)


def to_outline(node: Node) -> str:
    """Render a tree as an indented, human-readable outline."""
    lines: List[str] = []
    stack: List[Tuple[Body, int]] = [(node, 0)]
    while stack:
        item, depth = stack.pop()
        prefix = INDENT * depth
        if isinstance(item, Text):
            lines.append(f"{prefix}{item.value!r}")
            continue

        header = f"{prefix}<{item.name}> #{item.id}"
        if item.self_closing:
            header += " (self-closing)"
        lines.append(header)
        for attribute in item.attributes:
            if attribute.value is None:
                rendered = "(bare)"
            elif isinstance(attribute.value, VariableReference):
                rendered = f"{{{attribute.value.name}}}"
            else:
                rendered = repr(attribute.value.value)
            lines.append(f"{prefix}{INDENT}@{attribute.name} = {rendered}")
        stack.extend((child, depth + 1) for child in reversed(item.children))
    return "\n".join(lines)
