"""Hand-written scanner/parser for author CSS.

Produces a :class:`Stylesheet` of top-level rules, ``:root`` blocks and
at-rules. Comments are skipped, quoted strings are opaque, and every block is
closed with a brace-balanced scan, so nested at-rules and braces inside
strings are handled without regular expressions.

The parser never raises. An unbalanced block, or one that exceeds
``MAX_SCAN_STEPS``, ends parsing and whatever was parsed before it is
returned.
"""

from __future__ import annotations

import re

from classmanager.css.model import (
    GROUPING_AT_RULES,
    AtRule,
    Node,
    RootBlock,
    Rule,
    Stylesheet,
)

__all__ = ["MAX_SCAN_STEPS", "parse_stylesheet"]

MAX_SCAN_STEPS = 100_000

_AT_NAME_RE = re.compile(r"@(?P<name>-?[a-zA-Z][\w-]*)")


def _skip_string(source: str, i: int, end: int) -> int:
    """Return the index just past the string literal starting at *i*."""
    quote = source[i]
    i += 1
    while i < end:
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote or ch == "\n":
            return i + 1
        i += 1
    return end


def _skip_comment(source: str, i: int, end: int) -> int:
    """Return the index just past the comment starting at *i*."""
    close = source.find("*/", i + 2, end)
    return end if close == -1 else close + 2


def _find_block_end(source: str, open_index: int, end: int) -> int | None:
    """Return the index of the ``}`` matching the ``{`` at *open_index*."""
    depth = 1
    steps = 0
    i = open_index + 1
    while i < end:
        steps += 1
        if steps > MAX_SCAN_STEPS:
            return None
        ch = source[i]
        if ch == "/" and source.startswith("/*", i):
            i = _skip_comment(source, i, end)
            continue
        if ch in ("'", '"'):
            i = _skip_string(source, i, end)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _make_node(
    source: str, prelude: str, body_start: int, body_end: int, span: tuple[int, int]
) -> Node | None:
    body = source[body_start:body_end]
    if prelude == ":root":
        return RootBlock(body=body, span=span)
    if prelude.startswith("@"):
        match = _AT_NAME_RE.match(prelude)
        if match is None:
            return None
        name = match.group("name").lower()
        children: tuple[Node, ...] = ()
        if name in GROUPING_AT_RULES:
            children = tuple(_parse_nodes(source, body_start, body_end))
        return AtRule(name=name, prelude=prelude, body=body, children=children, span=span)
    if not prelude:
        return None
    return Rule(selector_text=prelude, body=body, span=span)


def _parse_nodes(source: str, start: int, end: int) -> list[Node]:
    nodes: list[Node] = []
    pos = start
    while pos < end:
        chars: list[str] = []
        node_start: int | None = None
        paren = 0
        i = pos
        while i < end:
            ch = source[i]
            if ch == "/" and source.startswith("/*", i):
                i = _skip_comment(source, i, end)
                continue
            if ch in ("'", '"'):
                j = _skip_string(source, i, end)
                if node_start is None:
                    node_start = i
                chars.append(source[i:j])
                i = j
                continue
            if ch == "(":
                paren += 1
            elif ch == ")":
                paren = max(paren - 1, 0)
            elif paren == 0 and ch in "{;}":
                break
            if node_start is None and not ch.isspace():
                node_start = i
            chars.append(ch)
            i += 1

        if i >= end:
            # Trailing text without a block is dropped.
            break

        prelude = "".join(chars).strip()
        terminator = source[i]
        if node_start is None:
            node_start = i

        if terminator == "}":
            # Stray closing brace.
            pos = i + 1
            continue

        if terminator == ";":
            match = _AT_NAME_RE.match(prelude)
            if match is not None:
                nodes.append(
                    AtRule(
                        name=match.group("name").lower(),
                        prelude=prelude,
                        span=(node_start, i + 1),
                    )
                )
            pos = i + 1
            continue

        close = _find_block_end(source, i, end)
        if close is None:
            break
        node = _make_node(source, prelude, i + 1, close, (node_start, close + 1))
        if node is not None:
            nodes.append(node)
        pos = close + 1
    return nodes


def parse_stylesheet(source: str) -> Stylesheet:
    """Parse CSS source text into a Stylesheet.

    Returns a Stylesheet containing all parsed top-level nodes in source order.
    """
    return Stylesheet(nodes=tuple(_parse_nodes(source, 0, len(source))))
