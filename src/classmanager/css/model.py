"""Stylesheet model: Declaration, Rule, RootBlock, AtRule and Stylesheet dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# At-rules whose block holds further rules rather than declarations.
GROUPING_AT_RULES = frozenset({"media", "supports", "container", "layer", "document"})


def split_top_level(text: str, separator: str) -> list[str]:
    """Split *text* on *separator* outside parentheses, brackets and strings."""
    parts: list[str] = []
    depth = 0
    quote = ""
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(depth - 1, 0)
        elif ch == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return parts


@dataclass(frozen=True)
class Declaration:
    """A single ``property: value`` pair."""

    property: str
    value: str


def parse_declarations(body: str) -> tuple[Declaration, ...]:
    """Parse a declaration block body into ordered declarations."""
    declarations: list[Declaration] = []
    for chunk in split_top_level(body, ";"):
        name, sep, value = chunk.partition(":")
        if not sep or not name.strip():
            continue
        declarations.append(Declaration(property=name.strip(), value=value.strip()))
    return tuple(declarations)


@dataclass(frozen=True)
class Rule:
    """A qualified rule: selector list plus its verbatim declaration body."""

    selector_text: str
    body: str
    span: tuple[int, int] = (0, 0)

    @property
    def selectors(self) -> tuple[str, ...]:
        parts = (s.strip() for s in split_top_level(self.selector_text, ","))
        return tuple(s for s in parts if s)

    @property
    def class_selectors(self) -> tuple[str, ...]:
        """Selectors of this rule that begin with a class."""
        return tuple(s for s in self.selectors if s.startswith("."))

    @property
    def declarations(self) -> tuple[Declaration, ...]:
        return parse_declarations(self.body)


@dataclass(frozen=True)
class RootBlock:
    """A top-level ``:root { ... }`` block of custom properties."""

    body: str
    span: tuple[int, int] = (0, 0)

    @property
    def declarations(self) -> tuple[Declaration, ...]:
        return parse_declarations(self.body)


@dataclass(frozen=True)
class AtRule:
    """An at-rule such as ``@media``, ``@font-face`` or ``@import``.

    ``body`` is ``None`` for statement at-rules ending in ``;``. For grouping
    at-rules (``@media``, ``@supports``...) ``children`` holds the parsed
    nested nodes; for the others it is empty and only ``body`` is kept.
    """

    name: str
    prelude: str
    body: str | None = None
    children: tuple["Node", ...] = ()
    span: tuple[int, int] = (0, 0)

    @property
    def condition(self) -> str:
        """The prelude text after the at-keyword, e.g. ``(max-width: 600px)``."""
        return self.prelude[len(self.name) + 1:].strip()

    @property
    def rules(self) -> list[Rule]:
        return [n for n in self.children if isinstance(n, Rule)]


Node = Union[Rule, RootBlock, AtRule]


@dataclass(frozen=True)
class Stylesheet:
    """An ordered sequence of top-level nodes parsed from CSS source."""

    nodes: tuple[Node, ...] = field(default_factory=tuple)

    @property
    def rules(self) -> list[Rule]:
        return [n for n in self.nodes if isinstance(n, Rule)]

    @property
    def root_blocks(self) -> list[RootBlock]:
        return [n for n in self.nodes if isinstance(n, RootBlock)]

    @property
    def media_blocks(self) -> list[AtRule]:
        return [n for n in self.nodes if isinstance(n, AtRule) and n.name == "media"]

    def first_root(self) -> RootBlock | None:
        """Return the first top-level ``:root`` block, if any."""
        roots = self.root_blocks
        return roots[0] if roots else None

    def iter_rules(self):
        """Yield every rule, descending into grouping at-rules."""
        stack = list(reversed(self.nodes))
        while stack:
            node = stack.pop()
            if isinstance(node, Rule):
                yield node
            elif isinstance(node, AtRule):
                stack.extend(reversed(node.children))
