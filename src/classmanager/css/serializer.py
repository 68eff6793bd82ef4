"""Serialize Stylesheet trees back to CSS text."""

from __future__ import annotations

from classmanager.css.model import AtRule, Node, RootBlock, Rule, Stylesheet

INDENT = "    "


def _close_body(body: str, indent: str) -> str:
    if not body.endswith("\n"):
        body += "\n"
    return f"{body}{indent}}}\n"


def serialize_root(block: RootBlock) -> str:
    """Render a ``:root`` block with its body kept verbatim."""
    return ":root {\n" + block.body + "}\n\n"


def serialize_rule(rule: Rule, indent: str = "") -> str:
    """Render *rule* with one selector per line and its body kept verbatim."""
    selectors = (",\n" + indent).join(rule.selectors)
    return f"{indent}{selectors} {{\n" + _close_body(rule.body, indent)


def serialize_at_rule(block: AtRule) -> str:
    if block.body is None:
        return f"{block.prelude};\n\n"
    if block.children:
        inner = "".join(_serialize_nested(child) for child in block.children)
        return f"@{block.name} {block.condition} {{\n{inner}}}\n\n"
    return f"{block.prelude} {{" + block.body + "}\n\n"


def _serialize_nested(node: Node) -> str:
    if isinstance(node, Rule):
        return serialize_rule(node, INDENT)
    if isinstance(node, RootBlock):
        return INDENT + ":root {\n" + _close_body(node.body, INDENT)
    return "".join(INDENT + line + "\n" for line in serialize_at_rule(node).splitlines() if line)


def serialize_node(node: Node) -> str:
    if isinstance(node, RootBlock):
        return serialize_root(node)
    if isinstance(node, Rule):
        return serialize_rule(node) + "\n"
    return serialize_at_rule(node)


def serialize_stylesheet(stylesheet: Stylesheet) -> str:
    """Render every node of *stylesheet* in order."""
    return "".join(serialize_node(node) for node in stylesheet.nodes)
