"""Editor scoping transform: rewrites class rules for the block editor canvas."""

from __future__ import annotations

from dataclasses import replace

from classmanager.css.model import Rule, Stylesheet

EDITOR_WRAPPER = ".editor-styles-wrapper"
BLOCK_WRAPPER = ".block-editor-block-list__block"


def scope_selector(selector: str) -> tuple[str, str]:
    """Return the two editor-scoped forms of a class-led *selector*."""
    return f"{EDITOR_WRAPPER} {selector}", f"{BLOCK_WRAPPER}{selector}"


def scope_rule(rule: Rule) -> Rule | None:
    """Rewrite *rule* for the editor, or ``None`` if it targets no class.

    Selectors in the list that do not start with a class are dropped; the
    declaration body is kept byte-for-byte.
    """
    scoped = [s for selector in rule.class_selectors for s in scope_selector(selector)]
    if not scoped:
        return None
    return replace(rule, selector_text=",\n".join(scoped))


class EditorScopeTransform:
    """Build the editor-safe stylesheet tree.

    The result holds, in order:
        - the first top-level ``:root`` block, unchanged;
        - every top-level class rule, scoped, in source order;
        - every top-level ``@media`` block that contains class rules, with
          only those rules, scoped.

    Rules for the same class are never merged.
    """

    def apply(self, stylesheet: Stylesheet) -> Stylesheet:
        nodes: list = []
        root = stylesheet.first_root()
        if root is not None:
            nodes.append(root)

        for rule in stylesheet.rules:
            scoped = scope_rule(rule)
            if scoped is not None:
                nodes.append(scoped)

        for block in stylesheet.media_blocks:
            children = tuple(r for r in map(scope_rule, block.rules) if r is not None)
            if children:
                nodes.append(replace(block, children=children))

        return Stylesheet(nodes=tuple(nodes))
