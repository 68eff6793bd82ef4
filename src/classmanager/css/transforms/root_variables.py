"""Root variable extraction: split the first ``:root`` block from the rest."""

from __future__ import annotations

from classmanager.css.parser import parse_stylesheet
from classmanager.css.serializer import serialize_root


def extract_root_variables(css: str) -> str:
    """Return the first top-level ``:root`` block, or an empty string.

    Only the first block is honored; later ``:root`` blocks are left in the
    stylesheet and are not merged.
    """
    root = parse_stylesheet(css).first_root()
    if root is None:
        return ""
    return serialize_root(root)


def remove_root_variables(css: str) -> str:
    """Return *css* without its first ``:root`` block and the whitespace after it."""
    root = parse_stylesheet(css).first_root()
    if root is None:
        return css
    start, end = root.span
    rest = css[end:]
    return css[:start] + rest.lstrip()
