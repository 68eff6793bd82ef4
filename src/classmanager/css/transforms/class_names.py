"""Class name discovery for the editor suggestion list."""

from __future__ import annotations

import re

from classmanager.css.parser import parse_stylesheet

_ESCAPE = r"\\(?:[0-9a-fA-F]{1,6}\s?|[^\n0-9a-fA-F])"
_CLASS_RE = re.compile(rf"\.(?P<name>-?(?:[a-zA-Z_]|{_ESCAPE})(?:[\w-]|{_ESCAPE})*)")
_ESCAPE_RE = re.compile(r"\\(?:(?P<hex>[0-9a-fA-F]{1,6})\s?|(?P<char>.))", re.DOTALL)
_ATTRIBUTE_RE = re.compile(r"\[[^\]]*\]")


def _unescape_char(match: re.Match[str]) -> str:
    if match.group("char") is not None:
        return match.group("char")
    code = int(match.group("hex"), 16)
    if code == 0 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return "\ufffd"
    return chr(code)


def unescape_identifier(ident: str) -> str:
    r"""Resolve CSS escapes, e.g. ``md\:p-4`` -> ``md:p-4``."""
    return _ESCAPE_RE.sub(_unescape_char, ident)


def extract_class_names(css: str) -> set[str]:
    """Return the distinct class identifiers used in selectors of *css*.

    Only selector text is scanned, so custom property names in ``:root`` and
    numbers such as ``0.5em`` in declaration values never count as classes.
    Rules nested in grouping at-rules (``@media``...) are included. Escaped
    identifiers are returned unescaped (``.w-1\\/2`` gives ``w-1/2``).
    """
    names: set[str] = set()
    for rule in parse_stylesheet(css).iter_rules():
        selector_text = _ATTRIBUTE_RE.sub("", rule.selector_text)
        names.update(
            unescape_identifier(m.group("name")) for m in _CLASS_RE.finditer(selector_text)
        )
    return names


def class_name_feed(css: str) -> list[str]:
    """Return the class names of *css* sorted for display."""
    return sorted(extract_class_names(css))
