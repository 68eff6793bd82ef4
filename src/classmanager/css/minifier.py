"""CSS minification with protected functional notations.

String literals and the argument lists of a fixed set of CSS functions are
swapped for opaque placeholders before whitespace is collapsed, then
restored verbatim.
"""

from __future__ import annotations

import re

__all__ = ["PROTECTED_FUNCTIONS", "minify_css", "strip_comments"]

PROTECTED_FUNCTIONS = (
    "var",
    "calc",
    "clamp",
    "min",
    "max",
    "env",
    "cubic-bezier",
    "linear-gradient",
    "radial-gradient",
    "repeating-linear-gradient",
    "repeating-radial-gradient",
    "conic-gradient",
    "url",
)

# Comments and string literals in one pass so the leftmost one wins.
_COMMENT_OR_STRING_RE = re.compile(
    r"""
    (?P<comment>/\*.*?(?:\*/|\Z))
    |
    (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
    """,
    re.VERBOSE | re.DOTALL,
)

_FUNCTION_RE = re.compile(
    r"(?<![\w-])(?:"
    + "|".join(re.escape(f) for f in sorted(PROTECTED_FUNCTIONS, key=len, reverse=True))
    + r")\s*\(",
    re.IGNORECASE,
)

_PLACEHOLDER = "___PROTECTED_{}___"
_PUNCTUATION_RE = re.compile(r"\s*([{};:,>+~])\s*")
_WHITESPACE_RE = re.compile(r"\s+")
_VALUE_RE = re.compile(r":([^;{}]*)(?=[;}])")
_ZERO_UNIT_RE = re.compile(r"(?<![\w.#+-])[-+]?0(?:px|em|rem|%)(?![\w%-])")
_HEX_RE = re.compile(
    r"(?<![\w-])#([0-9a-f])\1([0-9a-f])\2([0-9a-f])\3(?![\w-])", re.IGNORECASE
)
_LEADING_ZERO_RE = re.compile(r"(?<![\w.])0+\.(\d)")
_TRAILING_SEMICOLONS_RE = re.compile(r";+}")


def strip_comments(css: str) -> str:
    """Remove ``/* ... */`` comments, leaving string literals alone."""

    def repl(match: re.Match[str]) -> str:
        return "" if match.group("comment") is not None else match.group(0)

    return _COMMENT_OR_STRING_RE.sub(repl, css)


def _matching_paren(text: str, open_index: int) -> int | None:
    depth = 0
    for i in range(open_index, len(text)):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return None


class _Protector:
    """Swaps protected fragments for placeholders and restores them."""

    def __init__(self) -> None:
        self._values: list[str] = []

    def _store(self, value: str) -> str:
        self._values.append(value)
        return _PLACEHOLDER.format(len(self._values) - 1)

    def strip_comments_and_protect_strings(self, css: str) -> str:
        def repl(match: re.Match[str]) -> str:
            if match.group("comment") is not None:
                return ""
            return self._store(match.group(0))

        return _COMMENT_OR_STRING_RE.sub(repl, css)

    def protect_functions(self, css: str) -> str:
        out: list[str] = []
        pos = 0
        while True:
            match = _FUNCTION_RE.search(css, pos)
            if match is None:
                break
            close = _matching_paren(css, match.end() - 1)
            if close is None:
                break
            out.append(css[pos:match.start()])
            out.append(self._store(css[match.start():close + 1]))
            pos = close + 1
        out.append(css[pos:])
        return "".join(out)

    def restore(self, css: str) -> str:
        # Later placeholders may wrap earlier ones (a url() holding a string).
        for index in range(len(self._values) - 1, -1, -1):
            css = css.replace(_PLACEHOLDER.format(index), self._values[index])
        return css


def _compact_value(match: re.Match[str]) -> str:
    value = _ZERO_UNIT_RE.sub("0", match.group(1))
    value = _HEX_RE.sub(r"#\1\2\3", value)
    return ":" + _LEADING_ZERO_RE.sub(r".\1", value)


def minify_css(css: str) -> str:
    """Minify *css*.

    Steps, in order: drop comments; protect strings and function arguments;
    collapse whitespace around ``{ } ; : , > + ~`` and elsewhere; inside
    declaration values, strip units from zero lengths, shorten ``#aabbcc``
    colors and drop leading zeros of fractions; drop the last semicolon of
    each block; restore protected text.

    If that does not make the text strictly shorter, the comment-free,
    whitespace-collapsed text is returned instead.
    """
    protector = _Protector()
    text = protector.protect_functions(protector.strip_comments_and_protect_strings(css))
    cleaned = protector.restore(_WHITESPACE_RE.sub(" ", text).strip())

    text = _PUNCTUATION_RE.sub(r"\1", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    text = _VALUE_RE.sub(_compact_value, text)
    text = _TRAILING_SEMICOLONS_RE.sub("}", text)
    minified = protector.restore(text)

    if len(minified) < len(css):
        return minified
    return cleaned
