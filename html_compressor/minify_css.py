"""
CSS minifier for <style> bodies and standalone stylesheets.

Quoted strings and url(...) are moved into a placeholder vault first, so none
of the rewrites below can touch their contents.
"""

import re
from enum import Enum

from .levels import Level
from .vault import PlaceholderVault

PLACEHOLDER_PREFIX = "___CSS_PH_"

_ZERO_UNITS = re.compile(
    r"(?<!\.)\b0+(?:px|em|rem|%|pt|pc|in|cm|mm|ex|ch|vw|vh|vmin|vmax)\b",
    re.IGNORECASE,
)
_LEADING_ZERO_DECIMAL = re.compile(r"\b0+(\.\d+)")
_RGB = re.compile(r"rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)", re.IGNORECASE)
_SPACE_AROUND_PUNCTUATION = re.compile(r" *([{};:,]) *")
_SEMICOLON_BEFORE_BRACE = re.compile(r";(?=\s*\})")
_WHITESPACE = re.compile(r"\s+")


class CssState(Enum):
    """Tokenizer states.

    NORMAL --quote--> STRING --matching unescaped quote--> NORMAL
    NORMAL --"url("--> URL --unescaped ")"--> NORMAL
    NORMAL --"/*"--> COMMENT --"*/"--> NORMAL
    End of input inside STRING or URL protects the rest of the text.
    Comments are copied through untouched for strip_comments; quotes inside
    them never open a STRING.
    """
    NORMAL = "normal"
    STRING = "string"
    URL = "url"
    COMMENT = "comment"


def _is_url_start(css, pos):
    return css[pos:pos + 4].lower() == "url("


def protect_literals(css, vault):
    """Replace strings and url(...) constructs with vault tokens.

    Comments pass through as-is so that strip_comments can drop them.
    """
    out = []
    state = CssState.NORMAL
    quote = None
    start = 0
    i = 0
    n = len(css)

    while i < n:
        ch = css[i]

        if state is CssState.NORMAL:
            if css.startswith("/*", i):
                state = CssState.COMMENT
                out.append("/*")
                i += 2
            elif ch in "\"'":
                state, quote, start = CssState.STRING, ch, i
                i += 1
            elif _is_url_start(css, i):
                state, start = CssState.URL, i
                i += 4
            else:
                out.append(ch)
                i += 1
            continue

        if state is CssState.COMMENT:
            end = css.find("*/", i)
            if end == -1:
                out.append(css[i:])
                break
            out.append(css[i:end + 2])
            state = CssState.NORMAL
            i = end + 2
            continue

        # STRING or URL: skip escaped characters, stop on the terminator
        if ch == "\\" and i + 1 < n:
            i += 2
            continue
        i += 1
        terminator = quote if state is CssState.STRING else ")"
        if ch == terminator:
            out.append(vault.protect(css[start:i]))
            state = CssState.NORMAL

    if state in (CssState.STRING, CssState.URL):
        out.append(vault.protect(css[start:]))

    return "".join(out)


def strip_comments(css):
    """Remove /* ... */ comments; an unterminated one runs to the end."""
    out = []
    i = 0
    while True:
        start = css.find("/*", i)
        if start == -1:
            out.append(css[i:])
            break
        out.append(css[i:start])
        end = css.find("*/", start + 2)
        if end == -1:
            break
        i = end + 2
    return "".join(out)


def _rgb_to_hex(match):
    channels = [min(int(value), 255) for value in match.groups()]
    digits = [f"{value:02x}" for value in channels]
    if all(pair[0] == pair[1] for pair in digits):
        return "#" + "".join(pair[0] for pair in digits)
    return "#" + "".join(digits)


def shorten_values(css):
    """Fold zero units, leading-zero decimals and rgb() triples."""
    css = _ZERO_UNITS.sub("0", css)
    css = _LEADING_ZERO_DECIMAL.sub(r"\1", css)
    return _RGB.sub(_rgb_to_hex, css)


def minify_css(css, level):
    """Minify a CSS fragment. No-op below AGGRESSIVE."""
    if not level.enables(Level.AGGRESSIVE):
        return css

    vault = PlaceholderVault(prefix=PLACEHOLDER_PREFIX, source=css)
    css = protect_literals(css, vault)

    # Remove CSS comments
    css = strip_comments(css)
    # Collapse whitespace
    css = _WHITESPACE.sub(" ", css).strip()
    # Remove whitespace around special characters
    css = _SPACE_AROUND_PUNCTUATION.sub(r"\1", css)
    # Remove trailing semicolons before closing braces
    css = _SEMICOLON_BEFORE_BRACE.sub("", css)

    css = shorten_values(css)
    return vault.restore_all(css)
