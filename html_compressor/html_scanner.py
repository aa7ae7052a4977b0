"""
HTML minifier.

Walks the document once, keeping a stack of open elements so it knows when
it is inside <pre>, <code>, <textarea>, <script> or <style>. Tags go through
the attribute optimizer, <script>/<style> bodies through the JS/CSS
minifiers, comments are dropped and ordinary whitespace is collapsed.
"""

import re
from enum import Enum

from .attributes import optimize_attributes
from .minify_css import minify_css
from .minify_js import minify_js

SPECIAL_TAGS = frozenset({"pre", "script", "style", "textarea", "code"})
RAW_TEXT_TAGS = frozenset({"script", "style"})
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
})
JAVASCRIPT_TYPES = frozenset({
    "", "module", "text/javascript", "application/javascript",
    "text/ecmascript", "application/ecmascript", "application/x-javascript",
})

_TYPE_ATTRIBUTE = re.compile(r"\stype\s*=\s*([\"']?)([^\"'\s>]*)\1", re.IGNORECASE)
_TEXT_RUN = re.compile(r"[^\s<]+")
_SPACE_RUN = re.compile(r"\s+")


class TagStack:
    """Lower-cased names of the open, non-void elements at the cursor."""

    def __init__(self):
        self._tags = []

    def __len__(self):
        return len(self._tags)

    def __iter__(self):
        return iter(self._tags)

    def push(self, name):
        self._tags.append(name)

    def close(self, name):
        """Pop down to and including the nearest open ``name``.

        Unmatched entries above it are discarded. A closing tag with no open
        counterpart leaves the stack untouched and returns False.
        """
        for index in range(len(self._tags) - 1, -1, -1):
            if self._tags[index] == name:
                del self._tags[index:]
                return True
        return False

    @property
    def innermost(self):
        return self._tags[-1] if self._tags else None

    @property
    def inside_special(self):
        return any(tag in SPECIAL_TAGS for tag in reversed(self._tags))


class ScanState(Enum):
    """What the scanner does at the cursor.

    ============== ============================================ ===========================
    State          Entered when                                 Action
    ============== ============================================ ===========================
    RAW_BODY       innermost element is script/style and the    minify body up to closing
                   cursor is not at its closing tag             tag, resume at the tag
    COMMENT        cursor at "<!--"                             drop through "-->";
                                                                unterminated truncates
    TAG            cursor at "<"                                update stack, optimize,
                                                                emit; no ">" truncates
    PRESERVED_TEXT inside pre/code/textarea                     copy up to next "<"
    TEXT           anything else                                collapse whitespace
    ============== ============================================ ===========================
    """
    RAW_BODY = "raw_body"
    COMMENT = "comment"
    TAG = "tag"
    PRESERVED_TEXT = "preserved_text"
    TEXT = "text"


def _closing_tag_at(html, pos, name):
    return html[pos:pos + len(name) + 2].lower() == "</" + name


def classify(html, pos, stack):
    """Return the ScanState for the cursor at ``pos``."""
    innermost = stack.innermost
    if innermost in RAW_TEXT_TAGS and not _closing_tag_at(html, pos, innermost):
        return ScanState.RAW_BODY
    if html.startswith("<!--", pos):
        return ScanState.COMMENT
    if html[pos] == "<":
        return ScanState.TAG
    if stack.inside_special:
        return ScanState.PRESERVED_TEXT
    return ScanState.TEXT


def tag_name(tag):
    """Lower-cased element name of a raw tag, without the closing slash."""
    start = 2 if tag.startswith("</") else 1
    while start < len(tag) and tag[start].isspace():
        start += 1
    end = start
    while end < len(tag) and not tag[end].isspace() and tag[end] not in "/>":
        end += 1
    return tag[start:end].lower()


def is_self_closing(tag):
    body = tag.rstrip(">").rstrip()
    return body.endswith("/")


def is_javascript(tag):
    """True unless the script tag declares a non-JavaScript type."""
    match = _TYPE_ATTRIBUTE.search(tag)
    if match is None:
        return True
    return match.group(2).lower() in JAVASCRIPT_TYPES


class HtmlScanner:
    """Single-pass HTML minifier for one call."""

    def __init__(self, level, css_minifier=minify_css, js_minifier=minify_js):
        self.level = level
        self.css_minifier = css_minifier
        self.js_minifier = js_minifier
        self.stack = TagStack()
        self._verbatim_script = False

    def scan(self, html):
        out = []
        pos = 0
        n = len(html)
        pending_space = False

        while pos < n:
            state = classify(html, pos, self.stack)

            if state is ScanState.RAW_BODY:
                pos = self._raw_body(html, pos, out)
                continue

            if state is ScanState.COMMENT:
                end = html.find("-->", pos + 4)
                if end == -1:
                    break
                pos = end + 3
                continue

            if state is ScanState.TAG:
                end = html.find(">", pos)
                if end == -1:
                    break
                tag = html[pos:end + 1]
                self._track(tag)
                out.append(optimize_attributes(tag, self.level))
                pending_space = False
                pos = end + 1
                continue

            if state is ScanState.PRESERVED_TEXT:
                end = html.find("<", pos)
                if end == -1:
                    end = n
                out.append(html[pos:end])
                pos = end
                continue

            space = _SPACE_RUN.match(html, pos)
            if space:
                pending_space = True
                pos = space.end()
                continue

            text = _TEXT_RUN.match(html, pos).group()
            if pending_space and out and out[-1][-1] != ">":
                out.append(" ")
            out.append(text)
            pending_space = False
            pos += len(text)

        return "".join(out)

    def _track(self, tag):
        name = tag_name(tag)
        if tag.startswith("</"):
            self.stack.close(name)
            return
        if not name or name[0] in "!?" or name in VOID_ELEMENTS or is_self_closing(tag):
            return
        self.stack.push(name)
        if name == "script":
            self._verbatim_script = not is_javascript(tag)

    def _raw_body(self, html, pos, out):
        name = self.stack.innermost
        closing = re.compile("</" + name, re.IGNORECASE).search(html, pos)
        if closing is None:
            # No closing tag: copy the rest through untouched
            out.append(html[pos:])
            return len(html)

        body = html[pos:closing.start()]
        if name == "style":
            body = self.css_minifier(body, self.level)
        elif not self._verbatim_script:
            body = self.js_minifier(body, self.level)
        if body:
            out.append(body)
        return closing.start()


def minify_html(html, level, js_minifier=minify_js):
    """Minify an HTML document with embedded CSS and JS."""
    return HtmlScanner(level, js_minifier=js_minifier).scan(html)
