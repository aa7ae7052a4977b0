"""
Built-in JavaScript minifier.

A single left-to-right pass that drops comments and whitespace without
parsing. Whitespace is never copied directly: it is held as a pending gap
and resolved when the next token arrives, which is where the minifier
decides between nothing, one space, or an inserted semicolon.

Regular expression literals are not tracked. A regex containing a quote,
``//`` or ``/*`` is scanned as if it were code. A template literal that
starts a line is never separated from the line before it, so a statement
beginning with a backtick needs an explicit semicolon in the source.
"""

from enum import Enum

from .levels import Level


class JsState(Enum):
    """Scanner states.

    CODE          --quote/backtick-->       STRING
    STRING        --unescaped opener-->     CODE
    CODE          --"//"-->                 LINE_COMMENT
    LINE_COMMENT  --newline-->              CODE (gap becomes a line break)
    CODE          --"/*"-->                 BLOCK_COMMENT (dropped, EXTREME)
    CODE          --"/*"-->                 KEPT_COMMENT (copied, AGGRESSIVE)
    *_COMMENT     --"*/"-->                 CODE
    """
    CODE = "code"
    STRING = "string"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    KEPT_COMMENT = "kept_comment"


class Gap(Enum):
    NONE = 0
    SPACE = 1
    LINEBREAK = 2


QUOTES = "\"'`"
LINE_TERMINATORS = "\n\r\u2028\u2029"

# Keywords that continue the statement before them when they start a line
ATTACHED_KEYWORDS = frozenset({"else", "catch", "finally", "while"})
CONTINUATION_KEYWORDS = ATTACHED_KEYWORDS | {"in", "instanceof", "of"}

# A line ending in one of these words never ends a statement
NON_TERMINAL_WORDS = frozenset({
    "case", "const", "delete", "do", "else", "extends", "in", "instanceof",
    "let", "new", "of", "typeof", "var", "void",
})

CONTROL_KEYWORDS = frozenset({"if", "for", "while", "with"})

STATEMENT_END_PUNCTUATION = ")]}" + QUOTES
# Backticks are left out: a template after a line break is a tagged call
STATEMENT_START_PUNCTUATION = "([+-!\"'"


def is_identifier_char(ch):
    return ch.isalnum() or ch in "_$"


def is_identifier_start(ch):
    return ch.isalpha() or ch in "_$"


def _read_word(text, pos):
    end = pos
    while end < len(text) and is_identifier_char(text[end]):
        end += 1
    return text[pos:end]


class JsMinifier:
    """State machine for one minification call."""

    def __init__(self, level):
        self.level = level
        self.state = JsState.CODE
        self.quote = None
        self.gap = Gap.NONE
        self.out = []
        # Last significant character emitted outside strings and comments
        self.last = ""
        self.last_word = ""
        # Characters of an attached keyword still to copy after its forced space
        self.keyword_span = 0
        # Paren depth of an open if/for/while/with head, or None
        self.control_depth = None
        self.pending_control = False
        self.closed_control = False

    def minify(self, js):
        i = 0
        n = len(js)
        while i < n:
            i = self._step(js, i)
        return "".join(self.out)

    def _step(self, js, i):
        ch = js[i]
        nxt = js[i + 1] if i + 1 < len(js) else ""

        if self.state is JsState.LINE_COMMENT:
            if ch in LINE_TERMINATORS:
                self.state = JsState.CODE
                self.gap = Gap.LINEBREAK
            return i + 1

        if self.state in (JsState.BLOCK_COMMENT, JsState.KEPT_COMMENT):
            keep = self.state is JsState.KEPT_COMMENT
            if ch == "*" and nxt == "/":
                if keep:
                    self.out.append("*/")
                self.state = JsState.CODE
                self._widen_gap(Gap.SPACE)
                return i + 2
            if keep:
                self.out.append(ch)
            elif ch in LINE_TERMINATORS:
                self._widen_gap(Gap.LINEBREAK)
            return i + 1

        if self.state is JsState.STRING:
            self.out.append(ch)
            if ch == "\\" and nxt:
                self.out.append(nxt)
                return i + 2
            if ch == self.quote:
                self.state = JsState.CODE
                self.last = ch
                self.last_word = ""
            return i + 1

        # CODE
        if self.keyword_span:
            self.keyword_span -= 1
            self._emit(ch)
            return i + 1

        if ch == "/" and nxt == "/":
            self.state = JsState.LINE_COMMENT
            return i + 2

        if ch == "/" and nxt == "*":
            if self.level.enables(Level.EXTREME):
                self.state = JsState.BLOCK_COMMENT
            else:
                self.state = JsState.KEPT_COMMENT
                self.out.append("/*")
            return i + 2

        if ch.isspace():
            self._widen_gap(Gap.LINEBREAK if ch in LINE_TERMINATORS else Gap.SPACE)
            return i + 1

        word = _read_word(js, i) if is_identifier_start(ch) else ""
        if self._resolve_gap(ch, word):
            # Forced space before an attached keyword; copy the rest verbatim
            self.keyword_span = len(word) - 1
            self._emit(ch)
            self.last_word = word
            return i + 1

        if ch in QUOTES:
            self.out.append(ch)
            self.state = JsState.STRING
            self.quote = ch
            return i + 1

        if not word:
            self._emit(ch)
            # Digits of a number literal never belong to the preceding keyword
            self.last_word = ""
            return i + 1

        self._note_word(word)
        for part in word:
            self._emit(part)
        self.last_word = word
        return i + len(word)

    def _widen_gap(self, gap):
        if gap.value > self.gap.value:
            self.gap = gap

    def _emit(self, ch):
        self.out.append(ch)
        self.last = ch
        if not is_identifier_char(ch):
            self.last_word = ""
        self._track_control(ch)

    def _note_word(self, word):
        if word in CONTROL_KEYWORDS and not (word == "while" and self.last == "}"):
            self.pending_control = True

    def _track_control(self, ch):
        if is_identifier_char(ch):
            return
        self.closed_control = False
        if ch == "(":
            if self.control_depth is not None:
                self.control_depth += 1
            elif self.pending_control:
                self.control_depth = 1
        elif ch == ")" and self.control_depth is not None:
            self.control_depth -= 1
            if self.control_depth == 0:
                self.control_depth = None
                self.closed_control = True
        self.pending_control = False

    def _ends_statement(self):
        last = self.last
        if not last or last == ";":
            return False
        if is_identifier_char(last):
            return self.last_word not in NON_TERMINAL_WORDS
        if last == ")":
            return not self.closed_control
        if last in STATEMENT_END_PUNCTUATION:
            return True
        # Postfix increment/decrement
        tail = "".join(self.out[-2:])
        return tail in ("++", "--")

    def _resolve_gap(self, ch, word):
        """Emit whatever the pending gap requires before ``ch``.

        Returns True when a forced space was emitted ahead of an attached
        keyword such as ``else``.
        """
        gap = self.gap
        self.gap = Gap.NONE
        if gap is Gap.NONE or not self.out:
            return False

        if self.last == "}" and word in ATTACHED_KEYWORDS:
            self.out.append(" ")
            return True

        if (
            gap is Gap.LINEBREAK
            and word not in CONTINUATION_KEYWORDS
            and (is_identifier_start(ch) or ch in STATEMENT_START_PUNCTUATION)
            and self._ends_statement()
        ):
            self.out.append(";")
            self.last = ";"
            self.last_word = ""
            return False

        prev = self.out[-1][-1]
        if is_identifier_char(prev) and is_identifier_char(ch):
            self.out.append(" ")
        elif prev in "+-" and ch == prev:
            self.out.append(" ")
        return False


def minify_js(js, level):
    """Minify a JavaScript fragment. No-op below AGGRESSIVE."""
    if not level.enables(Level.AGGRESSIVE):
        return js
    return JsMinifier(level).minify(js)
