"""
Attribute optimization for a single tag, from "<" to ">".
"""

from .levels import Level

# Whitespace before these characters is dropped rather than collapsed
_ABSORBS_SPACE_BEFORE = ">=\"'"

# A value containing any of these keeps its quotes
_UNSAFE_UNQUOTED = frozenset("<>=\"'`")


def collapse_whitespace(tag):
    """Collapse whitespace runs inside a tag to one space."""
    out = []
    pending = False
    for ch in tag:
        if ch.isspace():
            pending = True
            continue
        if pending and ch not in _ABSORBS_SPACE_BEFORE:
            out.append(" ")
        out.append(ch)
        pending = False
    return "".join(out)


def can_unquote(value):
    if not value:
        return False
    return not any(ch.isspace() or ch in _UNSAFE_UNQUOTED for ch in value)


def unquote_values(tag):
    """Drop empty ="" values and quotes that are safe to remove."""
    out = []
    i = 0
    n = len(tag)
    while i < n:
        ch = tag[i]
        quote = tag[i + 1] if i + 1 < n else ""

        if ch != "=" or quote not in ("\"", "'"):
            out.append(ch)
            i += 1
            continue

        # Empty value: drop ="" entirely
        if i + 2 < n and tag[i + 2] == quote:
            i += 3
            continue

        end = tag.find(quote, i + 2)
        if end == -1:
            out.append(ch)
            i += 1
            continue

        value = tag[i + 2:end]
        followed_by_slash = end + 1 < n and tag[end + 1] == "/"
        if can_unquote(value) and not followed_by_slash:
            out.append("=" + value)
        else:
            out.append(tag[i:end + 1])
        i = end + 1

    return "".join(out)


def optimize_attributes(tag, level):
    """Optimize the raw text of one tag. No-op below AGGRESSIVE."""
    if not level.enables(Level.AGGRESSIVE):
        return tag

    tag = collapse_whitespace(tag)
    if level.enables(Level.EXTREME):
        tag = unquote_values(tag)
    return tag
