"""
Placeholder vault.

Protects substrings that must survive a rewrite untouched (quoted strings,
``url(...)`` constructs, interpolation markers). Each protected substring is
swapped for an opaque token; ``restore_all`` puts the originals back.
"""

import re


class PlaceholderVault:
    """Ordered (token, original) table for one minification pass.

    Tokens are ``<prefix><index><suffix>``. If the source text already contains
    the prefix, the prefix is lengthened until it does not, so a token can never
    collide with source content.
    """

    def __init__(self, prefix="___PH_", suffix="___", source=""):
        while prefix in source:
            prefix = prefix[:-1] + "X_"
        self.prefix = prefix
        self.suffix = suffix
        self._originals = []
        self._pattern = re.compile(re.escape(prefix) + r"(\d+)" + re.escape(suffix))

    def __len__(self):
        return len(self._originals)

    def token(self, index):
        return f"{self.prefix}{index}{self.suffix}"

    @property
    def tokens(self):
        return [self.token(i) for i in range(len(self._originals))]

    def protect(self, text):
        """Record ``text`` and return the token standing in for it."""
        token = self.token(len(self._originals))
        self._originals.append(text)
        return token

    def missing_tokens(self, text):
        """Tokens issued by this vault that do not occur in ``text``."""
        return [token for token in self.tokens if token not in text]

    def restore_all(self, text):
        """Replace every issued token in ``text`` with its original.

        This is one forward scan: restored content is never re-scanned, so an
        original that happens to look like a token is emitted verbatim.
        """
        if not self._originals:
            return text

        def _restore(match):
            index = int(match.group(1))
            if index < len(self._originals):
                return self._originals[index]
            return match.group(0)

        return self._pattern.sub(_restore, text)
