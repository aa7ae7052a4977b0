"""
Compression levels.

Levels are totally ordered: every transformation enabled at a level stays
enabled at all higher levels.
"""

from enum import IntEnum


class Level(IntEnum):
    BASIC = 1
    AGGRESSIVE = 2
    EXTREME = 3

    def enables(self, minimum):
        """True if a feature requiring ``minimum`` runs at this level."""
        return self >= minimum

    @classmethod
    def parse(cls, value):
        """Accept a Level, an int 1-3 or a name/number string."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid compression level: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Compressor level must be between 1 and 3, got {value}") from None
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls.parse(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                pass
        raise ValueError(f"Invalid compression level: {value!r}")


AUTO = "auto"

# Size thresholds (bytes) used by detect_level
_BASIC_LIMIT = 1024
_AGGRESSIVE_LIMIT = 10 * 1024


def detect_level(content):
    """Recommend a level from the encoded size of ``content``."""
    size = len(content.encode("utf-8"))
    if size < _BASIC_LIMIT:
        return Level.BASIC
    if size < _AGGRESSIVE_LIMIT:
        return Level.AGGRESSIVE
    return Level.EXTREME


def resolve_level(value, content):
    """Parse ``value``, resolving ``"auto"`` against ``content``."""
    if isinstance(value, str) and value.strip().lower() == AUTO:
        return detect_level(content)
    return Level.parse(value)
