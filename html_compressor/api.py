"""
Library entry point.

``compress`` never raises: invalid input or an internal failure yields None.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .config import CompressionConfig
from .delegates import Scope, js_minifier_for
from .gzip_html import gzip_text
from .html_scanner import minify_html
from .levels import resolve_level
from .minify_css import minify_css

_LOGGER = logging.getLogger(__name__)


class ContentType(str, Enum):
    HTML = "HTML"
    CSS = "CSS"
    JS = "JS"

    @classmethod
    def parse(cls, value):
        if value is None:
            return cls.HTML
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid content type: {value!r} (expected HTML, CSS or JS)") from None


@dataclass(frozen=True)
class CompressResult:
    text: str
    length: int


def minify(content, level, content_type=ContentType.HTML, scope=None, config=None):
    """Minify ``content``; raises ValueError for invalid arguments.

    ``level`` may be None (pass through) or "auto".
    """
    content_type = ContentType.parse(content_type)
    scope = Scope.parse(scope)
    if level is None:
        return content
    level = resolve_level(level, content)
    config = config or CompressionConfig()

    if content_type is ContentType.CSS:
        return minify_css(content, level)

    js_minifier = js_minifier_for(
        scope,
        strategy=config.strategy,
        command=config.bundler_command or None,
        timeout=config.bundler_timeout,
    )
    if content_type is ContentType.JS:
        return js_minifier(content, level)
    return minify_html(content, level, js_minifier=js_minifier)


def compress(content, level, content_type=ContentType.HTML, scope=None, config=None):
    """Return CompressResult(text, length) or None on any failure."""
    if not isinstance(content, str):
        return None
    try:
        text = minify(content, level, content_type, scope, config)
    except ValueError as exc:
        _LOGGER.warning("Rejected compression request: %s", exc)
        return None
    except Exception:
        _LOGGER.exception("Compression failed")
        return None
    return CompressResult(text, len(text.encode("utf-8")))


def compress_bytes(content, config=None, content_type=ContentType.HTML, scope=None):
    """Encoded payload for ``content`` using ``config`` (gzip when enabled)."""
    config = config or CompressionConfig.from_env()
    result = compress(content, config.level, content_type, scope, config)
    if result is None:
        return None
    if config.gzip:
        return gzip_text(result.text)
    return result.text.encode("utf-8")
