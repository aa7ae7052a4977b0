"""HTML compressor with embedded CSS and JavaScript minification."""

from .api import CompressResult, ContentType, compress, compress_bytes, minify
from .config import CompressionConfig
from .delegates import Scope, Strategy
from .html_scanner import minify_html
from .levels import Level, detect_level
from .minify_css import minify_css
from .minify_js import minify_js

__version__ = "1.0.0"

__all__ = [
    "CompressResult",
    "CompressionConfig",
    "ContentType",
    "Level",
    "Scope",
    "Strategy",
    "compress",
    "compress_bytes",
    "detect_level",
    "minify",
    "minify_css",
    "minify_html",
    "minify_js",
]
