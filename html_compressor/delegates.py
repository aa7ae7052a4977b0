"""
JavaScript minification strategies.

The built-in state machine is always available. When a bundling scope is
requested the work can be handed to an external bundler process or to the
minify-html library instead; any failure there falls back to the built-in
minifier and is only logged.
"""

import logging
import os
import re
import shlex
import shutil
import subprocess
import tempfile
from enum import Enum
from pathlib import Path

import minify_html

from .levels import Level
from .minify_js import minify_js
from .vault import PlaceholderVault

_LOGGER = logging.getLogger(__name__)

BUNDLER_ENV = "HTML_COMPRESSOR_BUNDLER"
DEFAULT_BUNDLER = ("npx", "esbuild")
DEFAULT_TIMEOUT = 30.0

INTERPOLATION = re.compile(r"\{\{.*?\}\}", re.DOTALL)
INTERPOLATION_PREFIX = "___JS_PH_"


class Scope(str, Enum):
    SCOPED = "scoped"
    GLOBAL = "global"

    @classmethod
    def parse(cls, value):
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid scope: {value!r} (expected 'scoped' or 'global')") from None


class Strategy(str, Enum):
    BUILTIN = "builtin"
    BUNDLER = "bundler"
    MINIFY_HTML = "minify-html"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid strategy: {value!r} (expected one of {choices})") from None


# esbuild flags per (scope, level). Global code keeps its top-level names.
BUNDLER_PROFILES = {
    (Scope.SCOPED, Level.AGGRESSIVE): ("--minify-whitespace", "--minify-syntax", "--format=iife"),
    (Scope.SCOPED, Level.EXTREME): ("--minify", "--format=iife"),
    (Scope.GLOBAL, Level.AGGRESSIVE): ("--minify-whitespace", "--minify-syntax"),
    (Scope.GLOBAL, Level.EXTREME): ("--minify-whitespace", "--minify-syntax", "--legal-comments=none"),
}


class DelegationError(RuntimeError):
    pass


def resolve_bundler_command(environ=None):
    """Bundler argv prefix, taken from $HTML_COMPRESSOR_BUNDLER if set."""
    environ = os.environ if environ is None else environ
    override = environ.get(BUNDLER_ENV, "").strip()
    if override:
        return tuple(shlex.split(override))
    return DEFAULT_BUNDLER


class BuiltinMinifier:
    name = "builtin"

    def available(self):
        return True

    def minify(self, js, level):
        return minify_js(js, level)


class ExternalBundler:
    """Runs an esbuild-compatible bundler on a temporary file."""

    name = "bundler"

    def __init__(self, scope=Scope.SCOPED, command=None, timeout=DEFAULT_TIMEOUT):
        self.scope = Scope.parse(scope)
        self.command = tuple(command) if command else resolve_bundler_command()
        self.timeout = timeout

    def available(self):
        return shutil.which(self.command[0]) is not None

    def argv(self, source, target, level):
        flags = BUNDLER_PROFILES[(self.scope, level)]
        return [*self.command, str(source), f"--outfile={target}", *flags]

    def minify(self, js, level):
        with tempfile.TemporaryDirectory(prefix="html-compressor-") as workdir:
            source = Path(workdir) / "input.js"
            target = Path(workdir) / "output.js"
            source.write_text(js, encoding="utf-8")

            try:
                result = subprocess.run(
                    self.argv(source, target, level),
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                raise DelegationError(f"bundler timed out after {self.timeout}s") from exc
            except OSError as exc:
                raise DelegationError(f"bundler could not be started: {exc}") from exc

            if result.returncode != 0:
                raise DelegationError(
                    f"bundler exited with status {result.returncode}: {result.stderr.strip()}"
                )

            try:
                return target.read_text(encoding="utf-8").rstrip("\n")
            except OSError as exc:
                raise DelegationError(f"bundler output unreadable: {exc}") from exc


class MinifyHtmlLibrary:
    """Minifies JS through minify-html by wrapping it in a <script> element."""

    name = "minify-html"
    prefix = "<script>"
    suffix = "</script>"

    def available(self):
        return True

    def minify(self, js, level):
        wrapped = f"{self.prefix}{js}{self.suffix}"
        try:
            minified = minify_html.minify(
                wrapped,
                minify_js=True,
                keep_closing_tags=True,
                keep_html_and_head_opening_tags=True,
            )
        except Exception as exc:
            raise DelegationError(f"minify-html failed: {exc}") from exc

        if minified.startswith(self.prefix) and minified.endswith(self.suffix):
            return minified[len(self.prefix):-len(self.suffix)]
        raise DelegationError("minify-html returned an unexpected wrapper")


class DelegatingJsMinifier:
    """Callable with the same signature as ``minify_js``.

    Interpolation markers ({{ ... }}) are vaulted before the delegate runs
    and must all come back; otherwise the built-in minifier is used.
    """

    def __init__(self, delegate, fallback=None):
        self.delegate = delegate
        self.fallback = fallback or BuiltinMinifier()

    def __call__(self, js, level):
        if not level.enables(Level.AGGRESSIVE):
            return js

        if not self.delegate.available():
            _LOGGER.info("%s not available, using %s minifier", self.delegate.name, self.fallback.name)
            return self.fallback.minify(js, level)

        vault = PlaceholderVault(prefix=INTERPOLATION_PREFIX, source=js)
        protected = INTERPOLATION.sub(lambda match: vault.protect(match.group()), js)

        try:
            minified = self.delegate.minify(protected, level)
            missing = vault.missing_tokens(minified)
            if missing:
                raise DelegationError(f"interpolation markers lost: {', '.join(missing)}")
        except DelegationError as exc:
            _LOGGER.warning("%s failed, using %s minifier: %s", self.delegate.name, self.fallback.name, exc)
            return self.fallback.minify(js, level)

        return vault.restore_all(minified)


def js_minifier_for(scope=None, strategy=Strategy.BUNDLER, command=None, timeout=DEFAULT_TIMEOUT):
    """Pick the JS minifier callable for a call.

    Without a scope (or with the builtin strategy) this is plain ``minify_js``.
    """
    scope = Scope.parse(scope)
    strategy = Strategy.parse(strategy)
    if scope is None or strategy is Strategy.BUILTIN:
        return minify_js
    if strategy is Strategy.MINIFY_HTML:
        return DelegatingJsMinifier(MinifyHtmlLibrary())
    return DelegatingJsMinifier(ExternalBundler(scope, command=command, timeout=timeout))
