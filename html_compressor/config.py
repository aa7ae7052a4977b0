"""
Compression configuration.

A CompressionConfig is an immutable value handed to each call; nothing here
is process-wide state.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .delegates import DEFAULT_TIMEOUT, Strategy, resolve_bundler_command
from .levels import Level

ENV_DEVELOPMENT = "development"
ENV_STAGING = "staging"
ENV_PRODUCTION = "production"

ENVIRONMENT_VAR = "HTML_COMPRESSOR_ENV"
LEVEL_VAR = "HTML_COMPRESSOR_LEVEL"
GZIP_VAR = "HTML_COMPRESSOR_GZIP"
STRATEGY_VAR = "HTML_COMPRESSOR_STRATEGY"
TIMEOUT_VAR = "HTML_COMPRESSOR_BUNDLER_TIMEOUT"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class CompressionConfig:
    level: Optional[Level] = Level.AGGRESSIVE
    gzip: bool = True
    strategy: Strategy = Strategy.BUNDLER
    bundler_command: Tuple[str, ...] = ()
    bundler_timeout: float = DEFAULT_TIMEOUT

    @property
    def enabled(self):
        return self.level is not None

    @classmethod
    def custom(cls, level, gzip=True):
        return cls(level=Level.parse(level), gzip=gzip)

    @classmethod
    def for_environment(cls, name):
        """Preset for development, staging or production (the default)."""
        name = (name or ENV_PRODUCTION).strip().lower()
        if name == ENV_DEVELOPMENT:
            return cls(level=None, gzip=False)
        if name == ENV_STAGING:
            return cls(level=Level.BASIC, gzip=True)
        return cls(level=Level.AGGRESSIVE, gzip=True)

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        environment = environ.get(ENVIRONMENT_VAR) or environ.get("APP_ENV")
        config = cls.for_environment(environment)

        changes = {"bundler_command": resolve_bundler_command(environ)}
        if environ.get(LEVEL_VAR):
            changes["level"] = _parse_env(LEVEL_VAR, environ[LEVEL_VAR], Level.parse)
        if environ.get(GZIP_VAR):
            changes["gzip"] = _parse_env(GZIP_VAR, environ[GZIP_VAR], _parse_bool)
        if environ.get(STRATEGY_VAR):
            changes["strategy"] = _parse_env(STRATEGY_VAR, environ[STRATEGY_VAR], Strategy.parse)
        if environ.get(TIMEOUT_VAR):
            changes["bundler_timeout"] = _parse_env(TIMEOUT_VAR, environ[TIMEOUT_VAR], _parse_timeout)
        return replace(config, **changes)


def _parse_env(name, value, parser):
    try:
        return parser(value)
    except ValueError as exc:
        raise ValueError(f"{name}: {exc}") from None


def _parse_bool(value):
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _parse_timeout(value):
    timeout = float(value)
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {value!r}")
    return timeout
