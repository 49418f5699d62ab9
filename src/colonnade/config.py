"""ContextVar-based configuration for parsing and serializing.

Two frozen configs live in ContextVars (PEP 567): ParseConfig is read by the
lexer and compiler, SerializeConfig by the Markdown renderer. Each thread (and
each asyncio task) sees its own values, so no locks are needed.

Usage:
    from colonnade.config import SerializeConfig, serialize_config_context

    with serialize_config_context(SerializeConfig(quote="'")):
        text = serialize(tree)

"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Literal, Self

from colonnade.errors import ConfigError

type Quote = Literal['"', "'"]

_QUOTES = frozenset({'"', "'"})


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        directives_enabled: Recognize :text, ::leaf and :::container directives.
            When False, directive syntax is read as ordinary text.
        source_file: Source path reported in token locations and errors

    """

    directives_enabled: bool = True
    source_file: str | None = None

    @classmethod
    def from_dict(cls, config_dict: dict) -> Self:
        """Create a ParseConfig from a dictionary, ignoring unknown keys.

        Example:
            >>> ParseConfig.from_dict({"directives_enabled": False, "x": 1})
            ParseConfig(directives_enabled=False, source_file=None)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_fields})


@dataclass(frozen=True, slots=True)
class SerializeConfig:
    """Immutable serialization configuration.

    Attributes:
        directives_enabled: Register the directive handlers and escaping rules.
        quote: Quote used around explicit attribute values.

    Raises:
        ConfigError: If ``quote`` is neither ``"`` nor ``'``.

    """

    directives_enabled: bool = True
    quote: Quote = '"'

    def __post_init__(self) -> None:
        if self.quote not in _QUOTES:
            msg = f"Cannot serialize attribute values with quote {self.quote!r}, expected '\"' or \"'\""
            raise ConfigError(msg)

    @classmethod
    def from_dict(cls, config_dict: dict) -> Self:
        """Create a SerializeConfig from a dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_fields})


_DEFAULT_PARSE_CONFIG: ParseConfig = ParseConfig()
_DEFAULT_SERIALIZE_CONFIG: SerializeConfig = SerializeConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "colonnade_parse_config",
    default=_DEFAULT_PARSE_CONFIG,
)
_serialize_config: ContextVar[SerializeConfig] = ContextVar(
    "colonnade_serialize_config",
    default=_DEFAULT_SERIALIZE_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the active parse configuration for this context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set the parse configuration for the current context only."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to the module-level default parse configuration."""
    _parse_config.set(_DEFAULT_PARSE_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Temporarily use ``config``; the previous config is restored on exit.

    Example:
        >>> with parse_config_context(ParseConfig(directives_enabled=False)):
        ...     doc = parse(":a[b]")  # a plain paragraph
    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


def get_serialize_config() -> SerializeConfig:
    """Get the active serialization configuration for this context."""
    return _serialize_config.get()


def set_serialize_config(config: SerializeConfig) -> None:
    """Set the serialization configuration for the current context only."""
    _serialize_config.set(config)


def reset_serialize_config() -> None:
    """Reset to the module-level default serialization configuration."""
    _serialize_config.set(_DEFAULT_SERIALIZE_CONFIG)


@contextmanager
def serialize_config_context(config: SerializeConfig) -> Iterator[None]:
    """Temporarily use ``config`` for serialization."""
    previous = _serialize_config.get()
    _serialize_config.set(config)
    try:
        yield
    finally:
        _serialize_config.set(previous)


__all__ = [
    "ParseConfig",
    "Quote",
    "SerializeConfig",
    "get_parse_config",
    "get_serialize_config",
    "parse_config_context",
    "reset_parse_config",
    "reset_serialize_config",
    "serialize_config_context",
    "set_parse_config",
    "set_serialize_config",
]
