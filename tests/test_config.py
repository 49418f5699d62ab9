"""Tests for ContextVar-based parse and serialize configuration.

Validates thread isolation, context manager behavior, and validation of
serializer options.
"""

from threading import Thread

import pytest

from colonnade import (
    ConfigError,
    ParseConfig,
    SerializeConfig,
    get_parse_config,
    get_serialize_config,
    parse,
    parse_config_context,
    reset_parse_config,
    reset_serialize_config,
    serialize,
    serialize_config_context,
    set_parse_config,
    set_serialize_config,
)
from colonnade.nodes import LeafDirective, Paragraph


class TestParseConfigDataclass:
    """Test ParseConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        config = ParseConfig()
        assert config.directives_enabled is True
        assert config.source_file is None

    def test_immutability(self) -> None:
        config = ParseConfig()
        with pytest.raises(AttributeError):
            config.directives_enabled = False  # type: ignore[misc]

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = ParseConfig.from_dict({"directives_enabled": False, "tables": True})
        assert config == ParseConfig(directives_enabled=False)


class TestSerializeConfigDataclass:
    def test_default_values(self) -> None:
        config = SerializeConfig()
        assert config.directives_enabled is True
        assert config.quote == '"'

    def test_single_quote(self) -> None:
        assert SerializeConfig(quote="'").quote == "'"

    @pytest.mark.parametrize("quote", ["", "`", '""', "«"])
    def test_invalid_quote(self, quote: str) -> None:
        with pytest.raises(ConfigError):
            SerializeConfig(quote=quote)  # type: ignore[arg-type]

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            SerializeConfig(quote="x")  # type: ignore[arg-type]

    def test_from_dict(self) -> None:
        assert SerializeConfig.from_dict({"quote": "'", "other": 1}) == SerializeConfig(quote="'")


class TestParseConfigContext:
    def teardown_method(self) -> None:
        reset_parse_config()

    def test_context_applies_and_restores(self) -> None:
        with parse_config_context(ParseConfig(directives_enabled=False)):
            assert get_parse_config().directives_enabled is False
            assert isinstance(parse("::a").children[0], Paragraph)
        assert get_parse_config().directives_enabled is True
        assert isinstance(parse("::a").children[0], LeafDirective)

    def test_restores_after_exception(self) -> None:
        with pytest.raises(RuntimeError), parse_config_context(ParseConfig(directives_enabled=False)):
            raise RuntimeError
        assert get_parse_config() == ParseConfig()

    def test_set_and_reset(self) -> None:
        set_parse_config(ParseConfig(source_file="a.md"))
        assert parse("x").location.source_file == "a.md"
        reset_parse_config()
        assert get_parse_config() == ParseConfig()

    def test_explicit_argument_wins(self) -> None:
        with parse_config_context(ParseConfig(directives_enabled=False)):
            assert isinstance(parse("::a", directives=True).children[0], LeafDirective)

    def test_thread_isolation(self) -> None:
        seen: list[bool] = []

        def worker() -> None:
            seen.append(get_parse_config().directives_enabled)

        with parse_config_context(ParseConfig(directives_enabled=False)):
            thread = Thread(target=worker)
            thread.start()
            thread.join()

        assert seen == [True]


class TestSerializeConfigContext:
    def teardown_method(self) -> None:
        reset_serialize_config()

    def test_quote_from_context(self) -> None:
        node = LeafDirective(name="a", attributes={"b": "c"})
        with serialize_config_context(SerializeConfig(quote="'")):
            assert serialize(node) == "::a{b='c'}\n"
        assert serialize(node) == '::a{b="c"}\n'

    def test_set_and_reset(self) -> None:
        set_serialize_config(SerializeConfig(quote="'"))
        assert get_serialize_config().quote == "'"
        reset_serialize_config()
        assert get_serialize_config() == SerializeConfig()

    def test_invalid_quote_argument(self) -> None:
        with pytest.raises(ConfigError):
            serialize(LeafDirective(name="a"), quote="`")
