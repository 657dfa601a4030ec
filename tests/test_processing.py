"""Tests for field extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

import pytest
from pydantic import BaseModel, ConfigDict, Field

from envconf import FieldDescriptor, Int8, InvalidObjectTypeError, process, tags
from envconf.kinds import Bool, SignedInt, Text, Unsupported
from envconf.processing import (
    env_name,
    field_kind,
    is_bool,
    is_required,
    split_words,
)


@dataclass
class Config:
    debug: bool = field(default=False, metadata=tags(env="DEBUG", default="true"))
    host: str = field(default="", metadata=tags(env="HOST"))
    port: int = 0


@dataclass(frozen=True)
class FrozenConfig:
    host: str = ""


class ModelConfig(BaseModel):
    debug: bool = Field(default=False, json_schema_extra=tags(env="DEBUG", default="true"))
    host: str = Field(default="", json_schema_extra=tags(env="HOST"))
    port: int = 0


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = ""


class Point(NamedTuple):
    x: int
    y: int


# ---------------------------------------------------------------------------
# Name derivation
# ---------------------------------------------------------------------------


class TestSplitWords:
    @pytest.mark.parametrize("identifier,expected", [
        ("SecretKey", ["Secret", "Key"]),
        ("secret_key", ["secret", "key"]),
        ("secretKey", ["secret", "Key"]),
        ("HTTPServer", ["HTTP", "Server"]),
        ("Port8080", ["Port", "8080"]),
        ("ID", ["ID"]),
        ("host", ["host"]),
        ("CaféPort", ["Café", "Port"]),
        ("naïve", ["naïve"]),
    ])
    def test_split(self, identifier: str, expected: list[str]) -> None:
        assert split_words(identifier) == expected


class TestEnvName:
    @pytest.mark.parametrize("identifier,expected", [
        ("SecretKey", "SECRET_KEY"),
        ("secret_key", "SECRET_KEY"),
        ("secretKey", "SECRET_KEY"),
        ("Host", "HOST"),
        ("max_workers", "MAX_WORKERS"),
        ("HTTPServer", "HTTP_SERVER"),
        ("Port8080", "PORT_8080"),
        ("café_port", "CAFÉ_PORT"),
        ("naïve", "NAÏVE"),
    ])
    def test_derived(self, identifier: str, expected: str) -> None:
        assert env_name(identifier) == expected


# ---------------------------------------------------------------------------
# Tag parsing
# ---------------------------------------------------------------------------


class TestIsRequired:
    @pytest.mark.parametrize("value", ["true", "TRUE", "True"])
    def test_explicit_true(self, value: str) -> None:
        assert is_required(value) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", "invalid", "1", "yes", "", None])
    def test_everything_else_is_optional(self, value: str | None) -> None:
        assert is_required(value) is False

    def test_is_bool(self) -> None:
        assert is_bool("True")
        assert is_bool("false")
        assert not is_bool("1")
        assert not is_bool("t")


class TestTags:
    def test_omits_none(self) -> None:
        assert tags() == {}
        assert tags(env="HOST") == {"env": "HOST"}

    def test_keeps_empty_default(self) -> None:
        assert tags(default="") == {"default": ""}

    def test_stringifies_values(self) -> None:
        assert tags(default=8080, required=True) == {"default": "8080", "required": "True"}


# ---------------------------------------------------------------------------
# process()
# ---------------------------------------------------------------------------


class TestProcessDataclass:
    def test_descriptors_in_declaration_order(self) -> None:
        assert process(Config()) == [
            FieldDescriptor(name="debug", env="DEBUG", default="true", has_default=True),
            FieldDescriptor(name="host", env="HOST"),
            FieldDescriptor(name="port", env="PORT"),
        ]

    def test_env_tag_overrides_field_name(self) -> None:
        @dataclass
        class Conf:
            secret_key: str = ""
            host: str = field(default="", metadata=tags(env="HOST"))
            port: int = field(default=0, metadata=tags(env="APP_PORT"))
            debug: bool = False

        assert [fi.env for fi in process(Conf())] == ["SECRET_KEY", "HOST", "APP_PORT", "DEBUG"]

    def test_empty_env_tag_falls_back_to_derived_name(self) -> None:
        @dataclass
        class Conf:
            max_workers: int = field(default=0, metadata={"env": ""})

        assert process(Conf())[0].env == "MAX_WORKERS"

    def test_defaults(self) -> None:
        @dataclass
        class Conf:
            secret_key: str = ""
            host: str = field(default="", metadata=tags(default="localhost"))
            app_name: str = field(default="", metadata=tags(default=""))
            debug: bool = field(default=False, metadata=tags(default="true"))

        got = {fi.name: (fi.default, fi.has_default) for fi in process(Conf())}
        assert got == {
            "secret_key": ("", False),
            "host": ("localhost", True),
            "app_name": ("", True),
            "debug": ("true", True),
        }

    def test_required(self) -> None:
        @dataclass
        class Conf:
            secret_key: str = field(default="", metadata=tags(required="true"))
            host: str = field(default="", metadata=tags(required="false"))
            port: int = field(default=0, metadata=tags(required="invalid"))
            debug: bool = False
            token: str = field(default="", metadata={"required": True})

        got = {fi.name: fi.required for fi in process(Conf())}
        assert got == {
            "secret_key": True,
            "host": False,
            "port": False,
            "debug": False,
            "token": True,
        }

    def test_private_fields_are_skipped(self) -> None:
        @dataclass
        class Conf:
            host: str = ""
            _token: str = ""

        assert [fi.name for fi in process(Conf())] == ["host"]

    def test_does_not_mutate_record(self) -> None:
        conf = Config(host="example.org", port=1)
        process(conf)
        assert conf == Config(host="example.org", port=1)


class TestProcessModel:
    def test_descriptors_match_dataclass(self) -> None:
        assert process(ModelConfig()) == process(Config())

    def test_frozen_fields_are_skipped(self) -> None:
        class Conf(BaseModel):
            host: str = ""
            build_id: str = Field(default="", frozen=True)

        assert [fi.name for fi in process(Conf())] == ["host"]


class TestInvalidObjectType:
    @pytest.mark.parametrize("obj", [
        "string",
        1337,
        None,
        Config,
        ModelConfig,
        [Config(), Config()],
        {"host": "localhost"},
        FrozenConfig(),
        FrozenModel(),
        Point(1, 2),
    ], ids=[
        "string", "integer", "none", "dataclass-type", "model-type", "list",
        "dict", "frozen-dataclass", "frozen-model", "namedtuple",
    ])
    def test_rejected(self, obj: object) -> None:
        with pytest.raises(InvalidObjectTypeError):
            process(obj)

    def test_is_a_type_error(self) -> None:
        with pytest.raises(TypeError, match="invalid object type"):
            process(42)


class TestFieldKind:
    def test_kinds_from_annotations(self) -> None:
        conf = Config()
        assert field_kind(conf, "debug") == Bool()
        assert field_kind(conf, "host") == Text()
        assert field_kind(conf, "port") == SignedInt(64)

    def test_unsupported(self) -> None:
        @dataclass
        class Conf:
            hosts: list[str] = field(default_factory=list)

        assert field_kind(Conf(), "hosts") == Unsupported(list[str])

    def test_unknown_field(self) -> None:
        with pytest.raises(AttributeError):
            field_kind(Config(), "missing")

    def test_unresolvable_annotation_is_unsupported(self) -> None:
        class Local:
            pass

        @dataclass
        class Conf:
            host: str = ""
            thing: Local | None = None
            procs: Int8 = 0

        conf = Conf()
        assert field_kind(conf, "host") == Text()
        assert field_kind(conf, "thing") == Unsupported("Local | None")
        assert field_kind(conf, "procs") == SignedInt(8)
        assert [fi.env for fi in process(conf)] == ["HOST", "THING", "PROCS"]
