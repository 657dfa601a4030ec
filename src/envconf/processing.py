"""Extract environment bindings from the fields of a record.

A record is a mutable dataclass or pydantic model instance. Per-field tags
live in the field metadata (``field(metadata=...)`` for dataclasses,
``Field(json_schema_extra=...)`` for pydantic models) and use three string
keys: ``env``, ``default`` and ``required``. Use :func:`tags` to build them.
"""

from __future__ import annotations

import dataclasses
import itertools
import sys
import typing
from typing import Any, Iterator, Mapping, NamedTuple

from pydantic import BaseModel

from envconf.errors import InvalidObjectTypeError
from envconf.kinds import Kind, kind_of
from envconf.models.field import FieldDescriptor

ENV_TAG = "env"
DEFAULT_TAG = "default"
REQUIRED_TAG = "required"


class _RecordField(NamedTuple):
    name: str
    tags: Mapping[str, Any]
    kind: Kind


def tags(
    env: str | None = None,
    default: Any = None,
    required: Any = None,
) -> dict[str, str]:
    """Build field metadata for the given tags.

    Arguments left as ``None`` are omitted. ``default=""`` keeps an explicit
    empty default.
    """
    out: dict[str, str] = {}
    if env is not None:
        out[ENV_TAG] = str(env)
    if default is not None:
        out[DEFAULT_TAG] = str(default)
    if required is not None:
        out[REQUIRED_TAG] = str(required)
    return out


def _char_class(ch: str) -> str:
    if ch.isupper():
        return "upper"
    if ch.isdigit():
        return "digit"
    return "lower"


def _split_case(part: str) -> list[str]:
    runs = ["".join(g) for _, g in itertools.groupby(part, key=_char_class)]
    # An upper-case run followed by a lower-case run gives its last letter to
    # the next word: "HTTPServer" is "HTTP" + "Server".
    for i in range(len(runs) - 1):
        if runs[i][-1:].isupper() and _char_class(runs[i + 1][0]) == "lower":
            runs[i], runs[i + 1] = runs[i][:-1], runs[i][-1] + runs[i + 1]
    return [r for r in runs if r]


def split_words(identifier: str) -> list[str]:
    """Split an identifier on underscores and case/digit transitions.

    >>> split_words("HTTPServerPort8080")
    ['HTTP', 'Server', 'Port', '8080']
    """
    words: list[str] = []
    for part in identifier.split("_"):
        words.extend(_split_case(part))
    return words


def env_name(identifier: str) -> str:
    """Derive the environment variable name for a field identifier."""
    words = split_words(identifier)
    if not words:
        return identifier.upper()
    return "_".join(w.upper() for w in words)


def is_bool(value: str) -> bool:
    """Return True only for "true" or "false", in any case."""
    return value.lower() in ("true", "false")


def is_required(value: str | None) -> bool:
    """Fields are optional unless the required tag is explicitly "true".

    Empty, "false" and malformed values all mean optional.
    """
    if not value or not is_bool(value):
        return False
    return value.lower() == "true"


def validate_obj_type(obj: Any) -> None:
    """Raise InvalidObjectTypeError unless ``obj`` is a mutable record instance."""
    if isinstance(obj, type):
        raise InvalidObjectTypeError(obj)
    if dataclasses.is_dataclass(obj):
        if obj.__dataclass_params__.frozen:
            raise InvalidObjectTypeError(obj)
        return
    if isinstance(obj, BaseModel):
        if type(obj).model_config.get("frozen"):
            raise InvalidObjectTypeError(obj)
        return
    raise InvalidObjectTypeError(obj)


def _resolve_hint(cls: type, annotation: Any) -> Any:
    """Resolve one string annotation, leaving it as a string when it names
    something the defining module cannot see."""
    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    try:
        return typing.get_type_hints(
            type("_Hint", (), {"__annotations__": {"hint": annotation}}),
            globalns=globalns,
            include_extras=True,
        )["hint"]
    except NameError:
        return annotation


def _type_hints(obj: Any) -> dict[str, Any]:
    cls = type(obj)
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError:
        return {f.name: _resolve_hint(cls, f.type) for f in dataclasses.fields(obj)}


def _dataclass_fields(obj: Any) -> Iterator[_RecordField]:
    hints = _type_hints(obj)
    for f in dataclasses.fields(obj):
        # Underscore-prefixed fields are private to the record.
        if f.name.startswith("_"):
            continue
        yield _RecordField(f.name, f.metadata, kind_of(hints.get(f.name, f.type)))


def _model_fields(obj: BaseModel) -> Iterator[_RecordField]:
    for name, info in type(obj).model_fields.items():
        if info.frozen:
            continue
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        yield _RecordField(name, extra, kind_of(info.annotation, info.metadata))


def record_fields(obj: Any) -> list[_RecordField]:
    """Settable fields of a record in declaration order."""
    validate_obj_type(obj)
    if isinstance(obj, BaseModel):
        return list(_model_fields(obj))
    return list(_dataclass_fields(obj))


def field_kind(obj: Any, name: str) -> Kind:
    """Return the kind of the settable field ``name`` of ``obj``."""
    for rf in record_fields(obj):
        if rf.name == name:
            return rf.kind
    raise AttributeError(f"{type(obj).__name__} has no settable field {name!r}")


def _tag(rf: _RecordField, key: str) -> str | None:
    value = rf.tags.get(key)
    return None if value is None else str(value)


def _describe(rf: _RecordField) -> FieldDescriptor:
    env = _tag(rf, ENV_TAG)
    return FieldDescriptor(
        name=rf.name,
        env=env if env else env_name(rf.name),
        default=_tag(rf, DEFAULT_TAG) or "",
        has_default=DEFAULT_TAG in rf.tags,
        required=is_required(_tag(rf, REQUIRED_TAG)),
    )


def process(obj: Any) -> list[FieldDescriptor]:
    """Describe the environment binding of every settable field of ``obj``.

    Raises InvalidObjectTypeError when ``obj`` is not a mutable dataclass or
    pydantic model instance. Neither the record nor the environment is touched.
    """
    return [_describe(rf) for rf in record_fields(obj)]
