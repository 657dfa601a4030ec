"""Exceptions raised while binding environment variables to a record."""

from __future__ import annotations

from typing import Any


class EnvconfError(Exception):
    """Base class for every error raised by envconf."""


class InvalidObjectTypeError(EnvconfError, TypeError):
    """The object passed to the loader is not a mutable record instance."""

    def __init__(self, obj: Any) -> None:
        self.obj_type = type(obj)
        super().__init__(
            f"invalid object type: expected a mutable dataclass or pydantic model "
            f"instance, got {self.obj_type.__name__}"
        )


class MissingRequiredFieldError(EnvconfError):
    """A required field has neither an environment value nor a default."""

    def __init__(self, field: str, env: str) -> None:
        self.field = field
        self.env = env
        super().__init__(f"required field {field!r} is missing (env {env} is not set)")


class UnsupportedTypeError(EnvconfError, TypeError):
    """The field's declared type has no coercion rule."""

    def __init__(self, field: str, annotation: Any) -> None:
        self.field = field
        self.annotation = annotation
        super().__init__(f"unsupported type {annotation!r} for field {field!r}")


class ParseError(EnvconfError, ValueError):
    """The environment text could not be converted to the field's type."""

    def __init__(self, field: str, env: str, value: str, kind: Any, reason: str) -> None:
        self.field = field
        self.env = env
        self.value = value
        self.kind = kind
        super().__init__(
            f"cannot parse {value!r} from env {env} into field {field!r} ({kind}): {reason}"
        )
