"""Bind environment variables to the fields of a configuration record."""

from envconf.errors import (
    EnvconfError,
    InvalidObjectTypeError,
    MissingRequiredFieldError,
    ParseError,
    UnsupportedTypeError,
)
from envconf.kinds import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from envconf.loader import Loader, load
from envconf.models.field import FieldDescriptor
from envconf.processing import process, tags

__all__ = [
    "EnvconfError",
    "FieldDescriptor",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidObjectTypeError",
    "Loader",
    "MissingRequiredFieldError",
    "ParseError",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedTypeError",
    "load",
    "process",
    "tags",
]
