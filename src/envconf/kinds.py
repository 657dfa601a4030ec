"""Field kinds and text coercion.

Every field type maps onto one variant of a closed set: ``Text``,
``SignedInt``, ``UnsignedInt``, ``Float``, ``Bool`` or ``Unsupported``.
Plain ``str``/``int``/``float``/``bool`` annotations select the obvious
variant; sized integers and floats are declared with the ``Annotated``
aliases below (``Int8``, ``UInt16``, ``Float32``...).
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Iterable, Union, get_args, get_origin

from envconf.errors import UnsupportedTypeError


@dataclass(frozen=True)
class Text:
    """Plain string, assigned unchanged."""


@dataclass(frozen=True)
class SignedInt:
    bits: int = 64


@dataclass(frozen=True)
class UnsignedInt:
    bits: int = 64


@dataclass(frozen=True)
class Float:
    bits: int = 64


@dataclass(frozen=True)
class Bool:
    """Boolean parsed from true/false, t/f or 1/0 (any case)."""


@dataclass(frozen=True)
class Unsupported:
    annotation: Any = None


Kind = Union[Text, SignedInt, UnsignedInt, Float, Bool, Unsupported]
_KIND_TYPES = (Text, SignedInt, UnsignedInt, Float, Bool, Unsupported)

Int8 = Annotated[int, SignedInt(8)]
Int16 = Annotated[int, SignedInt(16)]
Int32 = Annotated[int, SignedInt(32)]
Int64 = Annotated[int, SignedInt(64)]
UInt = Annotated[int, UnsignedInt(64)]
UInt8 = Annotated[int, UnsignedInt(8)]
UInt16 = Annotated[int, UnsignedInt(16)]
UInt32 = Annotated[int, UnsignedInt(32)]
UInt64 = Annotated[int, UnsignedInt(64)]
Float32 = Annotated[float, Float(32)]
Float64 = Annotated[float, Float(64)]

# Optional sign, then a decimal, 0x/0o/0b-prefixed or legacy 0-prefixed octal literal.
_INT_RE = re.compile(
    r"[+-]?(?:0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+|[0-9][0-9_]*)"
)

_TRUE_VALUES = frozenset({"true", "1", "t"})
_FALSE_VALUES = frozenset({"false", "0", "f"})


def kind_of(annotation: Any, metadata: Iterable[Any] = ()) -> Kind:
    """Select the kind for a field annotation.

    ``metadata`` holds extra ``Annotated`` arguments that were already
    stripped from the annotation (pydantic keeps them in ``FieldInfo.metadata``).
    """
    extras = list(metadata)
    if get_origin(annotation) is Annotated:
        annotation, *annotated = get_args(annotation)
        extras = annotated + extras

    for extra in extras:
        if isinstance(extra, _KIND_TYPES):
            return extra

    if annotation is bool:
        return Bool()
    if annotation is str:
        return Text()
    if annotation is int:
        return SignedInt(64)
    if annotation is float:
        return Float(64)
    return Unsupported(annotation)


def _parse_int(text: str, signed: bool, bits: int) -> int:
    if not text:
        return 0
    if not _INT_RE.fullmatch(text):
        raise ValueError("invalid syntax")

    sign, body = 1, text
    if body[0] in "+-":
        if not signed:
            raise ValueError("sign not allowed for unsigned value")
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if len(body) > 1 and body[0] == "0" and body[1].isdigit():
        value = sign * int(body, 8)
    else:
        value = sign * int(body, 0)

    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        raise ValueError(f"value out of range [{low}, {high}]")
    return value


def _coerce_text(kind: Text, text: str) -> str:
    return text


def _coerce_signed(kind: SignedInt, text: str) -> int:
    return _parse_int(text, True, kind.bits)


def _coerce_unsigned(kind: UnsignedInt, text: str) -> int:
    return _parse_int(text, False, kind.bits)


def _coerce_float(kind: Float, text: str) -> float:
    if not text:
        return 0.0
    if not text.isascii() or text != text.strip() or "_" in text:
        raise ValueError("invalid syntax")

    value = float(text)
    if math.isinf(value) and text.lstrip("+-").lower() not in ("inf", "infinity"):
        raise ValueError("value out of range")
    if kind.bits == 32 and math.isfinite(value):
        # Standard-size format; native "f" does not range-check.
        try:
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError:
            raise ValueError("value out of range for float32") from None
    return value


def _coerce_bool(kind: Bool, text: str) -> bool:
    lowered = text.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError("invalid syntax")


_COERCERS: dict[type, Callable[[Any, str], Any]] = {
    Text: _coerce_text,
    SignedInt: _coerce_signed,
    UnsignedInt: _coerce_unsigned,
    Float: _coerce_float,
    Bool: _coerce_bool,
}

_ZERO_VALUES: dict[type, Any] = {
    Text: "",
    SignedInt: 0,
    UnsignedInt: 0,
    Float: 0.0,
    Bool: False,
}


def coerce(kind: Kind, text: str, field: str = "") -> Any:
    """Convert ``text`` into a value of ``kind``.

    Raises ValueError for malformed or out-of-range text and
    UnsupportedTypeError for the Unsupported kind (the text is not inspected).
    """
    if isinstance(kind, Unsupported):
        raise UnsupportedTypeError(field, kind.annotation)
    return _COERCERS[type(kind)](kind, text)


def zero_value(kind: Kind, field: str = "") -> Any:
    if isinstance(kind, Unsupported):
        raise UnsupportedTypeError(field, kind.annotation)
    return _ZERO_VALUES[type(kind)]
