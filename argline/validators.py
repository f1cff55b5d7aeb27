"""
Argline validators: typed checks over option arguments.

A validator is any callable (store_key, option, opt_arg) -> None that raises
OptionArgIsInvalid when opt_arg is not acceptable. The engine runs the
validator of an option's configuration on every user-supplied value before
storing it; defaults and wildcard-accepted options are never validated.

Number kinds
- signed integers:   i8, i16, i32, i64, i128, plus int (unbounded)
- unsigned integers: u8, u16, u32, u64, u128
- floats:            f32, f64

Integers accept [+-]?[0-9]+ (unsigned kinds reject a leading '-') and must fit
the kind's range. Floats accept decimal and exponent notations and the
inf/infinity/nan spellings; magnitudes beyond the kind's range become
infinity instead of failing.
"""
import functools
import math
import re
import struct
from enum import StrEnum

from .faults import OptionArgIsInvalid
from .utils import rename

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(inf|infinity|nan|([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?)", re.IGNORECASE)


class NumberKind(StrEnum):
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    INT = "int"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    F32 = "f32"
    F64 = "f64"

    @property
    def is_float(self):
        return self in (NumberKind.F32, NumberKind.F64)

    @property
    def is_unsigned(self):
        return self.startswith("u")

    @property
    def bounds(self):
        """(lowest, highest) for bounded integer kinds, None otherwise."""
        if self.is_float or self is NumberKind.INT:
            return None
        bits = int(self[1:])
        if self.is_unsigned:
            return 0, 2 ** bits - 1
        return -2 ** (bits - 1), 2 ** (bits - 1) - 1


def _narrow(value):
    # round to the nearest single precision float; overflow saturates to infinity
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def parse_number(kind, text, /):
    """
    parse text as a number of the given kind.

    returns an int or a float; raises ValueError whose message is the short
    reason reported to the user.
    """
    kind = NumberKind(kind)
    if not isinstance(text, str):
        raise TypeError("parse_number() second argument must be a string")

    if kind.is_float:
        if not text:
            raise ValueError("cannot parse float from empty string")
        if not _FLOAT.fullmatch(text):
            raise ValueError("invalid float literal")
        value = float(text)
        return _narrow(value) if kind is NumberKind.F32 else value

    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _INTEGER.fullmatch(text) or (kind.is_unsigned and text.startswith("-")):
        raise ValueError("invalid digit found in string")

    value = int(text)
    if bounds := kind.bounds:
        lowest, highest = bounds
        if value > highest:
            raise ValueError("number too large to fit in target type")
        if value < lowest:
            raise ValueError("number too small to fit in target type")
    return value


def validate_nothing(store_key, option, opt_arg, /):
    """the validator of configurations without a type constraint."""


def validate_number(kind, /):
    """
    return the validator checking that an option argument is a number of kind.

    validators are cached per kind, so validate_number("i8") is validate_i8.
    """
    return _validator(NumberKind(kind))


@functools.cache
def _validator(kind):
    @rename("validate_%s" % kind)
    def validator(store_key, option, opt_arg, /):
        try:
            parse_number(kind, opt_arg)
        except ValueError as exception:
            raise OptionArgIsInvalid(
                option=option,
                store_key=store_key,
                opt_arg=opt_arg,
                details=str(exception),
            ) from None

    return validator


validate_i8 = validate_number(NumberKind.I8)
validate_i16 = validate_number(NumberKind.I16)
validate_i32 = validate_number(NumberKind.I32)
validate_i64 = validate_number(NumberKind.I64)
validate_i128 = validate_number(NumberKind.I128)
validate_int = validate_number(NumberKind.INT)
validate_u8 = validate_number(NumberKind.U8)
validate_u16 = validate_number(NumberKind.U16)
validate_u32 = validate_number(NumberKind.U32)
validate_u64 = validate_number(NumberKind.U64)
validate_u128 = validate_number(NumberKind.U128)
validate_f32 = validate_number(NumberKind.F32)
validate_f64 = validate_number(NumberKind.F64)


__all__ = (
    "NumberKind",
    "parse_number",
    "validate_nothing",
    "validate_number",
    "validate_i8",
    "validate_i16",
    "validate_i32",
    "validate_i64",
    "validate_i128",
    "validate_int",
    "validate_u8",
    "validate_u16",
    "validate_u32",
    "validate_u64",
    "validate_u128",
    "validate_f32",
    "validate_f64",
)
