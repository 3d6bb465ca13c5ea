# tmcl_modules/codec.py
"""
Byte codec primitives.

Every TMCL instruction and reply carries a 4-byte, big-endian operand. The
codecs here map native values (integers of various widths, booleans and
closed enumerations) to and from that field.
"""
from enum import IntEnum
from typing import Any, Dict, Optional, Type

import struct

from .constants import OPERAND_LENGTH
from .exceptions import InvalidEnumerationError
from .exceptions import OperandDecodeError
from .exceptions import ParameterError


def check_operand(operand: bytes) -> bytes:
    """Returns ``operand`` as bytes, raising if it is not exactly 4 bytes long."""
    operand = bytes(operand)
    if len(operand) != OPERAND_LENGTH:
        raise OperandDecodeError(
            f"Operand must be {OPERAND_LENGTH} bytes, got {len(operand)}: {operand.hex()}"
        )
    return operand


class Codec:
    """Maps a native value to the 4-byte operand field and back."""

    name = "codec"

    def validate(self, value: Any) -> Any:
        """Returns ``value`` if this codec can encode it, else raises ParameterError."""
        return value

    def encode(self, value: Any) -> bytes:
        raise NotImplementedError

    def decode(self, operand: bytes) -> Any:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class IntegerCodec(Codec):
    """
    Signed (two's-complement) or unsigned integer, right-aligned in the
    big-endian operand.

    Decoding reads the whole 32-bit field, so narrower signed values arrive
    sign-extended and narrower unsigned values zero-extended; anything outside
    the native range is rejected rather than truncated.
    """

    def __init__(
        self,
        bits: int,
        signed: bool,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ):
        if bits not in (8, 16, 32):
            raise ValueError(f"Unsupported integer width: {bits}")
        self.bits = bits
        self.signed = signed
        if signed:
            native_min, native_max = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            native_min, native_max = 0, (1 << bits) - 1
        self.native_min = native_min
        self.native_max = native_max
        self.minimum = native_min if minimum is None else minimum
        self.maximum = native_max if maximum is None else maximum
        if not (native_min <= self.minimum <= self.maximum <= native_max):
            raise ValueError(
                f"Bounds {self.minimum}..{self.maximum} outside {bits}-bit range"
            )
        self.name = f"{'int' if signed else 'uint'}{bits}"
        self._format = ">i" if signed else ">I"

    def validate(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParameterError(f"{self.name} value must be an integer, got {value!r}.")
        if not (self.minimum <= value <= self.maximum):
            raise ParameterError(
                f"Value {value} is out of range {self.minimum}..{self.maximum} for {self.name}."
            )
        return value

    def encode(self, value: int) -> bytes:
        return struct.pack(self._format, self.validate(value))

    def decode(self, operand: bytes) -> int:
        value = struct.unpack(self._format, check_operand(operand))[0]
        if not (self.native_min <= value <= self.native_max):
            raise OperandDecodeError(
                f"Operand {bytes(operand).hex()} does not fit {self.name}."
            )
        return value


class BooleanCodec(Codec):
    """Boolean flag stored as 0 or 1 in the low byte."""

    name = "bool"

    def validate(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ParameterError(f"bool value expected, got {value!r}.")
        return value

    def encode(self, value: bool) -> bytes:
        return struct.pack(">I", 1 if self.validate(value) else 0)

    def decode(self, operand: bytes) -> bool:
        value = struct.unpack(">I", check_operand(operand))[0]
        if value not in (0, 1):
            raise OperandDecodeError(
                f"Operand {bytes(operand).hex()} is not a boolean (0 or 1)."
            )
        return value == 1


class EnumCodec(Codec):
    """Closed enumeration with an explicit value table."""

    def __init__(self, enum_cls: Type[IntEnum]):
        self.enum_cls = enum_cls
        self.name = enum_cls.__name__
        self._table: Dict[int, IntEnum] = {int(member): member for member in enum_cls}

    def validate(self, value: Any) -> IntEnum:
        if not isinstance(value, self.enum_cls):
            raise ParameterError(f"{self.name} member expected, got {value!r}.")
        return value

    def encode(self, value: IntEnum) -> bytes:
        return struct.pack(">I", int(self.validate(value)))

    def decode(self, operand: bytes) -> IntEnum:
        value = struct.unpack(">I", check_operand(operand))[0]
        try:
            return self._table[value]
        except KeyError:
            raise InvalidEnumerationError(
                f"Value {value} is not a valid {self.name}."
            ) from None


class RawCodec(Codec):
    """The operand bytes, untouched."""

    name = "raw"

    def validate(self, value: Any) -> bytes:
        try:
            return check_operand(value)
        except (OperandDecodeError, TypeError) as e:
            raise ParameterError(f"Raw operand must be {OPERAND_LENGTH} bytes: {e}") from e

    def encode(self, value: bytes) -> bytes:
        return self.validate(value)

    def decode(self, operand: bytes) -> bytes:
        return check_operand(operand)


INT8 = IntegerCodec(8, signed=True)
UINT8 = IntegerCodec(8, signed=False)
INT16 = IntegerCodec(16, signed=True)
UINT16 = IntegerCodec(16, signed=False)
INT32 = IntegerCodec(32, signed=True)
UINT32 = IntegerCodec(32, signed=False)
BOOLEAN = BooleanCodec()
RAW = RawCodec()

ZERO_OPERAND = bytes(OPERAND_LENGTH)
