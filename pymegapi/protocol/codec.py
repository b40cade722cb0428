"""Conversion between typed values and their little-endian wire representation.

Response frames tag their value with a `TypeTag`. Integers are two's complement, floats are
IEEE-754 binary32, all little-endian. Encoding never fails on magnitude: integers wrap around and
floats too large for binary32 become infinite. Infinite and NaN values encode as 0
in the integer formats.
"""

import enum
import math
import struct
from typing import Optional, Union

from pymegapi.io.binary import Reader, Writer
from pymegapi.protocol.errors import MalformedValueError, UnsupportedTypeTagError

Value = Union[int, float, str]


class TypeTag(enum.IntEnum):
  BYTE = 1
  FLOAT = 2
  SHORT = 3
  STRING = 4
  DOUBLE = 5  # sent by some firmware versions, never decoded
  LONG = 6
  ACK = 10


_VALUE_SIZES = {
  TypeTag.BYTE: 1,
  TypeTag.FLOAT: 4,
  TypeTag.SHORT: 2,
  TypeTag.LONG: 4,
  TypeTag.ACK: 0,
}


def value_size(type_tag: int) -> Optional[int]:
  """ Number of value bytes for a type tag, `None` for variable length strings.

  Raises:
    UnsupportedTypeTagError: for tags without a decoder, including `TypeTag.DOUBLE`.
  """

  if type_tag == TypeTag.STRING:
    return None
  try:
    return _VALUE_SIZES[TypeTag(type_tag)]
  except (ValueError, KeyError) as e:
    raise UnsupportedTypeTagError(type_tag) from e


def _reader(data: bytes, size: int, kind: str) -> Reader:
  if len(data) < size:
    raise MalformedValueError(f"{kind} needs {size} bytes, got {len(data)}: {bytes(data).hex(' ')}")
  return Reader(bytes(data[:size]))


def _wrap(value: Union[int, float], bits: int) -> int:
  if isinstance(value, float) and not math.isfinite(value):
    return 0
  value = int(value) & ((1 << bits) - 1)
  if value >= 1 << (bits - 1):
    value -= 1 << bits
  return value


def decode_byte(data: bytes) -> int:
  return _reader(data, 1, "byte").u8()


def decode_short(data: bytes) -> int:
  return _reader(data, 2, "short").i16()


def decode_float(data: bytes) -> float:
  return _reader(data, 4, "float").f32()


def decode_long(data: bytes) -> int:
  return _reader(data, 4, "long").i32()


def decode_string(data: bytes, offset: int = 0) -> str:
  """ Decode `data[offset:]` as UTF-8. The frame boundary delimits the string. """
  if offset > len(data):
    raise MalformedValueError(f"string starts at offset {offset}, got {len(data)} bytes")
  reader = Reader(bytes(data))
  reader.skip(offset)
  return reader.string()


def encode_byte(value: int) -> bytes:
  return Writer().u8(_wrap(value, 8) & 0xFF).finish()


def encode_short(value: Union[int, float]) -> bytes:
  return Writer().i16(_wrap(value, 16)).finish()


def encode_long(value: Union[int, float]) -> bytes:
  return Writer().i32(_wrap(value, 32)).finish()


def encode_float(value: float) -> bytes:
  try:
    return Writer().f32(value).finish()
  except OverflowError:
    # rounds to infinity in binary32
    return Writer().f32(math.copysign(math.inf, value)).finish()


def decode_value(type_tag: int, data: bytes) -> Optional[Value]:
  """ Decode the value region of a response frame.

  String values are preceded by a length byte, which is skipped; the frame boundary is what ends
  the string. Acknowledgments carry no value and decode to `None`.

  Raises:
    UnsupportedTypeTagError: if `type_tag` has no decoder.
    MalformedValueError: if `data` is shorter than the type requires.
  """

  size = value_size(type_tag)
  if type_tag == TypeTag.STRING:
    return decode_string(data, offset=1)
  if type_tag == TypeTag.ACK:
    return None
  assert size is not None
  decoder = {
    TypeTag.BYTE: decode_byte,
    TypeTag.FLOAT: decode_float,
    TypeTag.SHORT: decode_short,
    TypeTag.LONG: decode_long,
  }[TypeTag(type_tag)]
  return decoder(data)


def float32(value: float) -> float:
  """ Round a Python float to the nearest binary32 value, as it would arrive from the board. """
  return struct.unpack("<f", encode_float(value))[0]
