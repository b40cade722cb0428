"""Binary data reading and writing utilities."""

import struct


class Reader:
  """A simple binary reader that tracks position and reads various data types."""

  def __init__(self, data: bytes, little_endian: bool = True):
    self._data = data
    self._offset = 0
    self._little_endian = little_endian

  def offset(self) -> int:
    """Return the current read offset."""
    return self._offset

  def has_remaining(self, n: int = 1) -> bool:
    """Check if at least n bytes remain."""
    return self._offset + n <= len(self._data)

  def remaining(self) -> int:
    """Return the number of bytes remaining."""
    return len(self._data) - self._offset

  def raw_bytes(self, length: int) -> bytes:
    """Read raw bytes and advance the offset."""
    if self._offset + length > len(self._data):
      raise ValueError(
        f"Not enough data: need {length} bytes at offset {self._offset}, "
        f"got {len(self._data) - self._offset}"
      )
    result = self._data[self._offset : self._offset + length]
    self._offset += length
    return bytes(result)

  def _read(self, fmt: str, size: int):
    prefix = "<" if self._little_endian else ">"
    data = self.raw_bytes(size)
    return struct.unpack(prefix + fmt, data)[0]

  def u8(self) -> int:
    """Read an unsigned 8-bit integer."""
    return int(self._read("B", 1))

  def i16(self) -> int:
    """Read a signed 16-bit integer."""
    return int(self._read("h", 2))

  def i32(self) -> int:
    """Read a signed 32-bit integer."""
    return int(self._read("i", 4))

  def f32(self) -> float:
    """Read an IEEE-754 single precision float."""
    return float(self._read("f", 4))

  def string(self, encoding: str = "utf-8") -> str:
    """Read everything that is left as a string. Undecodable bytes are replaced."""
    return self.raw_bytes(self.remaining()).decode(encoding, errors="replace")

  def skip(self, length: int) -> None:
    """Skip bytes without reading them."""
    if self._offset + length > len(self._data):
      raise ValueError(f"Cannot skip {length} bytes, only {self.remaining()} remaining")
    self._offset += length


class Writer:
  """Counterpart of `Reader`: builds a byte string from fixed width values."""

  def __init__(self, little_endian: bool = True):
    self._buffer = bytearray()
    self._little_endian = little_endian

  def _write(self, fmt: str, value) -> "Writer":
    prefix = "<" if self._little_endian else ">"
    self._buffer += struct.pack(prefix + fmt, value)
    return self

  def u8(self, value: int) -> "Writer":
    return self._write("B", value)

  def i16(self, value: int) -> "Writer":
    return self._write("h", value)

  def i32(self, value: int) -> "Writer":
    return self._write("i", value)

  def f32(self, value: float) -> "Writer":
    return self._write("f", value)

  def raw_bytes(self, data: bytes) -> "Writer":
    self._buffer += data
    return self

  def finish(self) -> bytes:
    """Return the bytes written so far."""
    return bytes(self._buffer)
