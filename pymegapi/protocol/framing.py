"""Frame encoding and incremental frame decoding.

Outbound frame layout::

    +-----------+--------+--------+--------+---------------+------+
    | FF 55     | length | id     | action | device | args | 0A   |
    +-----------+--------+--------+--------+---------------+------+

where ``length`` is the number of payload bytes (``id`` through the last argument).

Inbound frame layout::

    +-----------+--------+--------+-----------------+-------+
    | FF 55     | id     | type   | value bytes ... | 0D 0A |
    +-----------+--------+--------+-----------------+-------+

Inbound frames carry no length byte: the decoder finds frame boundaries from the start marker and
the CR LF terminator alone. The terminators differ between directions, which is what the board
firmware expects.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from pymegapi.protocol.codec import TypeTag, Value, decode_value
from pymegapi.protocol.errors import (
  MalformedFrameError,
  MalformedValueError,
  ProtocolError,
  UnsupportedTypeTagError,
)

logger = logging.getLogger(__name__)

START_MARKER = b"\xff\x55"
OUTBOUND_TERMINATOR = b"\x0a"
INBOUND_TERMINATOR = b"\x0d\x0a"
MAX_PAYLOAD_LENGTH = 0xFF

ByteArgs = Union[bytes, bytearray, Iterable[int]]


def build_frame(payload: ByteArgs) -> bytes:
  """ Wrap a raw payload in start marker, length byte and terminator.

  Raises:
    ValueError: if the payload does not fit the single length byte, or contains non-byte values.
  """

  payload = bytes(payload)
  if len(payload) > MAX_PAYLOAD_LENGTH:
    raise ValueError(f"Payload of {len(payload)} bytes does not fit in a frame")
  return START_MARKER + bytes([len(payload)]) + payload + OUTBOUND_TERMINATOR


def encode_frame(identifier: int, action: int, device: int, args: ByteArgs = b"") -> bytes:
  """ Build the outbound frame for a command.

  Args:
    identifier: the command identifier, echoed back by the board in the response.
    action: the action code (get, run, reset, ...).
    device: the device code.
    args: argument bytes, already encoded.

  Returns:
    ``FF 55 <3 + len(args)> <identifier> <action> <device> <args...> 0A``
  """

  return build_frame(bytes([identifier, action, device]) + bytes(args))


class FrameKind(enum.Enum):
  VALUE = "value"
  ACK = "ack"
  UNSUPPORTED = "unsupported"
  MALFORMED = "malformed"


@dataclass(frozen=True)
class DecodedFrame:
  """ A response frame recognized by `FrameDecoder`. """

  identifier: int
  type_tag: int
  kind: FrameKind
  value: Optional[Value] = None
  error: Optional[ProtocolError] = None

  @property
  def resolves_caller(self) -> bool:
    """ Only frames carrying a decoded value may resolve a pending caller. """
    return self.kind is FrameKind.VALUE

  def __repr__(self) -> str:
    if self.kind is FrameKind.VALUE:
      return f"DecodedFrame(identifier=0x{self.identifier:02X}, value={self.value!r})"
    return f"DecodedFrame(identifier=0x{self.identifier:02X}, kind={self.kind.value})"


@dataclass
class ParserState:
  """ Long-lived scanning state of one connection. """

  buffer: bytearray = field(default_factory=bytearray)
  frame_open: bool = False
  start_offset: int = 0

  def clear(self) -> None:
    self.buffer = bytearray()
    self.frame_open = False
    self.start_offset = 0


class FrameDecoder:
  """ Reassembles response frames from arbitrarily chunked input.

  Bytes are scanned one at a time. A start marker (re)opens a frame at its position, abandoning any
  partial frame before it. A CR LF while a frame is open completes it: the identifier and type tag
  are read at fixed offsets after the start marker, the rest up to the terminator is the value
  region. After each completed frame the state is cleared.

  Frames that cannot be decoded (unknown type tag, too few value bytes) are reported as
  `FrameKind.UNSUPPORTED` / `FrameKind.MALFORMED` frames and logged; scanning continues.
  """

  def __init__(self, state: Optional[ParserState] = None):
    self.state = state if state is not None else ParserState()

  def reset(self) -> None:
    self.state.clear()

  def feed(self, data: ByteArgs) -> List[DecodedFrame]:
    """ Consume a chunk of received bytes.

    Returns:
      The frames completed by this chunk, in arrival order.
    """

    frames: List[DecodedFrame] = []
    state = self.state
    for byte in bytes(data):
      state.buffer.append(byte)
      if len(state.buffer) < 2:
        continue
      tail = state.buffer[-2:]
      if tail == START_MARKER:
        state.start_offset = len(state.buffer) - 2
        state.frame_open = True
      elif tail == INBOUND_TERMINATOR and state.frame_open:
        frames.append(self._complete_frame())
        state.clear()
    return frames

  def _complete_frame(self) -> DecodedFrame:
    buffer = self.state.buffer
    position = self.state.start_offset + len(START_MARKER)
    identifier = buffer[position]
    type_tag = buffer[position + 1]
    value_region = bytes(buffer[position + 2 : len(buffer) - len(INBOUND_TERMINATOR)])

    if type_tag == TypeTag.ACK:
      return DecodedFrame(identifier=identifier, type_tag=type_tag, kind=FrameKind.ACK)

    try:
      value = decode_value(type_tag, value_region)
    except UnsupportedTypeTagError as e:
      logger.warning("Unsupported data type %s for input: %s", type_tag, bytes(buffer).hex(" "))
      return DecodedFrame(
        identifier=identifier, type_tag=type_tag, kind=FrameKind.UNSUPPORTED, error=e
      )
    except MalformedValueError as e:
      error = MalformedFrameError(f"Truncated frame {bytes(buffer).hex(' ')}: {e}")
      error.__cause__ = e
      logger.warning("Dropping malformed frame: %s", error)
      return DecodedFrame(
        identifier=identifier, type_tag=type_tag, kind=FrameKind.MALFORMED, error=error
      )

    return DecodedFrame(identifier=identifier, type_tag=type_tag, kind=FrameKind.VALUE, value=value)
