"""Protocol layer: value codec, framing, response correlation and the invoke engine."""

from .codec import TypeTag, Value, decode_value, value_size
from .correlation import CorrelationTable
from .engine import InvokeEngine
from .errors import (
  MalformedFrameError,
  MalformedValueError,
  ProtocolError,
  UnsupportedTypeTagError,
)
from .framing import DecodedFrame, FrameDecoder, FrameKind, ParserState, build_frame, encode_frame
