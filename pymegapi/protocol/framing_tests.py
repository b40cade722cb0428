import unittest

from pymegapi.protocol.codec import TypeTag, encode_float, encode_long, encode_short
from pymegapi.protocol.errors import MalformedFrameError, UnsupportedTypeTagError
from pymegapi.protocol.framing import (
  DecodedFrame,
  FrameDecoder,
  FrameKind,
  build_frame,
  encode_frame,
)


def response(identifier: int, type_tag: int, value: bytes = b"") -> bytes:
  return bytes([0xFF, 0x55, identifier, type_tag]) + value + b"\x0d\x0a"


class FrameEncoderTests(unittest.TestCase):
  """ Tests for outbound frames. """

  def test_encode_digital_write(self):
    frame = encode_frame(identifier=0x1E, action=2, device=0x1E, args=[12, 1])
    self.assertEqual(frame, bytes.fromhex("FF 55 05 1E 02 1E 0C 01 0A"))

  def test_encode_without_args(self):
    self.assertEqual(encode_frame(0x11, 1, 1), bytes.fromhex("FF 55 03 11 01 01 0A"))

  def test_length_byte_counts_payload(self):
    args = bytes(range(10))
    frame = encode_frame(0, 2, 8, args)
    self.assertEqual(frame[2], 3 + len(args))
    self.assertEqual(frame[3:-1], bytes([0, 2, 8]) + args)
    self.assertEqual(frame[-1], 0x0A)

  def test_build_frame(self):
    self.assertEqual(build_frame(b"\x00\x04"), bytes.fromhex("FF 55 02 00 04 0A"))

  def test_payload_too_long(self):
    with self.assertRaises(ValueError):
      build_frame(bytes(256))
    build_frame(bytes(255))  # should not raise

  def test_args_must_be_bytes(self):
    with self.assertRaises(ValueError):
      encode_frame(0, 2, 8, [256])


class FrameDecoderTests(unittest.TestCase):
  """ Tests for the incremental response decoder. """

  def setUp(self):
    self.decoder = FrameDecoder()

  def test_decode_short_frame(self):
    frames = self.decoder.feed(response(0x1E, TypeTag.SHORT, b"\x64\x00"))
    self.assertEqual(frames, [DecodedFrame(0x1E, 3, FrameKind.VALUE, value=100)])

  def test_decode_value_bytes_are_little_endian(self):
    frames = self.decoder.feed(bytes.fromhex("FF 55 1E 03 00 64 0D 0A"))
    self.assertEqual(len(frames), 1)
    self.assertEqual(frames[0].identifier, 0x1E)
    self.assertEqual(frames[0].kind, FrameKind.VALUE)
    self.assertEqual(frames[0].value, 0x6400)

  def test_decode_each_type(self):
    data = (
      response(1, TypeTag.BYTE, b"\x07")
      + response(2, TypeTag.FLOAT, encode_float(-2.5))
      + response(3, TypeTag.SHORT, encode_short(-1))
      + response(4, TypeTag.STRING, b"\x0909.01.016")
      + response(6, TypeTag.LONG, encode_long(-100000))
    )
    frames = self.decoder.feed(data)
    self.assertEqual([f.identifier for f in frames], [1, 2, 3, 4, 6])
    self.assertEqual([f.value for f in frames], [7, -2.5, -1, "09.01.016", -100000])
    self.assertTrue(all(f.kind is FrameKind.VALUE for f in frames))

  def test_ack(self):
    frames = self.decoder.feed(response(0x3E, TypeTag.ACK))
    self.assertEqual(len(frames), 1)
    self.assertEqual(frames[0].kind, FrameKind.ACK)
    self.assertIsNone(frames[0].value)
    self.assertFalse(frames[0].resolves_caller)

  def test_reassembly_invariance(self):
    data = (
      response(0x11, TypeTag.FLOAT, encode_float(12.5))
      + response(0x12, TypeTag.ACK)
      + response(0x13, TypeTag.STRING, b"\x03abc")
      + response(0x14, TypeTag.LONG, encode_long(123456))
    )
    expected = FrameDecoder().feed(data)
    self.assertEqual(len(expected), 4)

    one_by_one = FrameDecoder()
    frames = []
    for byte in data:
      frames.extend(one_by_one.feed(bytes([byte])))
    self.assertEqual(frames, expected)

    for size in (2, 3, 5, 7, 11):
      decoder = FrameDecoder()
      frames = []
      for i in range(0, len(data), size):
        frames.extend(decoder.feed(data[i : i + size]))
      self.assertEqual(frames, expected, f"chunk size {size}")

  def test_start_marker_split_across_feeds(self):
    data = response(0x21, TypeTag.BYTE, b"\x01")
    self.assertEqual(self.decoder.feed(b"\x00\x01\xff"), [])
    self.assertTrue(self.decoder.state.buffer.endswith(b"\xff"))
    self.assertFalse(self.decoder.state.frame_open)
    frames = self.decoder.feed(data[1:])
    self.assertEqual(frames, [DecodedFrame(0x21, 1, FrameKind.VALUE, value=1)])

  def test_garbage_before_start_marker(self):
    data = b"\x0d\x0a\x00\x12Version 09.01\x0d\x0a" + response(0x05, TypeTag.BYTE, b"\x2a")
    frames = self.decoder.feed(data)
    self.assertEqual(frames, [DecodedFrame(0x05, 1, FrameKind.VALUE, value=42)])

  def test_truncated_frame_then_fresh_frame(self):
    truncated = bytes([0xFF, 0x55, 0x07, TypeTag.FLOAT, 0x00])
    frames = self.decoder.feed(truncated + response(0x08, TypeTag.SHORT, b"\x02\x00"))
    self.assertEqual(frames, [DecodedFrame(0x08, 3, FrameKind.VALUE, value=2)])

  def test_truncated_value_region_is_malformed(self):
    with self.assertLogs("pymegapi.protocol.framing", level="WARNING"):
      frames = self.decoder.feed(response(0x09, TypeTag.FLOAT, b"\x00\x00"))
    self.assertEqual(len(frames), 1)
    self.assertEqual(frames[0].kind, FrameKind.MALFORMED)
    self.assertIsInstance(frames[0].error, MalformedFrameError)
    self.assertFalse(frames[0].resolves_caller)
    self.assertEqual(self.decoder.state.buffer, bytearray())

    # the decoder keeps going after the malformed frame
    frames = self.decoder.feed(response(0x09, TypeTag.BYTE, b"\x03"))
    self.assertEqual(frames, [DecodedFrame(0x09, 1, FrameKind.VALUE, value=3)])

  def test_unsupported_type_tags(self):
    with self.assertLogs("pymegapi.protocol.framing", level="WARNING") as logs:
      frames = self.decoder.feed(
        response(0x0A, TypeTag.DOUBLE, bytes(8)) + response(0x0B, 0x42, b"\x01")
      )
    self.assertEqual([f.kind for f in frames], [FrameKind.UNSUPPORTED, FrameKind.UNSUPPORTED])
    self.assertIsInstance(frames[0].error, UnsupportedTypeTagError)
    self.assertTrue(any("Unsupported data type 5" in line for line in logs.output))

  def test_frames_in_one_chunk_are_all_emitted(self):
    data = b"".join(response(i, TypeTag.BYTE, bytes([i])) for i in range(20, 25))
    frames = self.decoder.feed(data)
    self.assertEqual([(f.identifier, f.value) for f in frames], [(i, i) for i in range(20, 25)])

  def test_terminator_without_open_frame_is_ignored(self):
    self.assertEqual(self.decoder.feed(b"hello\x0d\x0a"), [])
    self.assertFalse(self.decoder.state.frame_open)

  def test_state_cleared_after_frame(self):
    self.decoder.feed(b"junk" + response(1, TypeTag.BYTE, b"\x00"))
    self.assertEqual(self.decoder.state.buffer, bytearray())
    self.assertFalse(self.decoder.state.frame_open)

  def test_reset(self):
    self.decoder.feed(b"\xff\x55\x01")
    self.assertTrue(self.decoder.state.frame_open)
    self.decoder.reset()
    self.assertFalse(self.decoder.state.frame_open)
    self.assertEqual(self.decoder.feed(b"\x02\x00\x0d\x0a"), [])

  def test_value_containing_terminator_cuts_frame(self):
    # CR LF inside the value region ends the frame early; the firmware has no escaping
    frames = self.decoder.feed(response(0x31, TypeTag.LONG, b"\x0d\x0a\x00\x00"))
    self.assertEqual(frames[0].kind, FrameKind.MALFORMED)
