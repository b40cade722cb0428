import unittest

from pymegapi.io.binary import Reader, Writer


class BinaryTests(unittest.TestCase):
  def test_reader(self):
    reader = Reader(b"\x01\xfe\xff\x00\x00\x80\x3f\x78\x56\x34\x12ok")
    self.assertEqual(reader.u8(), 1)
    self.assertEqual(reader.i16(), -2)
    self.assertEqual(reader.f32(), 1.0)
    self.assertEqual(reader.i32(), 0x12345678)
    self.assertEqual(reader.offset(), 11)
    self.assertTrue(reader.has_remaining(2))
    self.assertFalse(reader.has_remaining(3))
    self.assertEqual(reader.string(), "ok")
    self.assertEqual(reader.remaining(), 0)

  def test_reader_big_endian(self):
    self.assertEqual(Reader(b"\x00\x64", little_endian=False).i16(), 100)

  def test_reader_not_enough_data(self):
    reader = Reader(b"\x01")
    with self.assertRaises(ValueError):
      reader.i16()
    with self.assertRaises(ValueError):
      reader.skip(2)

  def test_writer(self):
    data = Writer().u8(1).i16(-2).f32(1.0).i32(0x12345678).raw_bytes(b"ok").finish()
    self.assertEqual(data, b"\x01\xfe\xff\x00\x00\x80\x3f\x78\x56\x34\x12ok")
