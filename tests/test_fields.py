import unittest
from tcnet.network.exceptions import EncodeError, FieldTooLong, OutOfBounds
from tcnet.network.fields import read_fixed_ascii, read_u8, read_u16le, read_u32le, write_fixed_ascii

class FieldReaderTestCase(unittest.TestCase):
    def test_little_endian_integers(self):
        data = bytes([0x01, 0x02, 0x03, 0x04, 0x05])
        self.assertEqual(read_u8(data, 4), 0x05)
        self.assertEqual(read_u16le(data, 0), 0x0201)
        self.assertEqual(read_u32le(data, 1), 0x05040302)

    def test_reads_past_the_end_fail(self):
        data = bytes(4)
        self.assertEqual(read_u32le(data, 0), 0)
        with self.assertRaises(OutOfBounds):
            read_u32le(data, 1)
        with self.assertRaises(OutOfBounds):
            read_u16le(data, 3)
        with self.assertRaises(OutOfBounds):
            read_u8(data, 4)
        with self.assertRaises(OutOfBounds):
            read_u8(data, -1)
        with self.assertRaises(OutOfBounds):
            read_fixed_ascii(data, 2, 6)

    def test_fixed_ascii_stops_at_first_nul(self):
        data = b"XXAB\x00CD\x00\x00YY"
        self.assertEqual(read_fixed_ascii(data, 2, 10), "AB")
        self.assertEqual(read_fixed_ascii(data, 4, 10), "")

    def test_fixed_ascii_without_nul_returns_full_width(self):
        self.assertEqual(read_fixed_ascii(b"TCNETNODE", 0, 8), "TCNETNOD")


class FieldWriterTestCase(unittest.TestCase):
    def test_write_pads_with_nul(self):
        buffer = bytearray(b"\xff" * 10)
        write_fixed_ascii(buffer, "ABC", 1, 6)
        self.assertEqual(bytes(buffer), b"\xffABC\x00\x00\x00\xff\xff\xff")

    def test_write_exact_width(self):
        buffer = bytearray(8)
        write_fixed_ascii(buffer, "12345678", 0, 8)
        self.assertEqual(bytes(buffer), b"12345678")
        self.assertEqual(read_fixed_ascii(buffer, 0, 8), "12345678")

    def test_write_too_long(self):
        buffer = bytearray(16)
        with self.assertRaises(FieldTooLong):
            write_fixed_ascii(buffer, "123456789", 0, 8)
        self.assertEqual(bytes(buffer), bytes(16))

    def test_write_outside_buffer(self):
        with self.assertRaises(OutOfBounds):
            write_fixed_ascii(bytearray(8), "AB", 4, 8)

    def test_write_non_ascii(self):
        with self.assertRaises(EncodeError):
            write_fixed_ascii(bytearray(8), "café", 0, 8)
