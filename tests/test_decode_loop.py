import unittest
from construct import Int32ul
from tcnet.network import codec
from tcnet.network.exceptions import BadMagic, UnsupportedTag
from tcnet.network.packets import DataType, ManagementHeader


def packet_buffer(message_type, length, data_type=None, layer=0):
    buf = bytearray(length)
    buf[0:24] = ManagementHeader.build(dict(
        node_id=1, node_name="BRIDGE", seq=1, node_type="master", timestamp=0,
        message_type=message_type))
    if data_type is not None:
        buf[24:25] = DataType.build(data_type)
        buf[25] = layer
    return buf


class ParsePacketTestCase(unittest.TestCase):
    def test_status(self):
        buf = packet_buffer("status", 300)
        buf[42:50] = bytes([3, 3, 0, 0, 0, 0, 0, 0])
        packet = codec.parse_packet(buf)
        self.assertEqual(packet.header.message_type, "status")
        self.assertEqual(packet.layer_status[0], "playing")

    def test_data_is_dispatched_by_data_type(self):
        buf = packet_buffer("data", 122, "metrics", 4)
        buf[112:116] = Int32ul.build(12000)
        packet = codec.parse_packet(buf)
        self.assertEqual(packet.data_type, "metrics")
        self.assertEqual(packet.layer, 4)
        self.assertAlmostEqual(packet.bpm, 120.0)

    def test_unknown_message_type(self):
        buf = packet_buffer("status", 300)
        buf[7] = 99
        with self.assertRaises(UnsupportedTag) as cm:
            codec.parse_packet(buf)
        self.assertEqual(cm.exception.tag, 99)

    def test_unimplemented_message_type(self):
        with self.assertRaises(UnsupportedTag) as cm:
            codec.parse_packet(packet_buffer("file", 64))
        self.assertEqual(cm.exception.tag, 204)

    def test_unimplemented_data_type(self):
        with self.assertRaises(UnsupportedTag) as cm:
            codec.parse_packet(packet_buffer("data", 436, "cue", 1))
        self.assertEqual(cm.exception.tag, 12)

    def test_bad_magic(self):
        buf = packet_buffer("status", 300)
        buf[4:7] = b"XYZ"
        with self.assertRaises(BadMagic):
            codec.parse_packet(buf)


class DecodeLoopTestCase(unittest.TestCase):
    def test_bad_packets_are_skipped(self):
        status = packet_buffer("status", 300)
        unknown = packet_buffer("status", 300)
        unknown[7] = 99
        bad_magic = bytearray(status)
        bad_magic[4:7] = b"ABC"
        metrics = packet_buffer("data", 122, "metrics", 2)
        datagrams = [
            bytes(unknown),
            (bytes(bad_magic), ("10.0.0.2", 60000)),
            bytes(status[:10]),
            bytes(status[:200]),
            bytes(status),
            (bytes(metrics), ("10.0.0.2", 65023)),
            b"",
        ]
        with self.assertLogs(level="WARNING"):
            packets = list(codec.iter_packets(datagrams))
        self.assertEqual(len(packets), 2)
        self.assertEqual(packets[0].header.message_type, "status")
        self.assertEqual(packets[1].data_type, "metrics")

    def test_unsupported_tag_is_not_a_warning(self):
        unknown = packet_buffer("status", 300)
        unknown[7] = 99
        with self.assertLogs(level="DEBUG") as cm:
            self.assertIsNone(codec.try_parse_packet(bytes(unknown), ("10.0.0.2", 60000)))
        self.assertTrue(all(record.levelname == "DEBUG" for record in cm.records))
