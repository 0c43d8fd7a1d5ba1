import logging
from collections import namedtuple

from construct import ConstructError, StreamError

from . import packets
from . import packets_dump
from .exceptions import BadMagic, DecodeError, EncodeError, EncodeNotSupported, OutOfBounds, TCNetError, TruncatedPacket, UnsupportedTag, UnsupportedVersion
from .fields import read_fixed_ascii, read_u8

# returned by the dispatch tables for tags without a codec
Unsupported = namedtuple("Unsupported", ["tag"])

class PacketCodec:
  def __init__(self, name, struct, length, message_type, encodable=False, min_length=None):
    self.name = name
    self.struct = struct
    self.message_type = message_type
    self.encodable = encodable
    self._length = length
    # the data envelope has no fixed length, but needs at least its own fields
    self.min_length = length if min_length is None else min_length

  def __repr__(self):
    return "<PacketCodec {}>".format(self.name)

  # total wire size, -1 if it depends on a nested packet
  def length(self):
    return self._length

  def parse(self, data):
    if len(data) < self.min_length:
      raise TruncatedPacket("{} packet needs {} bytes, got {}".format(self.name, self.min_length, len(data)))
    validate_header(data)
    try:
      return self.struct.parse(bytes(data))
    except StreamError as e:
      raise TruncatedPacket("{} packet: {}".format(self.name, e)) from e
    except ConstructError as e:
      raise DecodeError("{} packet: {}".format(self.name, e)) from e

  def build(self, obj):
    if not self.encodable:
      raise EncodeNotSupported("{} packets can not be encoded".format(self.name))
    header = dict(obj["header"], message_type=self.message_type)
    try:
      data = self.struct.build(dict(obj, header=header))
    except ConstructError as e:
      raise EncodeError("{} packet: {}".format(self.name, e)) from e
    if len(data) != self._length:
      raise EncodeError("BUG: {} packet built with {} bytes instead of {}".format(self.name, len(data), self._length))
    return data

def validate_header(data):
  if len(data) < packets.HeaderLength:
    raise OutOfBounds("header needs {} bytes, got {}".format(packets.HeaderLength, len(data)))
  magic = read_fixed_ascii(data, 4, 7)
  if magic != packets.TCNetMagic.decode("ascii"):
    raise BadMagic("bad magic {!r}".format(magic))
  version = read_u8(data, 2)
  if version != packets.TCNetMajorVersion:
    raise UnsupportedVersion("unsupported major version {}".format(version))

def parse_header(data):
  validate_header(data)
  try:
    return packets.ManagementHeader.parse(bytes(data[:packets.HeaderLength]))
  except ConstructError as e:
    raise DecodeError("header: {}".format(e)) from e

def build_header(header):
  try:
    return packets.ManagementHeader.build(header)
  except ConstructError as e:
    raise EncodeError("header: {}".format(e)) from e

OptInCodec = PacketCodec("optin", packets.OptInPacket, 68, "optin", encodable=True)
OptOutCodec = PacketCodec("optout", packets.OptOutPacket, 28, "optout", encodable=True)
StatusCodec = PacketCodec("status", packets.StatusPacket, 300, "status")
RequestCodec = PacketCodec("request", packets.RequestPacket, 26, "request", encodable=True)
ApplicationDataCodec = PacketCodec("application_data", packets.ApplicationDataPacket, 62, "application_data", encodable=True)
TimeCodec = PacketCodec("time", packets.TimePacket, 154, "time")
DataCodec = PacketCodec("data", packets.DataPacket, -1, "data", min_length=26)

MetricsDataCodec = PacketCodec("metrics", packets.MetricsDataPacket, 122, "data")
MetadataDataCodec = PacketCodec("metadata", packets.MetadataDataPacket, 548, "data")
BeatGridDataCodec = PacketCodec("beatgrid", packets.BeatGridDataPacket, 2442, "data")
MixerDataCodec = PacketCodec("mixer", packets.MixerDataPacket, 270, "data")

# one entry per MessageType, None for messages not implemented yet
MessageCodecs = {
  "optin": OptInCodec,
  "optout": OptOutCodec,
  "status": StatusCodec,
  "timesync": None,
  "error": None,
  "request": RequestCodec,
  "application_data": ApplicationDataCodec,
  "control": None,
  "text": None,
  "keyboard": None,
  "data": DataCodec,
  "file": None,
  "time": TimeCodec
}

# one entry per DataType, None for data not implemented yet
DataCodecs = {
  "metrics": MetricsDataCodec,
  "metadata": MetadataDataCodec,
  "beatgrid": BeatGridDataCodec,
  "cue": None,
  "small_waveform": None,
  "big_waveform": None,
  "mixer": MixerDataCodec
}

def _resolve(table, enum, tag):
  # known enum values arrive as names, unknown ones as plain integers
  name = tag if isinstance(tag, str) else enum.decmapping.get(tag)
  codec = table.get(name) if name is not None else None
  if codec is None:
    return Unsupported(enum.encmapping.get(name, tag) if name is not None else tag)
  return codec

def resolve_message_codec(message_type):
  return _resolve(MessageCodecs, packets.MessageType, message_type)

def resolve_data_codec(data_type):
  return _resolve(DataCodecs, packets.DataType, data_type)

def parse_packet(data):
  header = parse_header(data)
  codec = resolve_message_codec(header.message_type)
  if isinstance(codec, Unsupported):
    raise UnsupportedTag(codec.tag)
  if codec is DataCodec:
    envelope = codec.parse(data)
    codec = resolve_data_codec(envelope.data_type)
    if isinstance(codec, Unsupported):
      raise UnsupportedTag(codec.tag)
  return codec.parse(data)

# receive path: never raises on bad input, returns None for dropped packets
def try_parse_packet(data, addr=None):
  try:
    return parse_packet(data)
  except UnsupportedTag as e:
    logging.debug("Ignoring packet from {}: {}".format(addr, e))
  except TCNetError as e:
    logging.warning("Failed to parse packet from {}, {} bytes: {}".format(addr, len(data), e))
    packets_dump.dump_packet_raw(data)
  return None

# decodes a sequence of datagrams or (datagram, addr) tuples, skipping bad ones
def iter_packets(datagrams):
  for item in datagrams:
    data, addr = item if isinstance(item, tuple) else (item, None)
    packet = try_parse_packet(data, addr)
    if packet is not None:
      yield packet
