from construct import Int8ul, Int16ul, Int32ul

from .exceptions import EncodeError, FieldTooLong, OutOfBounds

def check_bounds(data, offset, width):
  if offset < 0 or offset + width > len(data):
    raise OutOfBounds("{} bytes at offset {} exceed buffer of {} bytes".format(width, offset, len(data)))

def read_u8(data, offset):
  check_bounds(data, offset, 1)
  return Int8ul.parse(bytes(data[offset:offset+1]))

def read_u16le(data, offset):
  check_bounds(data, offset, 2)
  return Int16ul.parse(bytes(data[offset:offset+2]))

def read_u32le(data, offset):
  check_bounds(data, offset, 4)
  return Int32ul.parse(bytes(data[offset:offset+4]))

def decode_fixed_ascii(raw):
  return bytes(raw).split(b"\x00", 1)[0].decode("ascii", errors="replace")

def encode_fixed_ascii(text, width):
  try:
    raw = text.encode("ascii")
  except UnicodeEncodeError as e:
    raise EncodeError("{!r} is not ascii".format(text)) from e
  if len(raw) > width:
    raise FieldTooLong("{!r} is {} bytes, field holds {}".format(text, len(raw), width))
  return raw.ljust(width, b"\x00")

# string up to the first NUL in [start, end), or the full slice without NUL
def read_fixed_ascii(data, start, end):
  check_bounds(data, start, end-start)
  return decode_fixed_ascii(data[start:end])

def write_fixed_ascii(buffer, text, offset, width):
  raw = encode_fixed_ascii(text, width)
  check_bounds(buffer, offset, width)
  buffer[offset:offset+width] = raw
