class TCNetError(Exception):
  pass

class DecodeError(TCNetError):
  pass

class OutOfBounds(DecodeError):
  pass

class TruncatedPacket(DecodeError):
  pass

class BadMagic(DecodeError):
  pass

class UnsupportedVersion(DecodeError):
  pass

class EncodeError(TCNetError):
  pass

class FieldTooLong(EncodeError):
  pass

class EncodeNotSupported(EncodeError):
  pass

# raised by the layer state tracker, indicates a bug rather than bad input
class InvalidLayerCount(TCNetError):
  pass

# not a failure, the packet is valid but there is no codec for it
class UnsupportedTag(TCNetError):
  def __init__(self, tag):
    super().__init__("unsupported tag {}".format(tag))
    self.tag = tag

class RequestError(TCNetError):
  pass
