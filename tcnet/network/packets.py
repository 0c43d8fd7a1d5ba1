# based in part of:
# https://www.tc-supply.com/tcnet (TCNet Link Specification V3.3.3)
# https://github.com/chdxD1/node-tcnet

from construct import Adapter, Array, Bytes, Computed, Const, Default, Enum, FlagsEnum, GreedyBytes, Int8ul, Int16ul, Int32ul, Padding, Pointer, Struct, this

from .fields import decode_fixed_ascii, encode_fixed_ascii

TCNetMagic = b"TCN"
TCNetMajorVersion = 3
TCNetMinorVersion = 5
HeaderLength = 24
LayerCount = 8

BroadcastPort = 60000
TimePort = 60001
UnicastPort = 65023

class FixedAsciiAdapter(Adapter):
  def __init__(self, width):
    super().__init__(Bytes(width))
    self.width = width
  def _encode(self, obj, context, path):
    return encode_fixed_ascii(obj, self.width)
  def _decode(self, obj, context, path):
    return decode_fixed_ascii(obj)
FixedAscii = FixedAsciiAdapter

# metadata strings are padded with NULs in between characters, drop all of them
class NulStrippedAsciiAdapter(Adapter):
  def __init__(self, subcon, width=None):
    super().__init__(subcon)
    self.width = width
  def _encode(self, obj, context, path):
    return encode_fixed_ascii(obj, self.width)
  def _decode(self, obj, context, path):
    raw = bytes(obj)
    if self.width is not None:
      raw = raw[:self.width]
    return raw.replace(b"\x00", b"").decode("ascii", errors="replace").rstrip()
NulStrippedAscii = lambda width: NulStrippedAsciiAdapter(Bytes(width), width)

class BpmAdapter(Adapter):
  def _encode(self, obj, context, path):
    return int(round(obj*100))
  def _decode(self, obj, context, path):
    return obj/100
Bpm = BpmAdapter(Int32ul)

MessageType = Enum(Int8ul,
  optin = 2,
  optout = 3,
  status = 5,
  timesync = 10,
  error = 13,
  request = 20,
  application_data = 30,
  control = 101,
  text = 128,
  keyboard = 132,
  data = 200,
  file = 204,
  time = 254
)

DataType = Enum(Int8ul,
  metrics = 2,
  metadata = 4,
  beatgrid = 8,
  cue = 12,
  small_waveform = 16,
  big_waveform = 32,
  mixer = 150
)

NodeType = FlagsEnum(Int8ul,
  auto = 1,
  master = 2,
  slave = 4,
  repeater = 8)

LayerStatus = Enum(Int8ul,
  idle = 0,
  playing = 3,
  looping = 4,
  paused = 5,
  stopped = 6,
  cuedown = 7, # cue button held
  platterdown = 8, # platter touched
  ffwd = 9,
  ffrv = 10,
  hold = 11
)

SyncMaster = Enum(Int8ul,
  slave = 0,
  master = 1
)

TimecodeState = Enum(Int8ul,
  stopped = 0,
  running = 1,
  force_resync = 2
)

BeatType = Enum(Int8ul,
  upbeat = 10,
  downbeat = 20
)

# common header of every packet, 24 bytes
ManagementHeader = Struct(
  "node_id" / Int16ul,
  "major_version" / Const(TCNetMajorVersion, Int8ul),
  "minor_version" / Default(Int8ul, TCNetMinorVersion),
  "magic" / Const(TCNetMagic),
  "message_type" / MessageType,
  "node_name" / FixedAscii(8),
  "seq" / Int8ul, # wraps at 255
  "node_type" / NodeType,
  "node_options" / Default(Int16ul, 0),
  "timestamp" / Int32ul # ms
)

OptInPacket = Struct(
  "header" / ManagementHeader,
  "node_count" / Int16ul,
  "listener_port" / Int16ul,
  "uptime" / Int16ul,
  Padding(2),
  "vendor_name" / FixedAscii(16),
  "app_name" / FixedAscii(16),
  "major_version" / Int8ul,
  "minor_version" / Int8ul,
  "bug_version" / Int8ul,
  Padding(1)
)

OptOutPacket = Struct(
  "header" / ManagementHeader,
  "node_count" / Int16ul,
  "listener_port" / Int16ul
)

# periodic broadcast of bridges, 300 bytes
StatusPacket = Struct(
  "header" / ManagementHeader,
  "node_count" / Int16ul,
  "listener_port" / Int16ul,
  Padding(6),
  # 34 bytes until now
  "layer_source" / Array(LayerCount, Int8ul),
  "layer_status" / Array(LayerCount, LayerStatus),
  "track_id" / Array(LayerCount, Int32ul),
  Padding(1),
  "smpte_mode" / Int8ul,
  "auto_master_mode" / Int8ul,
  Padding(87), # app specific, not decoded
  # 172 bytes until now
  "layer_name" / Array(LayerCount, FixedAscii(16))
)

RequestPacket = Struct(
  "header" / ManagementHeader,
  "data_type" / DataType,
  "layer" / Int8ul
)

ApplicationDataPacket = Struct(
  "header" / ManagementHeader,
  "data_type" / DataType,
  "layer" / Int8ul,
  Padding(36)
)

Timecode = Struct(
  "mode" / Int8ul,
  "state" / TimecodeState,
  "hours" / Int8ul,
  "minutes" / Int8ul,
  "seconds" / Int8ul,
  "frames" / Int8ul
)

# sent on the time port at a high rate, 154 bytes
TimePacket = Struct(
  "header" / ManagementHeader,
  "current_time" / Array(LayerCount, Int32ul), # ms
  "total_time" / Array(LayerCount, Int32ul), # ms
  "beat_marker" / Array(LayerCount, Int8ul),
  "layer_state" / Array(LayerCount, LayerStatus),
  Padding(1),
  "general_smpte_mode" / Int8ul,
  "timecode" / Array(LayerCount, Timecode)
)

# envelope of all data packets, the real shape depends on data_type
DataPacket = Struct(
  "header" / ManagementHeader,
  "data_type" / DataType,
  "layer" / Int8ul
)

MetricsDataPacket = Struct(
  "header" / ManagementHeader,
  "data_type" / DataType,
  "layer" / Int8ul,
  Padding(1),
  "state" / LayerStatus,
  Padding(1),
  "sync_master" / SyncMaster,
  Padding(1),
  "beat_marker" / Int8ul,
  "track_length" / Int32ul, # ms
  "current_position" / Int32ul, # ms
  "speed" / Int32ul,
  Padding(13),
  # not aligned, but that is what the bridge sends
  "beat_number" / Int32ul,
  Padding(51),
  "bpm" / Bpm,
  "pitch_bend" / Int16ul,
  "track_id" / Int32ul
)

MetadataDataPacket = Struct(
  "header" / ManagementHeader,
  "data_type" / DataType,
  "layer" / Int8ul,
  Padding(3),
  "track_artist" / NulStrippedAscii(256),
  "track_title" / NulStrippedAscii(256),
  # the key region overlaps the track id and reaches beyond the packet length,
  # read whatever is available of its 25 bytes
  "track_key" / Pointer(541, NulStrippedAsciiAdapter(GreedyBytes, 25)),
  "track_id" / Pointer(543, Int32ul)
)

# one packet of a chunked beat grid transfer, only the leading fields are decoded
BeatGridDataPacket = Struct(
  "header" / ManagementHeader,
  "data_type" / DataType,
  "layer" / Int8ul,
  "data_size" / Int32ul,
  "total_packet" / Int32ul,
  "packet_no" / Int32ul,
  "data_cluster_size" / Int32ul,
  # 42 bytes until now
  "beat_number" / Int16ul,
  "beat_type" / BeatType,
  Padding(1),
  "beat_type_timestamp" / Int16ul
)

MixerChannel = Struct(
  "source_select" / Int8ul,
  "audio_level" / Int8ul,
  "fader_level" / Int8ul,
  "trim_level" / Int8ul,
  "comp_level" / Int8ul,
  "eq_hi_level" / Int8ul,
  "eq_hi_mid_level" / Int8ul,
  "eq_low_mid_level" / Int8ul,
  "eq_low_level" / Int8ul,
  "filter_color" / Int8ul,
  "send" / Int8ul,
  "cue_a" / Int8ul,
  "cue_b" / Int8ul,
  "crossfader_assign" / Int8ul,
  Padding(10)
)

MixerDataPacket = Struct(
  "header" / ManagementHeader,
  "data_type" / DataType,
  "layer" / Int8ul,
  "mixer_id" / Computed(this.layer),
  "mixer_type" / Int8ul,
  "mixer_name" / NulStrippedAscii(32),
  # 59 bytes until now
  "mic_eq_hi" / Int8ul,
  "mic_eq_low" / Int8ul,
  "master_audio_level" / Int8ul,
  "master_fader_level" / Int8ul,
  Padding(4),
  "link_cue_a" / Int8ul,
  "link_cue_b" / Int8ul,
  "master_filter" / Int8ul,
  Padding(1),
  "master_cue_a" / Int8ul,
  "master_cue_b" / Int8ul,
  Padding(1),
  "master_isolator_on_off" / Int8ul,
  "master_isolator_hi" / Int8ul,
  "master_isolator_mid" / Int8ul,
  "master_isolator_low" / Int8ul,
  Padding(1),
  "filter_hpf" / Int8ul,
  "filter_lpf" / Int8ul,
  "filter_res" / Int8ul,
  Padding(2),
  # 84 bytes until now
  "send_fx_effect" / Int8ul,
  "send_fx_ext1" / Int8ul,
  "send_fx_ext2" / Int8ul,
  "send_fx_master_mix" / Int8ul,
  "send_fx_size_feedback" / Int8ul,
  "send_fx_time" / Int8ul,
  "send_fx_hpf" / Int8ul,
  "send_fx_level" / Int8ul,
  "send_return3_source_select" / Int8ul,
  "send_return3_type" / Int8ul,
  "send_return3_on_off" / Int8ul,
  "send_return3_level" / Int8ul,
  Padding(1),
  "channel_fader_curve" / Int8ul,
  "cross_fader_curve" / Int8ul,
  "cross_fader" / Int8ul,
  "beat_fx_on_off" / Int8ul,
  "beat_fx_level_depth" / Int8ul,
  "beat_fx_channel_select" / Int8ul,
  "beat_fx_select" / Int8ul,
  "beat_fx_freq_hi" / Int8ul,
  "beat_fx_freq_mid" / Int8ul,
  "beat_fx_freq_low" / Int8ul,
  "headphones_pre_eq" / Int8ul,
  "headphones_a_level" / Int8ul,
  "headphones_a_mix" / Int8ul,
  "headphones_b_level" / Int8ul,
  "headphones_b_mix" / Int8ul,
  "booth_level" / Int8ul,
  "booth_eq_hi" / Int8ul,
  "booth_eq_low" / Int8ul,
  Padding(10),
  # 125 bytes until now, 24 bytes per channel strip
  "channel" / Array(6, MixerChannel),
  Padding(1)
)
