import logging
from concurrent.futures import TimeoutError

from tcnet.core.layerstate import LayerState
from tcnet.core.tcnet import TCNet
from tcnet.network.exceptions import RequestError

TrackInfoKeys = ["track_id", "track_artist", "track_title", "track_key"]

LayerMetricsKeys = ["state", "sync_master", "beat_marker", "track_length", "current_position",
  "speed", "beat_number", "bpm", "pitch_bend", "track_id"]

BeatGridDataKeys = ["data_size", "total_packet", "packet_no", "data_cluster_size",
  "beat_number", "beat_type", "beat_type_timestamp"]

MixerDataKeys = ["mixer_id", "mixer_type", "mixer_name", "mic_eq_hi", "mic_eq_low",
  "master_audio_level", "master_fader_level", "link_cue_a", "link_cue_b", "master_filter",
  "master_cue_a", "master_cue_b", "master_isolator_on_off", "master_isolator_hi",
  "master_isolator_mid", "master_isolator_low", "filter_hpf", "filter_lpf", "filter_res",
  "send_fx_effect", "send_fx_ext1", "send_fx_ext2", "send_fx_master_mix", "send_fx_size_feedback",
  "send_fx_time", "send_fx_hpf", "send_fx_level", "send_return3_source_select", "send_return3_type",
  "send_return3_on_off", "send_return3_level", "channel_fader_curve", "cross_fader_curve",
  "cross_fader", "beat_fx_on_off", "beat_fx_level_depth", "beat_fx_channel_select",
  "beat_fx_select", "beat_fx_freq_hi", "beat_fx_freq_mid", "beat_fx_freq_low",
  "headphones_pre_eq", "headphones_a_level", "headphones_a_mix", "headphones_b_level",
  "headphones_b_mix", "booth_level", "booth_eq_hi", "booth_eq_low"]

MixerChannelKeys = ["source_select", "audio_level", "fader_level", "trim_level", "comp_level",
  "eq_hi_level", "eq_hi_mid_level", "eq_low_mid_level", "eq_low_level", "filter_color",
  "send", "cue_a", "cue_b", "crossfader_assign"]

def track_info_from_packet(packet):
  return { key: packet[key] for key in TrackInfoKeys }

def layer_metrics_from_packet(packet):
  return { key: packet[key] for key in LayerMetricsKeys }

def beat_grid_data_from_packet(packet):
  return { key: packet[key] for key in BeatGridDataKeys }

def mixer_data_from_packet(packet):
  mixer = { key: packet[key] for key in MixerDataKeys }
  mixer["channels"] = [{ key: channel[key] for key in MixerChannelKeys } for channel in packet.channel]
  return mixer

class PioneerDJClient:
  """High level TCNet client for Pioneer DJ equipment.

  Tracks track ids and play status of all layers from the status broadcasts
  and queries track info, metrics, beat grid and mixer data on demand.
  Callbacks run in the receive thread and must not block on queries.
  """
  def __init__(self, config=None):
    self.tcnet = TCNet(config)
    self.state = LayerState()
    self.track_change_callback = None
    self.status_change_callback = None
    self.layer_change_callback = None
    self.tcnet.broadcast_callback = self.receive_broadcast

  def start(self):
    self.tcnet.start()

  def stop(self):
    self.tcnet.stop()

  def receive_broadcast(self, packet):
    if packet.header.message_type != "status":
      return
    # update state first, callbacks may query it
    changed_tracks, changed_status = self.state.update(packet.track_id, packet.layer_status)
    for layer in changed_tracks:
      logging.debug("Track of layer %d changed to %d", layer, self.state.track_id(layer))
      if self.track_change_callback:
        self.track_change_callback(layer)
    for layer in changed_status:
      logging.debug("Status of layer %d changed to %s", layer, self.state.status(layer))
      if self.status_change_callback:
        self.status_change_callback(layer)
    if (changed_tracks or changed_status) and self.layer_change_callback:
      self.layer_change_callback()

  # called for every layer whose track id changed, argument: LayerIndex
  def set_track_change_callback(self, cb=None):
    self.track_change_callback = cb

  # called for every layer whose status changed, argument: LayerIndex
  def set_status_change_callback(self, cb=None):
    self.status_change_callback = cb

  # called once per status broadcast if any track or status changed
  def set_layer_change_callback(self, cb=None):
    self.layer_change_callback = cb

  def request(self, data_type, layer, match_layer=True):
    future = self.tcnet.request_data(data_type, layer, match_layer)
    try:
      return future.result(timeout=self.tcnet.config.request_timeout)
    except TimeoutError as e:
      self.tcnet.discard_request(future)
      raise RequestError("{} request for layer {} timed out".format(data_type, layer)) from e

  def track_info(self, layer):
    return track_info_from_packet(self.request("metadata", layer))

  def layer_metrics(self, layer):
    return layer_metrics_from_packet(self.request("metrics", layer))

  def beat_grid_data(self, layer):
    return beat_grid_data_from_packet(self.request("beatgrid", layer))

  def mixer_data(self):
    return mixer_data_from_packet(self.request("mixer", 0, match_layer=False))
