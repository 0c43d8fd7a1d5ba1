import logging

# dump functions for debugging
def dump_status_packet(packet):
  if logging.getLogger().getEffectiveLevel() > 5:
    return
  logging.log(5, "status from {} ({}) seq {} nodes {} port {} smpte {} automaster {}".format(
    packet.header.node_name, packet.header.node_id, packet.header.seq, packet.node_count,
    packet.listener_port, packet.smpte_mode, packet.auto_master_mode))
  for n in range(len(packet.layer_status)):
    logging.log(5, "  layer {} \"{}\" source {} state {} track {}".format(
      n+1, packet.layer_name[n], packet.layer_source[n], packet.layer_status[n], packet.track_id[n]))

def dump_time_packet(packet):
  if logging.getLogger().getEffectiveLevel() > 5:
    return
  logging.log(5, "time from {} smpte {} current {} total {} state {}".format(
    packet.header.node_name, packet.general_smpte_mode,
    "/".join(str(x) for x in packet.current_time), "/".join(str(x) for x in packet.total_time),
    ",".join(str(x) for x in packet.layer_state)))

def dump_data_packet(packet):
  if logging.getLogger().getEffectiveLevel() > 5:
    return
  if packet.data_type == "metrics":
    logging.log(5, "metrics layer {} state {} sync {} bpm {:.2f} pos {}/{} beat {} track {}".format(
      packet.layer, packet.state, packet.sync_master, packet.bpm, packet.current_position,
      packet.track_length, packet.beat_number, packet.track_id))
  elif packet.data_type == "metadata":
    logging.log(5, "metadata layer {} track {} \"{}\" - \"{}\" key {!r}".format(
      packet.layer, packet.track_id, packet.track_artist, packet.track_title, packet.track_key))
  elif packet.data_type == "beatgrid":
    logging.log(5, "beatgrid layer {} size {} packet {}/{} beat {} type {} ts {}".format(
      packet.layer, packet.data_size, packet.packet_no, packet.total_packet, packet.beat_number,
      packet.beat_type, packet.beat_type_timestamp))
  elif packet.data_type == "mixer":
    logging.log(5, "mixer {} \"{}\" type {} master {}/{} crossfader {}".format(
      packet.mixer_id, packet.mixer_name, packet.mixer_type, packet.master_audio_level,
      packet.master_fader_level, packet.cross_fader))
  else:
    logging.warning("BUG: unhandled data type {}".format(packet.data_type))

def dump_packet_raw(data):
  # warning level to get message in case of decoding errors
  logging.warning(" ".join("{:02x}".format(b) for b in data))
