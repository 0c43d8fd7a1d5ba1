import random

from tcnet.network import packets

class TCNetConfiguration:
  def __init__(self):
    # if set, the broadcast address is taken from this interface
    self.broadcast_interface = None
    self.broadcast_address = "255.255.255.255"
    self.broadcast_port = packets.BroadcastPort
    self.time_port = packets.TimePort
    self.listen_address = "0.0.0.0"
    self.unicast_port = packets.UnicastPort
    self.node_id = random.randint(0, 0xffff)
    self.node_name = "TCNET.PY"
    self.node_type = "slave"
    self.node_options = 7
    self.vendor_name = "PYTHON-TCNET"
    self.app_name = "TCNET.PY"
    self.app_version = (1, 0, 0)
    self.announce_interval = 1.0 # seconds between opt-in packets
    self.node_timeout = 5 # seconds until a silent node is dropped
    self.request_timeout = 2.0 # seconds
