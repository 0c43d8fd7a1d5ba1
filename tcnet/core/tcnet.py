import socket
import logging
import time
from concurrent.futures import Future
from threading import Lock, Thread
from select import select

from tcnet.core.announcer import Announcer
from tcnet.core.config import TCNetConfiguration
from tcnet.core.nodelist import NodeList
from tcnet.network import codec
from tcnet.network import packets
from tcnet.network import packets_dump
from tcnet.network.exceptions import RequestError
from tcnet.network.ip import guess_own_iface, interface_broadcast_address

class TCNet(Thread):
  def __init__(self, config=None):
    super().__init__(daemon=True)
    self.config = config if config is not None else TCNetConfiguration()
    self.nodes = NodeList(self)
    self.nodes.node_timeout = self.config.node_timeout
    self.announcer = Announcer(self)
    self.broadcast_callback = None
    self.time_callback = None
    self.data_callback = None
    self.requests = dict() # (data_type, layer) -> list of futures
    self.requests_lock = Lock()
    self.seq = 0
    self.seq_lock = Lock()
    self.start_time = time.time()
    self.keep_running = False
    self.own_iface = None

  def _udp_socket(self, ip, port, broadcast=False):
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    if broadcast:
      sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    sock.bind((ip, port))
    return sock

  def start(self):
    if self.config.broadcast_interface is not None:
      self.config.broadcast_address = interface_broadcast_address(self.config.broadcast_interface)
      self.own_iface = self.config.broadcast_interface
      logging.info("Using interface {} broadcast address {}".format(self.own_iface, self.config.broadcast_address))
    self.broadcast_sock = self._udp_socket(self.config.listen_address, self.config.broadcast_port, broadcast=True)
    logging.info("Listening on {}:{} for broadcast packets".format(self.config.listen_address, self.config.broadcast_port))
    self.time_sock = self._udp_socket(self.config.listen_address, self.config.time_port, broadcast=True)
    logging.info("Listening on {}:{} for time packets".format(self.config.listen_address, self.config.time_port))
    self.unicast_sock = self._udp_socket(self.config.listen_address, self.config.unicast_port)
    logging.info("Listening on {}:{} for unicast packets".format(self.config.listen_address, self.config.unicast_port))
    self.socks = [self.broadcast_sock, self.time_sock, self.unicast_sock]
    self.start_time = time.time()
    self.keep_running = True
    super().start()
    self.announcer.start()

  def stop(self):
    self.announcer.stop()
    self.announcer.join()
    self.keep_running = False
    self.join()
    for sock in self.socks:
      sock.close()
    with self.requests_lock:
      pending = [f for futures in self.requests.values() for f in futures]
      self.requests = dict()
    for future in pending:
      future.cancel()

  def run(self):
    logging.debug("starting main loop")
    while self.keep_running:
      rdy = select(self.socks,[],[],1)[0]
      for sock in rdy:
        data, addr = sock.recvfrom(4096) # largest packet is a beat grid chunk with 2442 bytes
        self.handle_packet(data, addr)
      self.nodes.gc()
    logging.debug("main loop finished")

  def is_own_packet(self, packet):
    return packet.header.node_id == self.config.node_id and packet.header.node_name == self.config.node_name

  def handle_packet(self, data, addr):
    packet = codec.try_parse_packet(data, addr)
    if packet is None or self.is_own_packet(packet):
      return
    message_type = packet.header.message_type
    if message_type == "optin":
      self.nodes.eatOptIn(packet, addr)
      self.guess_broadcast_address()
    elif message_type == "optout":
      self.nodes.eatOptOut(packet, addr)
    elif message_type == "status":
      self.nodes.eatStatus(packet, addr)
      packets_dump.dump_status_packet(packet)
    elif message_type == "time":
      packets_dump.dump_time_packet(packet)
      if self.time_callback:
        self.time_callback(packet)
      return
    elif message_type == "data":
      packets_dump.dump_data_packet(packet)
      self.resolve_request(packet)
      if self.data_callback:
        self.data_callback(packet)
      return
    if self.broadcast_callback:
      self.broadcast_callback(packet)

  # without a configured interface, use the subnet of the first node we see
  def guess_broadcast_address(self):
    if self.own_iface is not None:
      return
    iface = guess_own_iface(self.nodes.getNodeIps())
    if iface is not None:
      self.own_iface = iface[0]
      self.config.broadcast_address = iface[3]
      logging.info("Guessed own interface {} ip {} mask {} broadcast {}".format(*iface))

  def next_header(self):
    with self.seq_lock:
      self.seq = (self.seq+1) % 256
      seq = self.seq
    return {
      "node_id": self.config.node_id,
      "node_name": self.config.node_name,
      "seq": seq,
      "node_type": self.config.node_type,
      "node_options": self.config.node_options,
      "timestamp": int((time.time()-self.start_time)*1000) & 0xffffffff
    }

  def send_broadcast(self, data):
    self.broadcast_sock.sendto(data, (self.config.broadcast_address, self.config.broadcast_port))

  def send_to(self, data, addr):
    self.unicast_sock.sendto(data, addr)

  # with match_layer=False any reply of the data type resolves the request,
  # mixer data replies carry the mixer id instead of the requested layer
  def request_data(self, data_type, layer, match_layer=True):
    # replies carry the data type by name
    if not isinstance(data_type, str):
      data_type = packets.DataType.decmapping.get(data_type, data_type)
    future = Future()
    master = self.nodes.getMaster()
    if master is None:
      future.set_exception(RequestError("no data server known to request {} of layer {}".format(data_type, layer)))
      return future
    data = codec.RequestCodec.build({
      "header": self.next_header(),
      "data_type": data_type,
      "layer": layer
    })
    key = (data_type, layer if match_layer else None)
    with self.requests_lock:
      self.requests.setdefault(key, []).append(future)
    logging.debug("request {} of layer {} from {}:{}".format(data_type, layer, master.ip_addr, master.listener_port))
    self.send_to(data, (master.ip_addr, master.listener_port))
    return future

  def discard_request(self, future):
    with self.requests_lock:
      for key, futures in list(self.requests.items()):
        if future in futures:
          futures.remove(future)
        if not futures:
          del self.requests[key]

  def resolve_request(self, packet):
    with self.requests_lock:
      futures = self.requests.pop((packet.data_type, packet.layer), [])
      futures += self.requests.pop((packet.data_type, None), [])
    for future in futures:
      if future.set_running_or_notify_cancel():
        future.set_result(packet)
