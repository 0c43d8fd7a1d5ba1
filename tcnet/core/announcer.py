from threading import Event, Thread
import logging
import time
import traceback

from tcnet.network import codec

class Announcer(Thread):
  def __init__(self, tcnet):
    super().__init__(daemon=True)
    self.tcnet = tcnet
    self.event = Event()
    self.start_time = time.time()

  def start(self):
    self.event.clear()
    self.start_time = time.time()
    super().start()

  def stop(self):
    self.event.set()

  def run(self):
    logging.info("Announcing node {} ({})".format(self.tcnet.config.node_name, self.tcnet.config.node_id))
    try:
      self.send_optin_packet()
      while not self.event.wait(self.tcnet.config.announce_interval):
        self.send_optin_packet()
      self.send_optout_packet()
    except Exception as e:
      logging.critical("Exception in announcer.run: "+str(e)+"\n"+traceback.format_exc())

  def optin_packet(self):
    config = self.tcnet.config
    major, minor, bug = config.app_version
    return {
      "header": self.tcnet.next_header(),
      "node_count": len(self.tcnet.nodes),
      "listener_port": config.unicast_port,
      "uptime": int(time.time()-self.start_time) & 0xffff,
      "vendor_name": config.vendor_name,
      "app_name": config.app_name,
      "major_version": major,
      "minor_version": minor,
      "bug_version": bug
    }

  def send_optin_packet(self):
    self.tcnet.send_broadcast(codec.OptInCodec.build(self.optin_packet()))

  def send_optout_packet(self):
    data = {
      "header": self.tcnet.next_header(),
      "node_count": len(self.tcnet.nodes),
      "listener_port": self.tcnet.config.unicast_port
    }
    self.tcnet.send_broadcast(codec.OptOutCodec.build(data))
