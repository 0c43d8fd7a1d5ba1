import time
import logging

class NodeList:
  def __init__(self, tcnet):
    self.nodes = []
    self.node_change_callback = None
    self.node_timeout = 5
    self.tcnet = tcnet

  def __len__(self):
    return len(self.nodes)

  def getNode(self, ip_addr, node_id):
    return next((n for n in self.nodes if n.ip_addr == ip_addr and n.node_id == node_id), None)

  # the data server answering requests, usually a bridge
  def getMaster(self):
    return next((n for n in self.nodes if n.node_type is not None and n.node_type.master), None)

  def _eatHeader(self, packet, addr):
    header = packet.header
    n = self.getNode(addr[0], header.node_id)
    if n is None:
      n = Node()
      n.ip_addr = addr[0]
      n.node_id = header.node_id
      n.node_name = header.node_name
      self.nodes += [n]
      logging.info("New node %s (%d) at %s", n.node_name, n.node_id, n.ip_addr)
      changed = True
    else:
      changed = n.node_name != header.node_name
      n.node_name = header.node_name
    n.node_type = header.node_type
    n.seq = header.seq
    n.updateTtl()
    return n, changed

  def eatOptIn(self, packet, addr):
    n, changed = self._eatHeader(packet, addr)
    if n.listener_port != packet.listener_port or n.app_name != packet.app_name:
      changed = True
    n.listener_port = packet.listener_port
    n.vendor_name = packet.vendor_name
    n.app_name = packet.app_name
    n.version = "{}.{}.{}".format(packet.major_version, packet.minor_version, packet.bug_version)
    n.uptime = packet.uptime
    if changed and self.node_change_callback:
      self.node_change_callback(n)

  def eatStatus(self, packet, addr):
    n, changed = self._eatHeader(packet, addr)
    if n.listener_port != packet.listener_port:
      n.listener_port = packet.listener_port
      changed = True
    if changed and self.node_change_callback:
      self.node_change_callback(n)

  def eatOptOut(self, packet, addr):
    n = self.getNode(addr[0], packet.header.node_id)
    if n is None:
      return
    logging.info("Node %s (%d) at %s left", n.node_name, n.node_id, n.ip_addr)
    self.nodes.remove(n)
    if self.node_change_callback:
      self.node_change_callback(n)

  # checks ttl and clears expired nodes
  def gc(self):
    cur_nodes = self.nodes
    self.nodes = []
    for node in cur_nodes:
      if not node.ttlExpired(self.node_timeout):
        self.nodes += [node]
      else:
        logging.info("Node {} ({}) dropped due to timeout".format(node.node_name, node.node_id))
        if self.node_change_callback:
          self.node_change_callback(node)

  # returns a list of ips of all nodes (used to guess own interface)
  def getNodeIps(self):
    return [node.ip_addr for node in self.nodes]

class Node:
  def __init__(self):
    self.ip_addr = ""
    self.node_id = 0
    self.node_name = ""
    self.node_type = None
    self.seq = 0
    self.listener_port = 0
    self.vendor_name = ""
    self.app_name = ""
    self.version = ""
    self.uptime = 0
    self.ttl = time.time()

  def updateTtl(self):
    self.ttl = time.time()

  def ttlExpired(self, timeout):
    return time.time()-self.ttl > timeout
