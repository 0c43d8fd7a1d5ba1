#!/usr/bin/env python3

import logging
import sys
import time
from threading import Thread

from tcnet.core.pioneer import PioneerDJClient
from tcnet.network.exceptions import RequestError

default_loglevel=logging.DEBUG
#default_loglevel=logging.INFO
#default_loglevel=logging.WARNING

logging.basicConfig(level=default_loglevel, format='%(levelname)s: %(message)s')

p = PioneerDJClient()
if len(sys.argv) > 1:
  p.tcnet.config.broadcast_interface = sys.argv[1]

def lookup_track(layer):
  logging.info("Layer {}: track {}".format(layer.name, p.state.track_id(layer)))
  try:
    info = p.track_info(layer)
    logging.info("Layer {} playing {} - {} ({})".format(layer.name,
      info["track_artist"], info["track_title"], info["track_key"]))
  except RequestError as e:
    logging.warning("Layer {}: {}".format(layer.name, e))

# callbacks run in the receive thread, replies would never arrive while blocking it
def print_track(layer):
  Thread(target=lookup_track, args=(layer,), daemon=True).start()

def print_status(layer):
  logging.info("Layer {}: {}".format(layer.name, p.state.status(layer)))

def print_layers():
  logging.info("Tracks {} Status {}".format(p.state.track_ids(), p.state.statuses()))

def print_nodes(node):
  for n in p.tcnet.nodes.nodes:
    logging.info("Node {} ({}) at {}: {} {}".format(n.node_name, n.node_id, n.ip_addr, n.vendor_name, n.app_name))

p.set_track_change_callback(print_track)
p.set_status_change_callback(print_status)
p.set_layer_change_callback(print_layers)
p.tcnet.nodes.node_change_callback = print_nodes

try:
  p.start()
  while True:
    time.sleep(1)
except KeyboardInterrupt:
  logging.info("Shutting down...")
  p.stop()
