from enum import IntEnum
from threading import Lock

from tcnet.network.exceptions import InvalidLayerCount
from tcnet.network.packets import LayerCount, LayerStatus

class LayerIndex(IntEnum):
  Layer1 = 1
  Layer2 = 2
  Layer3 = 3
  Layer4 = 4
  LayerA = 5
  LayerB = 6
  LayerM = 7
  LayerC = 8

# deck number 1..4 to layer index
def layer_to_index(layer):
  if not 1 <= layer <= 4:
    raise ValueError("Layer number must be in the range of 1-4, got {}".format(layer))
  return LayerIndex(layer)

def diff_layers(stored, values):
  """Compare one value per layer against the stored ones.

  Returns the new stored tuple and the ascending list of changed layers.
  """
  values = tuple(values)
  if len(values) != LayerCount or len(stored) != LayerCount:
    raise InvalidLayerCount("there must be data for exactly {} layers, got {}".format(LayerCount, len(values)))
  changed = [LayerIndex(n+1) for n in range(LayerCount) if stored[n] != values[n]]
  return values, changed

# raw status codes are stored by name, like the decoded packets carry them
def status_names(status):
  return [LayerStatus.decmapping.get(x, x) if isinstance(x, int) else x for x in status]

class LayerState:
  """Last known track id and status of every layer.

  Only the update methods mutate the state. They are serialized by a lock,
  use update() to apply the track ids and status of one broadcast together.
  """
  def __init__(self):
    self._track_id = (-1,)*LayerCount # unknown
    self._status = ("idle",)*LayerCount
    self._lock = Lock()

  def track_id(self, layer):
    return self._track_id[LayerIndex(layer)-1]

  def status(self, layer):
    return self._status[LayerIndex(layer)-1]

  def track_ids(self):
    return self._track_id

  def statuses(self):
    return self._status

  def update_track_ids(self, track_ids):
    with self._lock:
      self._track_id, changed = diff_layers(self._track_id, track_ids)
    return changed

  def update_status(self, status):
    with self._lock:
      self._status, changed = diff_layers(self._status, status_names(status))
    return changed

  def update(self, track_ids, status):
    with self._lock:
      new_track_id, changed_tracks = diff_layers(self._track_id, track_ids)
      new_status, changed_status = diff_layers(self._status, status_names(status))
      self._track_id = new_track_id
      self._status = new_status
    return changed_tracks, changed_status
