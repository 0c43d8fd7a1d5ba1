import netifaces as ni
from ipaddress import IPv4Address, IPv4Network
import logging

def interface_broadcast_address(iface):
  if iface not in ni.interfaces():
    raise ValueError("Interface {} does not exist".format(iface))
  ifa = ni.ifaddresses(iface)
  if ni.AF_INET not in ifa or len(ifa[ni.AF_INET]) == 0:
    raise ValueError("Interface {} does not have an IPv4 address".format(iface))
  addr = ifa[ni.AF_INET][0]
  if 'broadcast' in addr:
    return addr['broadcast']
  net = IPv4Network(addr['addr']+"/"+addr['netmask'], strict=False)
  return str(net.broadcast_address)

def guess_own_iface(match_ips):
  if len(match_ips) == 0:
    return None

  for iface in ni.interfaces():
    ifa = ni.ifaddresses(iface)

    if ni.AF_INET not in ifa or len(ifa[ni.AF_INET]) == 0:
      logging.debug("{} has no IPv4 address, skipped.".format(iface))
      continue

    for addr in ifa[ni.AF_INET]:
      if 'addr' not in addr or 'netmask' not in addr:
        continue
      net = IPv4Network(addr['addr']+"/"+addr['netmask'], strict=False)
      if any([IPv4Address(ip) in net for ip in match_ips]):
        return iface, addr['addr'], addr['netmask'], str(net.broadcast_address)

  return None
