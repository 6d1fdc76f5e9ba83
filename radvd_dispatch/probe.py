import socket
import typing
import logging
import ipaddress
import pyroute2
from . import DispatchException
from .session import INFINITY


# netlink reports infinite lifetimes as all ones
INFINITY_LIFETIME = 0xffffffff
RT_SCOPE_UNIVERSE = 0

Address = typing.Tuple[str, str, str]  # (prefix, valid, preferred)


class ProbeException(DispatchException):
    pass


def lifetime(seconds: typing.Optional[int]) -> str:
    if seconds is None or seconds == INFINITY_LIFETIME:
        return INFINITY
    return str(seconds)


class AddressProbe(object):
    """Global IPv6 prefixes configured on an interface, as the kernel reports them"""

    def __init__(self, prefixlen: int = 64):
        self.prefixlen = prefixlen

    def probe(self, iface: str) -> typing.List[Address]:
        logging.debug('probe reading addresses of %s' % iface)
        try:
            with pyroute2.IPRoute() as netlink_route:
                indexes = netlink_route.link_lookup(ifname=iface)
                if not indexes:
                    logging.warning('probe interface %s does not exist, no prefixes' % iface)
                    return []
                messages = netlink_route.get_addr(family=socket.AF_INET6, index=indexes[0])
        except (pyroute2.NetlinkError, OSError) as err:
            raise ProbeException('cannot read the addresses of %s. Details: %s' % (iface, err))

        addresses = list()
        for msg in messages:
            if msg['scope'] != RT_SCOPE_UNIVERSE or msg['prefixlen'] != self.prefixlen:
                continue
            address = msg.get_attr('IFA_ADDRESS')
            if address is None:
                continue
            prefix = str(ipaddress.IPv6Interface('%s/%d' % (address, msg['prefixlen'])).network)
            cacheinfo = msg.get_attr('IFA_CACHEINFO')
            if cacheinfo is not None:
                valid, preferred = lifetime(cacheinfo['ifa_valid']), lifetime(cacheinfo['ifa_preferred'])
            else:
                valid, preferred = INFINITY, INFINITY
            logging.debug('probe %s: %s valid %s preferred %s' % (iface, prefix, valid, preferred))
            addresses.append((prefix, valid, preferred))
        return addresses
