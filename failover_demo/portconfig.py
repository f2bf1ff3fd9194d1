# portconfig.py
# Administrative port up/down via OFPPortMod.

import logging

from ryu.ofproto import ofproto_v1_0
from ryu.ofproto import ofproto_v1_2
from ryu.ofproto import ofproto_v1_3
from ryu.ofproto import ofproto_v1_4
from ryu.ofproto import ofproto_v1_5

from failover_demo.exceptions import PortNotFoundError, UnsupportedVersionError

LOG = logging.getLogger('ryu.app.fast_failover.portconfig')

# The OFPPC_PORT_DOWN bit per wire version.
PORT_DOWN_BITS = {
    ofproto_v1_0.OFP_VERSION: ofproto_v1_0.OFPPC_PORT_DOWN,
    ofproto_v1_2.OFP_VERSION: ofproto_v1_2.OFPPC_PORT_DOWN,
    ofproto_v1_3.OFP_VERSION: ofproto_v1_3.OFPPC_PORT_DOWN,
    ofproto_v1_4.OFP_VERSION: ofproto_v1_4.OFPPC_PORT_DOWN,
    ofproto_v1_5.OFP_VERSION: ofproto_v1_5.OFPPC_PORT_DOWN,
}


def port_down_bit(version):
    try:
        return PORT_DOWN_BITS[version]
    except KeyError:
        raise UnsupportedVersionError(version)


def is_reserved(datapath, port_no):
    ofp = datapath.ofproto
    return port_no == ofp.OFPP_LOCAL or port_no > ofp.OFPP_MAX


def physical_ports(datapath):
    return sorted(port_no for port_no in datapath.ports
                  if not is_reserved(datapath, port_no))


def build_port_mod(datapath, port_no, up):
    """Build the OFPPortMod setting port_no admin up or down.

    The hardware address is copied from the switch's own port description;
    some switches reject a port-mod whose hw_addr does not match.
    """
    port = datapath.ports.get(port_no)
    if port is None:
        raise PortNotFoundError(datapath.id, port_no)
    down = port_down_bit(datapath.ofproto.OFP_VERSION)
    return datapath.ofproto_parser.OFPPortMod(
        datapath=datapath,
        port_no=port_no,
        hw_addr=port.hw_addr,
        config=0 if up else down,
        mask=down)


def set_all_ports_up(datapath):
    """Enable every non-reserved port. Returns the port numbers touched."""
    mods = [build_port_mod(datapath, port_no, up=True)
            for port_no in physical_ports(datapath)]
    for mod in mods:
        datapath.send_msg(mod)
    LOG.info("Reset ports %s on switch %s to enabled/up",
             [mod.port_no for mod in mods], datapath.id)
    return [mod.port_no for mod in mods]
