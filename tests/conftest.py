from collections import namedtuple

import pytest
from ryu.ofproto import ofproto_v1_3, ofproto_v1_3_parser

from failover_demo.nodes import DEFAULT_TOPOLOGY, Link
from failover_demo.service import FastFailoverService

TOPO = DEFAULT_TOPOLOGY
S1, S2A, S2B, S3 = TOPO.nodes

FakePort = namedtuple('FakePort', ['port_no', 'hw_addr', 'config'])

# Port 1 faces the host on the edge switches; on the middle switches port 1
# faces s1 and port 2 faces s3.
PORTS = {
    S1: [1, 2, 3],
    S2A: [1, 2],
    S2B: [1, 2],
    S3: [1, 2, 3],
}

LINKS = [
    Link(S1, 2, S2A, 1), Link(S2A, 1, S1, 2),
    Link(S1, 3, S2B, 1), Link(S2B, 1, S1, 3),
    Link(S2A, 2, S3, 2), Link(S3, 2, S2A, 2),
    Link(S2B, 2, S3, 3), Link(S3, 3, S2B, 2),
]


class FakeDatapath(object):
    """Records every message sent to it instead of writing to a socket."""

    def __init__(self, dpid, port_nos, ofproto=ofproto_v1_3,
                 parser=ofproto_v1_3_parser, local=True):
        self.id = dpid
        self.ofproto = ofproto
        self.ofproto_parser = parser
        self.ports = {}
        for port_no in port_nos:
            self.add_port(port_no)
        if local:
            self.add_port(ofproto.OFPP_LOCAL)
        self.sent = []
        self.xid = 0
        self.on_send = None

    def add_port(self, port_no):
        hw_addr = '00:00:00:%02x:00:%02x' % (self.id & 0xff, port_no & 0xff)
        self.ports[port_no] = FakePort(port_no, hw_addr, 0)

    def set_xid(self, msg):
        self.xid += 1
        msg.set_xid(self.xid)
        return self.xid

    def send_msg(self, msg):
        if msg.xid is None:
            self.set_xid(msg)
        self.sent.append(msg)
        if self.on_send is not None:
            self.on_send(msg)

    def sent_of(self, cls):
        return [msg for msg in self.sent if isinstance(msg, cls)]


class Network(object):
    """Four fake switches, a fake LLDP feed and a service wired to them."""

    def __init__(self):
        self.datapaths = {}
        self.all_datapaths = dict(
            (dpid, FakeDatapath(dpid, ports)) for dpid, ports in PORTS.items())
        self.links = list(LINKS)
        self.barriers = []
        self.barrier_replies = True
        self.service = FastFailoverService(
            TOPO, self.datapaths.get, lambda: list(self.links), self.barrier)

    def barrier(self, datapath, timeout):
        self.barriers.append((datapath.id, timeout))
        return self.barrier_replies

    def connect(self, dpid):
        self.datapaths[dpid] = self.all_datapaths[dpid]
        self.service.switch_connected(dpid)

    def disconnect(self, dpid):
        self.datapaths.pop(dpid, None)
        self.service.switch_disconnected(dpid)

    def connect_all(self):
        for dpid in TOPO.nodes:
            self.connect(dpid)

    def dp(self, dpid):
        return self.all_datapaths[dpid]

    def clear_sent(self):
        for dp in self.all_datapaths.values():
            dp.sent = []

    def total_sent(self):
        return sum(len(dp.sent) for dp in self.all_datapaths.values())


@pytest.fixture
def net():
    return Network()


@pytest.fixture
def ready_net():
    network = Network()
    network.connect_all()
    network.clear_sent()
    return network
