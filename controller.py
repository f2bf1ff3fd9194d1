# controller.py
# Ryu app: fast-failover demo on a fixed four-switch, two-path topology
# Compatible with OpenFlow 1.3 and Ryu
#
# Run with link discovery enabled:
#   ryu-manager --observe-links controller.py

import logging

from ryu import cfg
from ryu.app.wsgi import WSGIApplication
from ryu.base import app_manager
from ryu.controller.handler import set_ev_cls
from ryu.lib.dpid import dpid_to_str
from ryu.ofproto import ofproto_v1_3, ofproto_v1_4
from ryu.topology import api as topo_api
from ryu.topology.event import EventSwitchEnter, EventSwitchLeave

from failover_demo.barrier import DEFAULT_BARRIER_TIMEOUT, BarrierTracker
from failover_demo.nodes import Topology, link_from_ryu
from failover_demo.rest import FAILOVER_INSTANCE_NAME, FastFailoverRest
from failover_demo.service import FastFailoverService

LOG = logging.getLogger('ryu.app.fast_failover')
LOG.setLevel(logging.INFO)

CONF = cfg.CONF
CONF.register_opts([
    cfg.StrOpt('ingress-dpid', default='0000000000000001',
               help='datapath id of s1, the switch facing h1'),
    cfg.StrOpt('mid-a-dpid', default='000000000000002a',
               help='datapath id of s2a, the middle switch of path A'),
    cfg.StrOpt('mid-b-dpid', default='000000000000002b',
               help='datapath id of s2b, the middle switch of path B'),
    cfg.StrOpt('egress-dpid', default='0000000000000003',
               help='datapath id of s3, the switch facing h2'),
    cfg.FloatOpt('barrier-timeout', default=DEFAULT_BARRIER_TIMEOUT,
                 help='seconds to wait for a barrier reply'),
], group='fast_failover')


def topology_from_conf(conf):
    opts = conf.fast_failover
    return Topology.from_strings(opts.ingress_dpid, opts.mid_a_dpid,
                                 opts.mid_b_dpid, opts.egress_dpid)


class FastFailoverController(app_manager.RyuApp):
    OFP_VERSIONS = [ofproto_v1_3.OFP_VERSION, ofproto_v1_4.OFP_VERSION]
    _CONTEXTS = {'wsgi': WSGIApplication, 'barriers': BarrierTracker}

    def __init__(self, *args, **kwargs):
        super(FastFailoverController, self).__init__(*args, **kwargs)
        # datapaths: dpid -> datapath object
        self.datapaths = {}
        self.topology = topology_from_conf(CONF)
        self.service = FastFailoverService(
            self.topology,
            get_datapath=self.datapaths.get,
            get_links=self.discovered_links,
            barrier=kwargs['barriers'].barrier,
            barrier_timeout=CONF.fast_failover.barrier_timeout)

        wsgi = kwargs['wsgi']
        wsgi.register(FastFailoverRest, {FAILOVER_INSTANCE_NAME: self.service})
        LOG.info("Fast failover demo module has successfully started.")

    def discovered_links(self):
        return [link_from_ryu(link) for link in topo_api.get_link(self, None)]

    @set_ev_cls(EventSwitchEnter)
    def switch_enter_handler(self, ev):
        dp = ev.switch.dp
        LOG.info("Switch entered: %s", dpid_to_str(dp.id))
        self.datapaths[dp.id] = dp
        self.service.switch_connected(dp.id)

    @set_ev_cls(EventSwitchLeave)
    def switch_leave_handler(self, ev):
        dpid = ev.switch.dp.id
        LOG.info("Switch left: %s", dpid_to_str(dpid))
        self.datapaths.pop(dpid, None)
        self.service.switch_disconnected(dpid)
