# service.py
# Owns all engine state and serializes every public operation on it.

import logging

from ryu.lib import hub
from ryu.lib.dpid import dpid_to_str

from failover_demo.barrier import DEFAULT_BARRIER_TIMEOUT
from failover_demo.connectivity import ConnectivityTracker
from failover_demo.exceptions import FailoverError
from failover_demo.links import LinkRegistry
from failover_demo.nodes import PATH_A, PATH_B
from failover_demo.provisioner import Provisioner
from failover_demo.toggle import PathToggleEngine

LOG = logging.getLogger('ryu.app.fast_failover.service')

SUCCESS = 'SUCCESS'
ERROR = 'ERROR'


class FastFailoverService(object):
    """The demo's control surface.

    get_datapath(dpid) returns a connected Ryu datapath or None,
    get_links() returns the currently discovered links, and
    barrier(datapath, timeout) does a bounded barrier round trip.
    """

    def __init__(self, topology, get_datapath, get_links, barrier,
                 barrier_timeout=DEFAULT_BARRIER_TIMEOUT):
        self.topology = topology
        self.links = LinkRegistry(topology)
        self.tracker = ConnectivityTracker(topology, self.links)
        self.provisioner = Provisioner(topology, self.links, self.tracker,
                                       get_datapath, barrier, barrier_timeout)
        self.engine = PathToggleEngine(topology, self.links, self.tracker,
                                       self.provisioner, get_datapath,
                                       get_links)
        self.lock = hub.Semaphore()

    def switch_connected(self, dpid):
        with self.lock:
            if not self.tracker.on_connect(dpid):
                return
            # Undo port-downs left over from a previous run so LLDP can get
            # through and the links can be learned.
            try:
                self.engine.reset_ports(dpid)
            except FailoverError as e:
                LOG.error("Could not reset ports on switch %s: %s",
                          dpid_to_str(dpid), e)

    def switch_disconnected(self, dpid):
        with self.lock:
            self.tracker.on_disconnect(dpid)

    def handle_toggle_request(self, body=None):
        # body is accepted but not interpreted
        message = {}
        with self.lock:
            try:
                pushed, path = self.engine.toggle()
            except FailoverError as e:
                LOG.error("Toggle failed: %s", e)
                message['STATUS'] = ERROR
                message['DETAILS'] = str(e)
                return message

        up = self.topology.name(self.topology.middle_for(path))
        message['STATUS'] = SUCCESS
        message['DETAILS'] = (
            ("Inserted groups and flows. " if pushed else "") +
            "Administratively set ports along path %s up and path %s down. "
            "You should observe path %s being chosen by the FAST-FAILOVER "
            "groups, which can be verified by observing packets on %s on "
            "path %s" % (path, PATH_B if path == PATH_A else PATH_A, path, up, path))
        return message

    def handle_reset_request(self, body=None):
        message = {}
        with self.lock:
            for dpid in self.topology.edges:
                name = self.topology.name(dpid)
                key = name.upper()
                try:
                    self.engine.reset_ports(dpid)
                except FailoverError as e:
                    LOG.error("Could not reset %s ports: %s", name, e)
                    message['%s STATUS' % key] = ERROR
                    message['%s DETAILS' % key] = "Could not reset %s. %s" % (name, e)
                    continue
                message['%s STATUS' % key] = SUCCESS
                message['%s DETAILS' % key] = "Reset %s ports to enabled/up." % name
        return message

    def status(self):
        with self.lock:
            switches = {}
            for dpid in self.topology.nodes:
                switches[self.topology.name(dpid)] = {
                    'dpid': dpid_to_str(dpid),
                    'connected': self.tracker.connected[dpid],
                    'flows_installed': self.tracker.flows_installed[dpid],
                }
            links = {}
            for (src, dst), link in self.links.snapshot().items():
                key = '%s-%s' % (self.topology.name(src), self.topology.name(dst))
                links[key] = None if link is None else {
                    'src_port': link.src_port, 'dst_port': link.dst_port}
            return {
                'ready': self.tracker.is_ready(),
                'links_known': self.links.all_links_known(),
                'live_path': self.engine.live_path,
                'next_path': self.engine.next_path,
                'switches': switches,
                'links': links,
            }
