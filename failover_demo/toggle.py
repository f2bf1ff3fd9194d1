# toggle.py
# Flips traffic between path A (via s2a) and path B (via s2b) by setting the
# uplink ports of the edge switches administratively up or down. The
# fast-failover groups then pick whichever uplink is live.

import logging

from ryu.lib.dpid import dpid_to_str

from failover_demo.exceptions import (DeviceAbsentError, NotReadyError,
                                      TopologyIncompleteError)
from failover_demo.nodes import PATH_A, PATH_B
from failover_demo.portconfig import build_port_mod, set_all_ports_up

LOG = logging.getLogger('ryu.app.fast_failover.toggle')


class PathToggleEngine(object):

    def __init__(self, topology, links, tracker, provisioner, get_datapath,
                 get_links):
        self.topology = topology
        self.links = links
        self.tracker = tracker
        self.provisioner = provisioner
        self.get_datapath = get_datapath
        self.get_links = get_links
        # The path the next toggle brings up; the other one goes down.
        self.using_path_a = True
        # None until the first toggle, all ports are up after connect.
        self.live_path = None

    @property
    def next_path(self):
        return PATH_A if self.using_path_a else PATH_B

    def learn_links(self):
        if not self.links.all_links_known():
            self.links.record_observed_edges(self.get_links())
        return self.links.all_links_known()

    def toggle(self):
        """Bring up the path the selector names and take the other down.

        Returns (pushed, path): whether provisioning did any work and the
        path now carrying traffic. Raises before touching any switch if the
        switches aren't all connected or the links aren't all known.
        """
        if not self.tracker.is_ready():
            raise NotReadyError(self.tracker.snapshot())
        if not self.learn_links():
            raise TopologyIncompleteError(self.links.missing())

        pushed = self.provisioner.provision_all()

        path = self.next_path
        self.use_path(path)
        self.live_path = path
        self.using_path_a = not self.using_path_a
        return pushed, path

    def use_path(self, path):
        # Build every port-mod first so a missing switch or port can't leave
        # one edge flipped and the other not.
        mods = []
        for dpid in self.topology.edges:
            datapath = self._datapath(dpid)
            port_a, port_b = self.links.uplink_ports(dpid)
            up, down = (port_a, port_b) if path == PATH_A else (port_b, port_a)
            mods.append((datapath, build_port_mod(datapath, down, up=False)))
            mods.append((datapath, build_port_mod(datapath, up, up=True)))

        for datapath, mod in mods:
            datapath.send_msg(mod)

        other = PATH_B if path == PATH_A else PATH_A
        LOG.info("Took down ports on path s1--%s--s3 and brought up ports on "
                 "s1--%s--s3",
                 self.topology.name(self.topology.middle_for(other)),
                 self.topology.name(self.topology.middle_for(path)))

    def reset_ports(self, dpid):
        """Set every non-reserved port of a switch admin-up.

        Leaves the flows and the active path alone.
        """
        datapath = self._datapath(dpid)
        return set_all_ports_up(datapath)

    def _datapath(self, dpid):
        datapath = self.get_datapath(dpid)
        if datapath is None:
            LOG.error("No datapath for switch %s", dpid_to_str(dpid))
            raise DeviceAbsentError(dpid, self.topology.name(dpid))
        return datapath
