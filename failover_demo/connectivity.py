# connectivity.py
# Tracks which of the topology's switches are connected and which of them
# have had their flows and groups pushed since they last connected.

import logging

from ryu.lib.dpid import dpid_to_str

LOG = logging.getLogger('ryu.app.fast_failover.connectivity')


class ConnectivityTracker(object):

    def __init__(self, topology, links):
        self.topology = topology
        self.links = links
        self.connected = dict((dpid, False) for dpid in topology.nodes)
        self.flows_installed = dict((dpid, False) for dpid in topology.nodes)
        self.all_connected = False

    def is_tracked(self, dpid):
        return dpid in self.connected

    def on_connect(self, dpid):
        """Mark a switch connected. Returns False for switches we don't track."""
        if not self.is_tracked(dpid):
            return False
        self.connected[dpid] = True
        self.all_connected = all(self.connected.values())
        if self.all_connected:
            LOG.info("All switches connected. Ready to rock!")
        return True

    def on_disconnect(self, dpid):
        if not self.is_tracked(dpid):
            return False
        self.connected[dpid] = False
        self.flows_installed[dpid] = False
        self.all_connected = False
        # Port numbers may differ when the switch comes back.
        self.links.clear_links_for(dpid)
        LOG.error("Switch %s disconnected! Check control network.",
                  dpid_to_str(dpid))
        return True

    def is_ready(self):
        return self.all_connected

    def snapshot(self):
        return dict((dpid_to_str(dpid), up) for dpid, up in self.connected.items())
