# links.py
# Learns the four inter-switch links of the topology from LLDP discovery.

import logging

from ryu.lib.dpid import dpid_to_str

from failover_demo.exceptions import TopologyIncompleteError

LOG = logging.getLogger('ryu.app.fast_failover.links')


class LinkRegistry(object):
    """Holds one slot per required (src, dst) pair of the topology.

    A slot is filled by the first matching link that is observed and keeps
    that link until one of its endpoints disconnects, because the port
    numbers can change when a switch comes back.
    """

    def __init__(self, topology):
        self.topology = topology
        self._slots = dict((pair, None) for pair in topology.required_pairs)

    def record_observed_edges(self, edges):
        """Merge discovered links into the empty slots. Returns the new ones."""
        learned = []
        for link in edges:
            pair = (link.src, link.dst)
            if pair not in self._slots or self._slots[pair] is not None:
                continue
            self._slots[pair] = link
            learned.append(link)
            LOG.info("Learned Link: %s:%s -> %s:%s", dpid_to_str(link.src),
                     link.src_port, dpid_to_str(link.dst), link.dst_port)
        return learned

    def all_links_known(self):
        return all(link is not None for link in self._slots.values())

    def missing(self):
        return [pair for pair, link in self._slots.items() if link is None]

    def clear_links_for(self, dpid):
        for pair in self._slots:
            if dpid in pair:
                self._slots[pair] = None

    def get(self, src, dst):
        return self._slots.get((src, dst))

    def snapshot(self):
        return dict(self._slots)

    def _require(self, src, dst):
        link = self._slots.get((src, dst))
        if link is None:
            raise TopologyIncompleteError([(src, dst)])
        return link

    def uplink_ports(self, dpid):
        """Return (path A port, path B port) on an edge switch."""
        topo = self.topology
        if dpid == topo.ingress:
            return (self._require(topo.ingress, topo.mid_a).src_port,
                    self._require(topo.ingress, topo.mid_b).src_port)
        if dpid == topo.egress:
            return (self._require(topo.mid_a, topo.egress).dst_port,
                    self._require(topo.mid_b, topo.egress).dst_port)
        raise ValueError("%s is not an edge switch" % dpid_to_str(dpid))

    def transit_ports(self, dpid):
        """Return (port towards ingress, port towards egress) on a middle switch."""
        topo = self.topology
        if not topo.is_middle(dpid):
            raise ValueError("%s is not a middle switch" % dpid_to_str(dpid))
        return (self._require(topo.ingress, dpid).dst_port,
                self._require(dpid, topo.egress).src_port)
