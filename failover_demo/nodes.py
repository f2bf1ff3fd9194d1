# nodes.py
# The fixed diamond topology: an ingress and an egress switch joined by two
# middle switches, one per path.
#
#            +-- s2a --+
#   h1 -- s1 |         | s3 -- h2
#            +-- s2b --+

from collections import namedtuple

from ryu.lib.dpid import dpid_to_str, str_to_dpid

PATH_A = 'A'
PATH_B = 'B'

# A directed link between two switch ports, as reported by LLDP discovery.
Link = namedtuple('Link', ['src', 'src_port', 'dst', 'dst_port'])


def link_from_ryu(link):
    """Convert a ryu.topology Link into our immutable Link tuple."""
    return Link(link.src.dpid, link.src.port_no, link.dst.dpid, link.dst.port_no)


class Topology(namedtuple('Topology', ['ingress', 'mid_a', 'mid_b', 'egress'])):
    __slots__ = ()

    NAMES = ('s1', 's2a', 's2b', 's3')

    @classmethod
    def from_strings(cls, ingress, mid_a, mid_b, egress):
        return cls(str_to_dpid(ingress), str_to_dpid(mid_a),
                   str_to_dpid(mid_b), str_to_dpid(egress))

    @property
    def nodes(self):
        return tuple(self)

    @property
    def edges(self):
        return (self.ingress, self.egress)

    @property
    def middles(self):
        return (self.mid_a, self.mid_b)

    @property
    def required_pairs(self):
        # Order matters: A-side slots first, then B-side.
        return ((self.ingress, self.mid_a), (self.ingress, self.mid_b),
                (self.mid_a, self.egress), (self.mid_b, self.egress))

    def is_edge(self, dpid):
        return dpid in self.edges

    def is_middle(self, dpid):
        return dpid in self.middles

    def name(self, dpid):
        try:
            return self.NAMES[self.nodes.index(dpid)]
        except ValueError:
            return dpid_to_str(dpid)

    def middle_for(self, path):
        return self.mid_a if path == PATH_A else self.mid_b


DEFAULT_TOPOLOGY = Topology.from_strings(
    '0000000000000001', '000000000000002a', '000000000000002b', '0000000000000003')
