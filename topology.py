# topology.py
# Mininet custom topology: 2 hosts, 4 switches, two redundant paths
#
#            +-- s2a --+
#   h1 -- s1 |         | s3 -- h2
#            +-- s2b --+
from mininet.topo import Topo
from mininet.net import Mininet
from mininet.node import RemoteController, OVSSwitch
from mininet.link import TCLink
from mininet.cli import CLI
from mininet.log import setLogLevel, info
from ryu.lib.dpid import dpid_to_str

from failover_demo.nodes import DEFAULT_TOPOLOGY


class FastFailoverTopo(Topo):
    def build(self, topology=DEFAULT_TOPOLOGY):
        # Switch names and dpids must match what the controller expects
        s1, s2a, s2b, s3 = [
            self.addSwitch(name, dpid=dpid_to_str(dpid), protocols='OpenFlow13')
            for name, dpid in zip(topology.NAMES, topology.nodes)]

        h1 = self.addHost('h1', ip='10.0.0.1/24')
        h2 = self.addHost('h2', ip='10.0.0.2/24')

        # host-facing ports first so each edge switch has exactly one
        self.addLink(h1, s1)
        self.addLink(h2, s3)

        # path A: s1 - s2a - s3
        self.addLink(s1, s2a)
        self.addLink(s2a, s3)

        # path B: s1 - s2b - s3
        self.addLink(s1, s2b)
        self.addLink(s2b, s3)


def run():
    topo = FastFailoverTopo()
    # Controller is expected to be the remote Ryu app (default port 6633/6653)
    net = Mininet(topo=topo, controller=RemoteController, switch=OVSSwitch,
                  link=TCLink, autoSetMacs=True)
    net.start()
    info("Toggle paths with: curl -X POST "
         "http://127.0.0.1:8080/wm/fast-failover-demo/toggle-path\n")
    CLI(net)
    net.stop()


if __name__ == '__main__':
    setLogLevel('info')
    run()
