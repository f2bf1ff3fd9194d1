# provisioner.py
# Pushes the static forwarding state of the demo onto each switch, once per
# connect cycle:
#   - middle switches cross-connect their two ports (ARP + IPv4, both ways)
#   - edge switches get a fast-failover group over their two uplinks, host
#     traffic goes into the group and uplink traffic goes to the host

import logging

from ryu.lib.dpid import dpid_to_str
from ryu.lib.packet import ether_types

from failover_demo.barrier import DEFAULT_BARRIER_TIMEOUT
from failover_demo.exceptions import (DeviceAbsentError, FailoverError,
                                      HostPortError, ProvisioningError)
from failover_demo.portconfig import physical_ports

LOG = logging.getLogger('ryu.app.fast_failover.provisioner')

# Tags every flow we install so it can be deleted in one flow-mod.
COOKIE = 0x11223344
COOKIE_MASK = 0xffffffffffffffff
FLOW_PRIORITY = 32768
GROUP_ID = 1

ETH_TYPES = (ether_types.ETH_TYPE_ARP, ether_types.ETH_TYPE_IP)


class Provisioner(object):

    def __init__(self, topology, links, tracker, get_datapath, barrier,
                 barrier_timeout=DEFAULT_BARRIER_TIMEOUT):
        self.topology = topology
        self.links = links
        self.tracker = tracker
        self.get_datapath = get_datapath
        self.barrier = barrier
        self.barrier_timeout = barrier_timeout

    def provision_all(self):
        """Provision every switch that has no flows since it last connected.

        Returns True if at least one switch was provisioned. Each switch is
        handled on its own; failures are collected and raised together as
        a ProvisioningError once every switch has been attempted.
        """
        pushed = False
        failures = {}
        for dpid in self.topology.nodes:
            if self.tracker.flows_installed[dpid]:
                continue
            try:
                self.provision(dpid)
            except FailoverError as e:
                LOG.error("Could not insert flows for switch %s: %s",
                          dpid_to_str(dpid), e)
                failures[dpid] = e
                continue
            self.tracker.flows_installed[dpid] = True
            pushed = True
        if failures:
            raise ProvisioningError(failures)
        return pushed

    def provision(self, dpid):
        datapath = self.get_datapath(dpid)
        if datapath is None:
            raise DeviceAbsentError(dpid, self.topology.name(dpid))

        if self.topology.is_middle(dpid):
            self._provision_middle(datapath)
        else:
            self._provision_edge(datapath)
        LOG.info("Inserted flows for switch %s", dpid_to_str(dpid))

    def _provision_middle(self, datapath):
        to_ingress, to_egress = self.links.transit_ports(datapath.id)

        self._clear(datapath, with_group=False)

        for eth_type in ETH_TYPES:
            self._add_output_flow(datapath, to_ingress, eth_type, to_egress)
            self._add_output_flow(datapath, to_egress, eth_type, to_ingress)

    def _provision_edge(self, datapath):
        port_a, port_b = self.links.uplink_ports(datapath.id)
        # Resolve before touching the switch; a bad port layout is fatal.
        host_port = self.host_port(datapath, (port_a, port_b))

        self._clear(datapath, with_group=True)

        self._add_failover_group(datapath, port_a, port_b)
        parser = datapath.ofproto_parser
        to_group = [parser.OFPActionGroup(GROUP_ID)]
        for eth_type in ETH_TYPES:
            self._add_flow(datapath, host_port, eth_type, to_group)
            self._add_output_flow(datapath, port_a, eth_type, host_port)
            self._add_output_flow(datapath, port_b, eth_type, host_port)

    def host_port(self, datapath, uplinks):
        """The one port of an edge switch that is neither uplink nor reserved."""
        candidates = [port_no for port_no in physical_ports(datapath)
                      if port_no not in uplinks]
        if len(candidates) != 1:
            LOG.error("Error locating port on switch %s. Possible ports: %s",
                      dpid_to_str(datapath.id), sorted(datapath.ports))
            raise HostPortError(datapath.id, candidates)
        return candidates[0]

    def _clear(self, datapath, with_group):
        ofp = datapath.ofproto
        parser = datapath.ofproto_parser

        datapath.send_msg(parser.OFPFlowMod(
            datapath=datapath,
            cookie=COOKIE,
            cookie_mask=COOKIE_MASK,
            table_id=ofp.OFPTT_ALL,
            command=ofp.OFPFC_DELETE,
            out_port=ofp.OFPP_ANY,
            out_group=ofp.OFPG_ANY))
        if with_group:
            datapath.send_msg(parser.OFPGroupMod(
                datapath, command=ofp.OFPGC_DELETE, type_=ofp.OFPGT_FF,
                group_id=GROUP_ID))

        # Stale entries must be gone before the new ones go in. A missing
        # reply doesn't mean the deletes were lost, so carry on regardless.
        self.barrier(datapath, self.barrier_timeout)

    def _add_failover_group(self, datapath, port_a, port_b):
        ofp = datapath.ofproto
        parser = datapath.ofproto_parser
        buckets = [parser.OFPBucket(watch_port=port,
                                    watch_group=ofp.OFPG_ANY,
                                    actions=[parser.OFPActionOutput(port)])
                   for port in (port_a, port_b)]
        datapath.send_msg(parser.OFPGroupMod(
            datapath, command=ofp.OFPGC_ADD, type_=ofp.OFPGT_FF,
            group_id=GROUP_ID, buckets=buckets))

    def _add_output_flow(self, datapath, in_port, eth_type, out_port):
        parser = datapath.ofproto_parser
        self._add_flow(datapath, in_port, eth_type,
                       [parser.OFPActionOutput(out_port)])

    def _add_flow(self, datapath, in_port, eth_type, actions):
        ofp = datapath.ofproto
        parser = datapath.ofproto_parser
        inst = [parser.OFPInstructionActions(ofp.OFPIT_APPLY_ACTIONS, actions)]
        datapath.send_msg(parser.OFPFlowMod(
            datapath=datapath,
            cookie=COOKIE,
            priority=FLOW_PRIORITY,
            idle_timeout=0,
            hard_timeout=0,
            match=parser.OFPMatch(in_port=in_port, eth_type=eth_type),
            instructions=inst))
