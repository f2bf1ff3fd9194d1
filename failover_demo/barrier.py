# barrier.py
# Barrier request/reply with a bounded wait.
#
# Loaded as a _CONTEXTS entry of the main app so it gets an event loop of
# its own: barrier replies keep being dispatched while the main app's loop
# is blocked behind a toggle that is waiting for one.

import logging

from ryu.base import app_manager
from ryu.controller import ofp_event
from ryu.controller.handler import MAIN_DISPATCHER
from ryu.controller.handler import set_ev_cls
from ryu.lib import hub
from ryu.lib.dpid import dpid_to_str

LOG = logging.getLogger('ryu.app.fast_failover.barrier')

DEFAULT_BARRIER_TIMEOUT = 10.0


class BarrierTracker(app_manager.RyuApp):

    def __init__(self, *args, **kwargs):
        super(BarrierTracker, self).__init__(*args, **kwargs)
        # (dpid, xid) -> hub.Event
        self._waiters = {}

    def barrier(self, datapath, timeout=DEFAULT_BARRIER_TIMEOUT):
        """Send a barrier and wait for its reply.

        Returns True when the switch confirmed the barrier, False when the
        timeout expired first.
        """
        req = datapath.ofproto_parser.OFPBarrierRequest(datapath)
        datapath.set_xid(req)
        key = (datapath.id, req.xid)
        waiter = hub.Event()
        self._waiters[key] = waiter
        try:
            datapath.send_msg(req)
            replied = waiter.wait(timeout=timeout)
        finally:
            del self._waiters[key]
        if not replied:
            LOG.warning("Switch %s doesn't support barrier messages? OVS should.",
                        dpid_to_str(datapath.id))
        return replied

    @set_ev_cls(ofp_event.EventOFPBarrierReply, MAIN_DISPATCHER)
    def barrier_reply_handler(self, ev):
        msg = ev.msg
        waiter = self._waiters.get((msg.datapath.id, msg.xid))
        if waiter is not None:
            waiter.set()
