# exceptions.py
# Errors raised by the failover engine. Only the service layer turns them
# into STATUS/DETAILS replies.

from ryu.lib.dpid import dpid_to_str


class FailoverError(Exception):
    pass


class NotReadyError(FailoverError):
    """Not every switch of the topology is connected."""

    def __init__(self, snapshot):
        self.snapshot = snapshot
        super(NotReadyError, self).__init__(
            "Not all switches are connected. Switch status: %s" % snapshot)


class TopologyIncompleteError(FailoverError):

    def __init__(self, missing):
        self.missing = missing
        super(TopologyIncompleteError, self).__init__(
            "Have not learned all links in topology. Try again after a few "
            "moments. Make sure all ports are set up to enable LLDP to "
            "discover missing links.")


class DeviceAbsentError(FailoverError):

    def __init__(self, node, name=None):
        self.node = node
        super(DeviceAbsentError, self).__init__(
            "Switch service does not see %s connected. Check the control "
            "plane to verify %s is in fact connected to the controller."
            % (name or node, name or node))


class HostPortError(FailoverError):
    """The host-facing port of an edge switch is missing or ambiguous."""

    def __init__(self, node, candidates):
        self.node = node
        self.candidates = sorted(candidates)
        if self.candidates:
            reason = "ambiguous host port, candidates %s" % self.candidates
        else:
            reason = "no host port found"
        super(HostPortError, self).__init__(
            "Could not find host port on switch %s: %s" % (dpid_to_str(node), reason))


class PortNotFoundError(FailoverError):

    def __init__(self, node, port_no):
        self.node = node
        self.port_no = port_no
        super(PortNotFoundError, self).__init__(
            "Port %s is not in the port list of switch %s"
            % (port_no, dpid_to_str(node)))


class UnsupportedVersionError(FailoverError):

    def __init__(self, version):
        self.version = version
        super(UnsupportedVersionError, self).__init__(
            "Bad OpenFlow version 0x%02x" % version)


class ProvisioningError(FailoverError):
    """One or more switches could not be provisioned.

    ``failures`` maps each failed dpid to the exception it raised. Switches
    not listed were provisioned (or already were) during the same call.
    """

    def __init__(self, failures):
        self.failures = failures
        detail = '; '.join(str(exc) for exc in failures.values())
        super(ProvisioningError, self).__init__(
            "Could not insert flows on %d switch(es): %s"
            % (len(failures), detail))
