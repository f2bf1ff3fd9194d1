# failover_demo
# Fast-failover demo engine for a fixed four-switch, two-path topology

__version__ = '0.1.0'
