"""
Network Management

Interface probing, wg-quick device control and iptables rule handling.
"""

from .interface_prober import InterfaceProber
from .device_control import WgQuickDeviceControl
from .rule_engine import IptablesRuleEngine

__all__ = ["InterfaceProber", "WgQuickDeviceControl", "IptablesRuleEngine"]
