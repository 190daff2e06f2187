"""Domain Entity Module"""

from .network_policy import NetworkPolicy, FirewallHost, InterfaceState
from .filter_rule import (
    FilterRule,
    RuleSet,
    RuleTable,
    RuleChain,
    RuleAction,
    RuleOperation,
    RuleProtocol,
    RemovalOutcome,
    RemovalReport
)

__all__ = [
    'NetworkPolicy',
    'FirewallHost',
    'InterfaceState',
    'FilterRule',
    'RuleSet',
    'RuleTable',
    'RuleChain',
    'RuleAction',
    'RuleOperation',
    'RuleProtocol',
    'RemovalOutcome',
    'RemovalReport'
]
