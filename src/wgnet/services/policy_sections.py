"""
Policy Sections

Each section translates one slice of a NetworkPolicy into ordered apply
and remove rule sets and issues them through the rule engine.

Applying a section either installs all of its rules or, when one rule
fails, removes the rules it already installed in that call and raises the
section's error. Removing a section issues every remove rule, tolerating
rules that are absent, and never raises.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, Optional, Type

from wgnet.core.exceptions import (
    PolicySectionError, RoutingError, FirewallError, NatError, LockdownError
)
from wgnet.core.unified_logger import get_logger, UnifiedLogger
from wgnet.domain.entities.filter_rule import (
    FilterRule, RuleSet, RuleChain, RuleAction, RuleProtocol, RemovalReport
)
from wgnet.domain.entities.network_policy import NetworkPolicy
from wgnet.infrastructure.network.interface_prober import InterfaceProber
from wgnet.infrastructure.network.rule_engine import IptablesRuleEngine


class Stage(Enum):
    """Policy stages in bring-up order"""
    ROUTING = "routing"
    FIREWALL = "firewall"
    NAT = "nat"
    LOCKDOWN = "lockdown"


class PolicySection(ABC):
    """Base class for a policy stage"""

    stage: Stage
    error_class: Type[PolicySectionError] = PolicySectionError

    def __init__(self, rule_engine: IptablesRuleEngine, logger: Optional[UnifiedLogger] = None):
        self.rule_engine = rule_engine
        self.logger = logger or get_logger(__name__, f"{self.stage.value}_section")

    @abstractmethod
    def apply_rules(self, policy: NetworkPolicy) -> RuleSet:
        """Rules to install, in application order"""

    @abstractmethod
    def remove_rules(self, policy: NetworkPolicy) -> RuleSet:
        """Rules to delete on teardown"""

    def apply(self, policy: NetworkPolicy) -> RuleSet:
        """
        Install the section's rules.

        Raises:
            PolicySectionError subclass for this stage, after reverting
            any rule this call already installed
        """
        rules = self.apply_rules(policy)
        applied = []

        for rule in rules:
            if not self.rule_engine.apply(rule):
                self._revert(applied)
                raise self.error_class(
                    f"Failed to apply rule {rule.describe()}",
                    interface_name=policy.interface_name
                )
            applied.append(rule)

        self.logger.info(f"Applied {len(applied)} {self.stage.value} rule(s) on {policy.interface_name}")
        return rules

    def remove(self, policy: NetworkPolicy) -> RemovalReport:
        """Delete the section's rules; absent rules are not an error"""
        report = RemovalReport(stage=self.stage.value)

        for rule in self.remove_rules(policy):
            report.record(self.rule_engine.remove(rule))

        self.logger.info(
            f"Removed {self.stage.value} rules on {policy.interface_name}: "
            f"{report.removed} removed, {report.not_found} not present, {report.errors} failed"
        )
        return report

    def _revert(self, applied) -> None:
        for rule in reversed(applied):
            self.rule_engine.remove(rule)


class RoutingSection(PolicySection):
    """
    Forwarding rules for the tunnel's own subnet and the routed networks.

    wg-quick installs a route for the tunnel's subnet on bring-up, so
    unless the policy routes that subnet it is explicitly dropped.
    """

    stage = Stage.ROUTING
    error_class = RoutingError

    def __init__(self, rule_engine: IptablesRuleEngine, prober: InterfaceProber,
                 subnet_prefix: int = 24, logger: Optional[UnifiedLogger] = None):
        super().__init__(rule_engine, logger)
        self.prober = prober
        self.subnet_prefix = subnet_prefix

    def subnet_rule(self, policy: NetworkPolicy, subnet: str) -> FilterRule:
        return FilterRule(
            chain=RuleChain.FORWARD,
            action=RuleAction.DROP,
            in_interface=policy.interface_name,
            destination=subnet
        )

    def network_rules(self, policy: NetworkPolicy) -> Iterator[FilterRule]:
        for network in policy.routed_networks:
            yield FilterRule(
                chain=RuleChain.FORWARD,
                action=RuleAction.ACCEPT,
                in_interface=policy.interface_name,
                destination=network
            )

    def apply_rules(self, policy: NetworkPolicy) -> RuleSet:
        rules = RuleSet()

        if not policy.route_subnet:
            subnet = self.prober.local_subnet(policy.interface_name, self.subnet_prefix)
            if subnet is None:
                raise RoutingError(
                    f"Cannot determine local subnet of {policy.interface_name}",
                    interface_name=policy.interface_name
                )
            rules.add(self.subnet_rule(policy, subnet))

        for rule in self.network_rules(policy):
            rules.add(rule)
        return rules

    def remove_rules(self, policy: NetworkPolicy) -> RuleSet:
        rules = RuleSet()

        # Removed whether or not it was applied
        subnet = self.prober.local_subnet(policy.interface_name, self.subnet_prefix)
        if subnet is None:
            self.logger.warning(
                f"Skipping subnet rule removal for {policy.interface_name}: local subnet unknown"
            )
        else:
            rules.add(self.subnet_rule(policy, subnet))

        for rule in self.network_rules(policy):
            rules.add(rule)
        return rules


class FirewallSection(PolicySection):
    """Per-host TCP port exceptions; hosts outer loop, ports inner loop"""

    stage = Stage.FIREWALL
    error_class = FirewallError

    def _host_rules(self, policy: NetworkPolicy) -> RuleSet:
        rules = RuleSet()

        for index, host in enumerate(policy.firewall_hosts):
            if not host.is_usable:
                label = host.host_address or f"#{index + 1}"
                reason = "no ports" if host.host_address else "no address"
                self.logger.warning(f"Skipping firewall host {label}: {reason}")
                continue

            for port in host.allowed_ports:
                if port == 0:
                    self.logger.warning(f"Skipping port 0 for firewall host {host.host_address}")
                    continue
                rules.add(FilterRule(
                    chain=RuleChain.FORWARD,
                    action=RuleAction.ACCEPT,
                    in_interface=policy.interface_name,
                    destination=host.host_address,
                    protocol=RuleProtocol.TCP,
                    destination_port=port
                ))
        return rules

    def apply_rules(self, policy: NetworkPolicy) -> RuleSet:
        return self._host_rules(policy)

    def remove_rules(self, policy: NetworkPolicy) -> RuleSet:
        return self._host_rules(policy)


class NatSection(PolicySection):
    """
    Outbound NAT. Masquerading is not issued: an enabled NAT section only
    validates that an output interface is configured.
    """

    stage = Stage.NAT
    error_class = NatError

    def apply_rules(self, policy: NetworkPolicy) -> RuleSet:
        if not policy.nat_enabled:
            return RuleSet()

        if not policy.nat_out_interface:
            raise NatError(
                f"NAT is enabled for {policy.interface_name} but no output interface is configured",
                interface_name=policy.interface_name
            )

        self.logger.warning(
            f"NAT via {policy.nat_out_interface} is configured for {policy.interface_name} "
            f"but masquerade rules are not issued"
        )
        return RuleSet()

    def remove_rules(self, policy: NetworkPolicy) -> RuleSet:
        if policy.nat_enabled and not policy.nat_out_interface:
            self.logger.warning(f"NAT for {policy.interface_name} has no output interface")
        return RuleSet()


class LockdownSection(PolicySection):
    """Default deny for forwarded and host-bound traffic from the tunnel"""

    stage = Stage.LOCKDOWN
    error_class = LockdownError

    def _lockdown_rules(self, policy: NetworkPolicy) -> RuleSet:
        return RuleSet([
            FilterRule(chain=RuleChain.FORWARD, action=RuleAction.DROP, in_interface=policy.interface_name),
            FilterRule(chain=RuleChain.INPUT, action=RuleAction.DROP, in_interface=policy.interface_name),
        ])

    def apply_rules(self, policy: NetworkPolicy) -> RuleSet:
        return self._lockdown_rules(policy)

    def remove_rules(self, policy: NetworkPolicy) -> RuleSet:
        return self._lockdown_rules(policy)
