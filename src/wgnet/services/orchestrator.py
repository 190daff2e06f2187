"""
Network Orchestrator Service

Sequences bring-up and teardown of one WireGuard tunnel interface and its
packet filter policy. Bring-up either completes every stage or removes
the stages that succeeded in reverse order and takes the interface down
again; teardown always runs to completion and can be repeated safely.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.settings import WgnetSettings
from ..core.command_executor import CommandExecutor
from ..core.exceptions import (
    ExceptionHandler, PolicySectionError, WgnetConfigurationError, WgnetException
)
from ..core.unified_logger import get_logger, InterfaceLoggingContext, UnifiedLogger
from ..domain.entities.filter_rule import RemovalReport
from ..domain.entities.network_policy import NetworkPolicy
from ..infrastructure.network.device_control import WgQuickDeviceControl
from ..infrastructure.network.interface_prober import InterfaceProber
from ..infrastructure.network.rule_engine import IptablesRuleEngine
from .policy_sections import (
    PolicySection, Stage, RoutingSection, FirewallSection, NatSection, LockdownSection
)


class OrchestratorState(Enum):
    """Orchestration states; only IDLE and UP are resting states"""
    IDLE = "idle"
    BRINGING_UP_INTERFACE = "bringing_up_interface"
    CONFIGURING_ROUTING = "configuring_routing"
    CONFIGURING_FIREWALL = "configuring_firewall"
    CONFIGURING_NAT = "configuring_nat"
    LOCKING_DOWN = "locking_down"
    UP = "up"
    REMOVING_LOCKDOWN = "removing_lockdown"
    REMOVING_NAT = "removing_nat"
    REMOVING_FIREWALL = "removing_firewall"
    REMOVING_ROUTING = "removing_routing"
    TEARING_DOWN_INTERFACE = "tearing_down_interface"


class UpResult(Enum):
    """Outcome of a bring-up"""
    SUCCESS = "success"
    ALREADY_UP = "already_up"
    DEVICE_SETUP_FAILED = "device_setup_failed"
    ROUTING_FAILED = "routing_failed"
    FIREWALL_FAILED = "firewall_failed"
    NAT_FAILED = "nat_failed"
    LOCKDOWN_FAILED = "lockdown_failed"

    @property
    def ok(self) -> bool:
        return self in (UpResult.SUCCESS, UpResult.ALREADY_UP)

    @property
    def failed_stage(self) -> Optional[str]:
        if self.ok:
            return None
        return self.value[:-len("_failed")]


_APPLY_STATES = {
    Stage.ROUTING: OrchestratorState.CONFIGURING_ROUTING,
    Stage.FIREWALL: OrchestratorState.CONFIGURING_FIREWALL,
    Stage.NAT: OrchestratorState.CONFIGURING_NAT,
    Stage.LOCKDOWN: OrchestratorState.LOCKING_DOWN,
}

_REMOVE_STATES = {
    Stage.ROUTING: OrchestratorState.REMOVING_ROUTING,
    Stage.FIREWALL: OrchestratorState.REMOVING_FIREWALL,
    Stage.NAT: OrchestratorState.REMOVING_NAT,
    Stage.LOCKDOWN: OrchestratorState.REMOVING_LOCKDOWN,
}

_FAILURE_RESULTS = {
    Stage.ROUTING: UpResult.ROUTING_FAILED,
    Stage.FIREWALL: UpResult.FIREWALL_FAILED,
    Stage.NAT: UpResult.NAT_FAILED,
    Stage.LOCKDOWN: UpResult.LOCKDOWN_FAILED,
}


@dataclass
class TeardownReport:
    """What a teardown (or rollback) did, stage by stage"""
    interface_name: str
    sections: List[RemovalReport] = field(default_factory=list)
    interface_removed: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def steps(self) -> List[str]:
        return [report.stage for report in self.sections] + ["interface"]

    @property
    def clean(self) -> bool:
        return not self.errors and self.interface_removed and all(r.clean for r in self.sections)


@dataclass
class InterfaceStatus:
    """Observed state of an interface and a summary of its policy"""
    interface_name: str
    config_exists: bool
    running: bool
    device_info: str = ""
    policy_summary: Dict[str, Any] = field(default_factory=dict)
    checked_at: datetime = field(default_factory=datetime.now)


class NetworkOrchestrator:
    """
    State machine for bringing a tunnel interface up and down.

    Bring-up order: interface, routing, firewall, NAT, lockdown.
    Teardown order: lockdown, NAT, firewall, routing, interface.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        prober: InterfaceProber,
        device: Optional[WgQuickDeviceControl] = None,
        rule_engine: Optional[IptablesRuleEngine] = None,
        subnet_prefix: int = 24,
        logger: Optional[UnifiedLogger] = None
    ):
        self.executor = executor
        self.prober = prober
        self.device = device or WgQuickDeviceControl(executor, prober)
        self.rule_engine = rule_engine or IptablesRuleEngine(executor)
        self.logger = logger or get_logger(__name__, "orchestrator")
        self.error_handler = ExceptionHandler(self.logger)

        self.sections: List[PolicySection] = [
            RoutingSection(self.rule_engine, prober, subnet_prefix),
            FirewallSection(self.rule_engine),
            NatSection(self.rule_engine),
            LockdownSection(self.rule_engine),
        ]

        self.state = OrchestratorState.IDLE
        self.transitions: List[OrchestratorState] = []

    @classmethod
    def from_settings(cls, settings: WgnetSettings) -> 'NetworkOrchestrator':
        """Build an orchestrator and its collaborators from settings"""
        executor = CommandExecutor(settings.run_options())
        prober = InterfaceProber(settings.wireguard_dir, settings.wg_cmd, settings.ip_cmd)
        return cls(
            executor=executor,
            prober=prober,
            device=WgQuickDeviceControl(executor, prober, settings.wg_quick_cmd),
            rule_engine=IptablesRuleEngine(executor, settings.iptables_cmd),
            subnet_prefix=settings.subnet_prefix
        )

    def _transition(self, state: OrchestratorState) -> None:
        self.logger.debug(f"State {self.state.value} -> {state.value}")
        self.state = state
        self.transitions.append(state)

    def _check_preconditions(self, policy: NetworkPolicy, operation: str,
                             require_config: bool = True) -> None:
        if not policy.interface_name:
            raise WgnetConfigurationError("No interface name configured", operation=operation)

        if require_config and not self.prober.config_exists(policy.interface_name):
            raise WgnetConfigurationError(
                f"Interface configuration {self.prober.config_path(policy.interface_name)} does not exist",
                operation=operation,
                interface=policy.interface_name
            )

    def up(self, policy: NetworkPolicy, force: bool = False) -> UpResult:
        """
        Bring the interface up and apply its policy.

        Args:
            policy: Policy snapshot for the interface
            force: Re-apply the policy even if the interface is running

        Returns:
            UpResult naming the failed stage, if any

        Raises:
            WgnetConfigurationError: interface name or configuration missing
            InterfacePermissionError: the running check was denied
        """
        self._check_preconditions(policy, "up")
        interface = policy.interface_name

        with InterfaceLoggingContext(interface, "up"):
            running = self.prober.is_running(interface)

            if running and not force:
                self.logger.info(f"Interface {interface} is already up")
                return UpResult.ALREADY_UP

            if running:
                self.logger.info(f"Interface {interface} is running, re-applying policy")
            else:
                self._transition(OrchestratorState.BRINGING_UP_INTERFACE)
                if not self.device.bring_up(interface):
                    self._transition(OrchestratorState.IDLE)
                    return UpResult.DEVICE_SETUP_FAILED

            applied: List[PolicySection] = []
            for section in self.sections:
                self._transition(_APPLY_STATES[section.stage])
                try:
                    section.apply(policy)
                except PolicySectionError as e:
                    self.logger.error(f"Configuring {section.stage.value} failed for {interface}: {e}")
                    self._rollback(policy, applied)
                    return _FAILURE_RESULTS[section.stage]
                applied.append(section)

            self._transition(OrchestratorState.UP)
            self.logger.info(f"Interface {interface} is up")
            return UpResult.SUCCESS

    def _rollback(self, policy: NetworkPolicy, applied: List[PolicySection]) -> TeardownReport:
        """Remove applied stages in reverse order, then the interface"""
        self.logger.warning(
            f"Rolling back {len(applied)} applied stage(s) on {policy.interface_name}"
        )
        return self._remove_stages(policy, list(reversed(applied)))

    def down(self, policy: NetworkPolicy) -> TeardownReport:
        """
        Remove the policy and take the interface down.

        Every step is attempted even if earlier ones fail; rules that are
        not present are not an error, so repeated calls are harmless.
        """
        self._check_preconditions(policy, "down", require_config=False)

        with InterfaceLoggingContext(policy.interface_name, "down"):
            report = self._remove_stages(policy, list(reversed(self.sections)))

        if report.clean:
            self.logger.info(f"Interface {policy.interface_name} is down")
        else:
            self.logger.warning(
                f"Interface {policy.interface_name} torn down with errors: {len(report.errors)} step(s) failed"
            )
        return report

    def _remove_stages(self, policy: NetworkPolicy, sections: List[PolicySection]) -> TeardownReport:
        report = TeardownReport(interface_name=policy.interface_name)

        for section in sections:
            self._transition(_REMOVE_STATES[section.stage])
            try:
                section_report = section.remove(policy)
            except Exception as e:
                self.error_handler.handle_error(e, f"remove {section.stage.value}")
                section_report = RemovalReport(stage=section.stage.value, errors=1)
                report.errors.append(f"{section.stage.value}: {e}")
            report.sections.append(section_report)

        self._transition(OrchestratorState.TEARING_DOWN_INTERFACE)
        try:
            report.interface_removed = self.device.tear_down(policy.interface_name)
        except Exception as e:
            self.error_handler.handle_error(e, "tear down interface")
            report.errors.append(f"interface: {e}")
        else:
            if not report.interface_removed:
                report.errors.append("interface: tear down failed")

        self._transition(OrchestratorState.IDLE)
        return report

    def restart(self, policy: NetworkPolicy, force: bool = False) -> UpResult:
        """Teardown followed by bring-up; a failing teardown does not stop the bring-up"""
        try:
            self.down(policy)
        except WgnetException as e:
            self.error_handler.handle_error(e, "restart (down)")

        return self.up(policy, force=force)

    def status(self, policy: NetworkPolicy) -> InterfaceStatus:
        """
        Collect interface state for display.

        Without a wg-quick configuration the device is not queried.
        """
        interface = policy.interface_name

        if not self.prober.config_exists(interface):
            self.logger.warning(f"Interface configuration {self.prober.config_path(interface)} does not exist")
            return InterfaceStatus(
                interface_name=interface,
                config_exists=False,
                running=False,
                policy_summary=policy.summary()
            )

        running = self.prober.is_running(interface)

        return InterfaceStatus(
            interface_name=interface,
            config_exists=True,
            running=running,
            device_info=self.prober.describe(interface) if running else "",
            policy_summary=policy.summary()
        )

    def get_execution_statistics(self) -> Dict[str, Any]:
        return self.executor.get_execution_statistics()
