"""
Shared pytest fixtures
"""
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest

from wgnet.config.settings import RunOptions, WgnetSettings
from wgnet.core.command_executor import CommandExecutor, CommandResult
from wgnet.core.exceptions import InterfacePermissionError
from wgnet.domain.entities.network_policy import FirewallHost, NetworkPolicy
from wgnet.infrastructure.network.interface_prober import InterfaceProber
from wgnet.services.orchestrator import NetworkOrchestrator


class RecordingExecutor(CommandExecutor):
    """
    Executor that records commands instead of running them.

    `fail_when(argv)` may return an (exit_code, stderr) tuple to make a
    live command fail; `executed` lists every command that would have
    reached the host.
    """

    def __init__(self, options: Optional[RunOptions] = None,
                 fail_when: Optional[Callable[[List[str]], Optional[Tuple[int, str]]]] = None):
        super().__init__(options)
        self.fail_when = fail_when or (lambda argv: None)
        self.executed: List[List[str]] = []

    def _execute(self, argv):
        self.executed.append(argv)
        outcome = self.fail_when(argv)
        if outcome:
            exit_code, stderr = outcome
            return CommandResult(argv=argv, exit_code=exit_code, stderr=stderr)
        return CommandResult(argv=argv, exit_code=0)

    @property
    def commands(self) -> List[str]:
        return [result.command for result in self.history]


class FakeProber(InterfaceProber):
    """
    Prober with scripted host state.

    The running flag follows successful wg-quick up/down commands seen by
    the linked executor, so teardown after a bring-up behaves as on a host.
    """

    def __init__(self, executor: Optional[RecordingExecutor] = None, running: bool = False,
                 config_exists: bool = True, subnet: Optional[str] = "10.0.0.0/24",
                 permission_denied: bool = False, devices: Optional[List[str]] = None):
        super().__init__(wireguard_dir=Path("/nonexistent/wireguard"))
        self.executor = executor
        self.running = running
        self.has_config = config_exists
        self.subnet = subnet
        self.permission_denied = permission_denied
        self.devices = devices or []

    def is_running(self, interface_name: str) -> bool:
        if self.permission_denied:
            raise InterfacePermissionError(interface_name, "Operation not permitted")

        running = self.running
        if self.executor is not None and not self.executor.dry_run:
            for result in self.executor.history:
                argv = result.argv
                if argv[0] == "wg-quick" and argv[-1] == interface_name and result.success:
                    running = argv[1] == "up"
        return running

    def config_exists(self, interface_name: str) -> bool:
        return self.has_config

    def local_subnet(self, interface_name: str, prefix_length: int = 24) -> Optional[str]:
        return self.subnet

    def describe(self, interface_name: str) -> str:
        return f"interface: {interface_name}\n  public key: AAAA\n" if self.is_running(interface_name) else ""

    def list_devices(self) -> List[str]:
        return list(self.devices)


@pytest.fixture
def temp_dir():
    """Temporary directory fixture"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(temp_dir):
    """Settings pointing at temporary directories"""
    (temp_dir / "wgnet").mkdir()
    (temp_dir / "wireguard").mkdir()
    return WgnetSettings(
        config_path=temp_dir / "wgnet",
        wireguard_dir=temp_dir / "wireguard"
    )


@pytest.fixture
def basic_policy():
    """wg0, subnet not routed, one routed network, no NAT, no firewall hosts"""
    return NetworkPolicy(
        interface_name="wg0",
        route_subnet=False,
        routed_networks=["10.0.1.0/24"],
        nat_enabled=False,
        firewall_hosts=[]
    )


@pytest.fixture
def full_policy():
    """Policy exercising every section"""
    return NetworkPolicy(
        interface_name="wg0",
        route_subnet=False,
        routed_networks=["10.0.1.0/24", "10.0.2.0/24"],
        firewall_hosts=[
            FirewallHost(host_address="10.0.0.5", allowed_ports=[22, 443]),
            FirewallHost(host_address="10.0.0.6", allowed_ports=[8080]),
        ]
    )


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def prober(executor):
    return FakeProber(executor=executor)


@pytest.fixture
def orchestrator(executor, prober):
    return NetworkOrchestrator(executor=executor, prober=prober)


def make_orchestrator(fail_when=None, dry_run=False, **prober_kwargs):
    """Build an orchestrator around a recording executor and fake prober"""
    executor = RecordingExecutor(RunOptions(dry_run=dry_run), fail_when=fail_when)
    prober = FakeProber(executor=executor, **prober_kwargs)
    return NetworkOrchestrator(executor=executor, prober=prober), executor, prober


@pytest.fixture
def build_orchestrator():
    """Factory fixture: build_orchestrator(fail_when=..., dry_run=..., running=...)"""
    return make_orchestrator
