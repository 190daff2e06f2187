"""
Interface Prober

Read-only queries about a WireGuard tunnel device: whether it is running,
whether its wg-quick configuration exists, and which local subnet it
serves. These queries run even in dry-run mode because they never change
host state, so they bypass the command executor.
"""

import ipaddress
import re
import subprocess
from pathlib import Path
from typing import List, Optional

from wgnet.config.settings import DEFAULT_WIREGUARD_DIR
from wgnet.core.exceptions import DeviceControlError, InterfacePermissionError
from wgnet.core.unified_logger import get_logger, UnifiedLogger
from wgnet.domain.entities.network_policy import InterfaceState


_NOT_FOUND_MARKERS = ("no such device", "does not exist", "cannot find device")
_PERMISSION_MARKERS = ("operation not permitted", "permission denied")

_ADDRESS_LINE = re.compile(r"^\s*Address\s*=\s*(.+)$", re.IGNORECASE)


class InterfaceProber:
    """Queries host state for tunnel interfaces"""

    def __init__(
        self,
        wireguard_dir: Path = DEFAULT_WIREGUARD_DIR,
        wg_cmd: str = "wg",
        ip_cmd: str = "ip",
        logger: Optional[UnifiedLogger] = None
    ):
        self.wireguard_dir = Path(wireguard_dir)
        self.wg_cmd = wg_cmd
        self.ip_cmd = ip_cmd
        self.logger = logger or get_logger(__name__, "prober")

    def is_running(self, interface_name: str) -> bool:
        """
        Check whether the tunnel device exists on the host.

        Returns:
            True if the device is up, False if it does not exist

        Raises:
            InterfacePermissionError: the query was denied
            DeviceControlError: the wg tool is missing or failed otherwise
        """
        result = self._run_command([self.wg_cmd, "show", interface_name])

        if result.returncode == 0:
            return True

        stderr = (result.stderr or "").lower()
        if any(marker in stderr for marker in _PERMISSION_MARKERS):
            raise InterfacePermissionError(interface_name, result.stderr.strip())
        if any(marker in stderr for marker in _NOT_FOUND_MARKERS):
            self.logger.debug(f"Interface {interface_name} is not running")
            return False

        raise DeviceControlError(
            f"Unable to query interface '{interface_name}': {result.stderr.strip()}",
            operation="probe",
            interface=interface_name
        )

    def state(self, interface_name: str) -> InterfaceState:
        return InterfaceState.RUNNING if self.is_running(interface_name) else InterfaceState.NOT_RUNNING

    def config_path(self, interface_name: str) -> Path:
        return self.wireguard_dir / f"{interface_name}.conf"

    def config_exists(self, interface_name: str) -> bool:
        """Check for the wg-quick configuration of an interface"""
        return self.config_path(interface_name).is_file()

    def local_subnet(self, interface_name: str, prefix_length: int = 24) -> Optional[str]:
        """
        Derive the tunnel's own subnet from its IPv4 address.

        The address is read from the live device when available and from
        the Address line of the wg-quick configuration otherwise (the
        latter is what a dry run sees for an interface that is not up).
        """
        address = self._device_address(interface_name) or self._config_address(interface_name)
        if address is None:
            self.logger.warning(f"Could not determine IPv4 address of {interface_name}")
            return None

        network = ipaddress.ip_network(f"{address}/{prefix_length}", strict=False)
        return str(network)

    def describe(self, interface_name: str) -> str:
        """Raw device information for display"""
        result = self._run_command([self.wg_cmd, "show", interface_name])
        if result.returncode != 0:
            stderr = (result.stderr or "").lower()
            if any(marker in stderr for marker in _PERMISSION_MARKERS):
                raise InterfacePermissionError(interface_name, result.stderr.strip(), operation="status")
            return ""
        return result.stdout

    def list_devices(self) -> List[str]:
        """Names of all active WireGuard devices"""
        result = self._run_command([self.wg_cmd, "show", "interfaces"])
        if result.returncode != 0:
            stderr = (result.stderr or "").lower()
            if any(marker in stderr for marker in _PERMISSION_MARKERS):
                raise InterfacePermissionError("*", result.stderr.strip(), operation="list")
            self.logger.warning(f"Unable to list WireGuard devices: {result.stderr.strip()}")
            return []
        return result.stdout.split()

    def _device_address(self, interface_name: str) -> Optional[str]:
        result = self._run_command(
            [self.ip_cmd, "-o", "-4", "addr", "show", "dev", interface_name], required=False
        )
        if result.returncode != 0:
            return None

        # 4: wg0    inet 10.0.0.1/24 scope global wg0\ ...
        match = re.search(r"\binet\s+(\d+\.\d+\.\d+\.\d+)", result.stdout)
        return match.group(1) if match else None

    def _config_address(self, interface_name: str) -> Optional[str]:
        path = self.config_path(interface_name)
        try:
            lines = path.read_text().splitlines()
        except OSError:
            return None

        for line in lines:
            match = _ADDRESS_LINE.match(line)
            if not match:
                continue
            for entry in match.group(1).split(","):
                try:
                    interface = ipaddress.ip_interface(entry.strip())
                except ValueError:
                    continue
                if interface.version == 4:
                    return str(interface.ip)
        return None

    def _run_command(self, command: List[str], required: bool = True) -> subprocess.CompletedProcess:
        """Run a read-only query command; optional tools that are missing exit 127"""
        self.logger.debug(f"Running command: {' '.join(command)}")

        try:
            return subprocess.run(
                command,
                capture_output=True,
                text=True
            )
        except FileNotFoundError:
            if not required:
                return subprocess.CompletedProcess(command, 127, "", f"{command[0]}: not found")
            raise DeviceControlError(
                f"Required tool '{command[0]}' is not installed",
                operation="probe"
            )
