"""
Device Control

Brings WireGuard tunnel devices up and down with wg-quick. Both commands
change host state, so they go through the command executor.
"""

from typing import Optional

from wgnet.core.command_executor import CommandExecutor
from wgnet.core.exceptions import DeviceControlError, InterfacePermissionError
from wgnet.core.unified_logger import get_logger, UnifiedLogger
from wgnet.infrastructure.network.interface_prober import InterfaceProber


class WgQuickDeviceControl:
    """wg-quick based device control"""

    def __init__(
        self,
        executor: CommandExecutor,
        prober: InterfaceProber,
        wg_quick_cmd: str = "wg-quick",
        logger: Optional[UnifiedLogger] = None
    ):
        self.executor = executor
        self.prober = prober
        self.wg_quick_cmd = wg_quick_cmd
        self.logger = logger or get_logger(__name__, "device_control")

    def is_running(self, interface_name: str) -> bool:
        return self.prober.is_running(interface_name)

    def bring_up(self, interface_name: str) -> bool:
        """Create and configure the tunnel device"""
        self.logger.info(f"Bringing up interface {interface_name}")
        result = self.executor.run([self.wg_quick_cmd, "up", interface_name])
        if not result.success:
            self.logger.error(
                f"Failed to set up device {interface_name}: "
                f"exit {result.exit_code}: {result.stderr.strip()}"
            )
            return False
        return True

    def tear_down(self, interface_name: str) -> bool:
        """
        Remove the tunnel device if it is running.

        Never raises: a failure is logged and reported as False so that
        teardown sequences always run to completion.
        """
        try:
            running = self.prober.is_running(interface_name)
        except (InterfacePermissionError, DeviceControlError):
            # Cannot tell; let wg-quick report the real problem
            running = True

        if not running and not self.executor.dry_run:
            self.logger.info(f"Interface {interface_name} is not running, nothing to tear down")
            return True

        self.logger.info(f"Tearing down interface {interface_name}")
        result = self.executor.run([self.wg_quick_cmd, "down", interface_name])
        if not result.success:
            self.logger.warning(
                f"Failed to tear down device {interface_name}: "
                f"exit {result.exit_code}: {result.stderr.strip()}"
            )
            return False
        return True
