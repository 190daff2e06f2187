"""
List command handler
"""

from .base_command import BaseCommandHandler
from wgnet.core.exceptions import DeviceControlError, InterfacePermissionError
from wgnet.infrastructure.network.interface_prober import InterfaceProber


class ListCommandHandler(BaseCommandHandler):
    """Lists stored configurations and active tunnels"""

    def execute(self, **kwargs) -> bool:
        self.display.display_config_list(self.config.config_path, self.store.list_configs())

        prober = InterfaceProber(self.config.wireguard_dir, self.config.wg_cmd, self.config.ip_cmd)
        try:
            devices = prober.list_devices()
        except InterfacePermissionError:
            self.error_display.display_error("Error getting devices, are you root?")
            return False
        except DeviceControlError as e:
            self.error_display.display_error(e.message)
            return False

        self.display.display_device_list(devices)
        return True
