"""
Status command handler
"""

from .base_command import BaseCommandHandler
from wgnet.core.exceptions import DeviceControlError, InterfacePermissionError


class StatusCommandHandler(BaseCommandHandler):
    """Shows interface state and the network summary of a configuration"""

    def execute(self, **kwargs) -> bool:
        name = kwargs.get('name', '')

        policy = self.load_policy(name)
        if policy is None:
            return False

        orchestrator = self.create_orchestrator()
        try:
            status = orchestrator.status(policy)
        except InterfacePermissionError:
            self.error_display.display_permission_error(policy.interface_name)
            return False
        except DeviceControlError as e:
            self.error_display.display_error(e.message)
            return False

        self.display.display_status(status, policy)
        return True
