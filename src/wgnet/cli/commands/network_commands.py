"""
Interface command handlers
Handles up, down and restart
"""

from .base_command import BaseCommandHandler
from wgnet.core.exceptions import (
    DeviceControlError, InterfacePermissionError, WgnetConfigurationError
)


class NetworkCommandHandler(BaseCommandHandler):
    """Brings interfaces up and down"""

    def up(self, name: str, force: bool = False) -> bool:
        policy = self.load_policy(name)
        if policy is None:
            return False

        orchestrator = self.create_orchestrator()
        try:
            result = orchestrator.up(policy, force=force)
        except InterfacePermissionError:
            self.error_display.display_permission_error(policy.interface_name)
            return False
        except (WgnetConfigurationError, DeviceControlError) as e:
            self.error_display.display_error(e.message)
            return False

        self.display.display_up_result(policy.interface_name, result, dry_run=self.config.dry_run)
        self.log_verbose(f"Commands: {orchestrator.get_execution_statistics()['commands_executed']}")
        return result.ok

    def down(self, name: str) -> bool:
        policy = self.load_policy(name)
        if policy is None:
            return False

        orchestrator = self.create_orchestrator()
        try:
            report = orchestrator.down(policy)
        except WgnetConfigurationError as e:
            self.error_display.display_error(e.message)
            return False

        self.display.display_teardown(report, dry_run=self.config.dry_run)
        return True

    def restart(self, name: str, force: bool = False) -> bool:
        policy = self.load_policy(name)
        if policy is None:
            return False

        orchestrator = self.create_orchestrator()
        try:
            result = orchestrator.restart(policy, force=force)
        except InterfacePermissionError:
            self.error_display.display_permission_error(policy.interface_name)
            return False
        except (WgnetConfigurationError, DeviceControlError) as e:
            self.error_display.display_error(e.message)
            return False

        self.display.display_up_result(policy.interface_name, result, dry_run=self.config.dry_run)
        return result.ok

    def execute(self, **kwargs) -> bool:
        action = kwargs.get('action', 'up')
        name = kwargs.get('name', '')
        force = kwargs.get('force', False)

        if action == 'up':
            return self.up(name, force)
        elif action == 'down':
            return self.down(name)
        elif action == 'restart':
            return self.restart(name, force)
        else:
            self.error_display.display_error(f"Unknown network action: {action}")
            return False
