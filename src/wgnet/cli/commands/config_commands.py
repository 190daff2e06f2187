"""
Configuration command handlers
Handles show and new
"""

from .base_command import BaseCommandHandler
from wgnet.cli.presentation import MessageFormatter
from wgnet.config.policy_store import default_policy
from wgnet.core.exceptions import WgnetConfigurationError


class ConfigCommandHandler(BaseCommandHandler):
    """Shows and creates network configurations"""

    def show_config(self, name: str) -> bool:
        policy = self.load_policy(name)
        if policy is None:
            return False

        self.display.display_policy(name, self.store.path_for(name), policy)
        return True

    def new_config(self, name: str, force: bool = False) -> bool:
        """Write a default configuration"""
        if not self.validate_name(name):
            return False

        path = self.store.path_for(name)

        if self.config.dry_run:
            if self.store.exists(name) and not force:
                self.error_display.display_error(
                    f"Config file '{path}' exists, skipping default"
                )
                return False
            try:
                policy = default_policy(path.stem)
            except WgnetConfigurationError as e:
                self.error_display.display_error(e.message)
                return False
            self.console.print(MessageFormatter.info(f"Dry run: would create config '{path}'"))
        else:
            try:
                policy = self.store.create_default(name, force=force)
            except WgnetConfigurationError as e:
                self.error_display.display_error(e.message)
                return False
            except OSError as e:
                self.handle_error(e, "new")
                return False
            self.console.print(MessageFormatter.success(f"Successfully created new config '{path}'"))

        self.display.display_policy(name, path, policy)
        return True

    def execute(self, **kwargs) -> bool:
        action = kwargs.get('action', 'show')
        name = kwargs.get('name', '')

        if action == 'show':
            return self.show_config(name)
        elif action == 'new':
            return self.new_config(name, kwargs.get('force', False))
        else:
            self.error_display.display_error(f"Unknown config action: {action}")
            return False
