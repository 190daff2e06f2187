"""
Base Command Handler - abstract base class for command handlers
"""

from abc import ABC, abstractmethod
from typing import Optional

from wgnet.config.settings import WgnetSettings
from wgnet.config.policy_store import PolicyStore
from wgnet.core.exceptions import WgnetConfigurationError
from wgnet.core.unified_logger import get_logger
from wgnet.domain.entities.network_policy import NetworkPolicy
from wgnet.cli.presentation import (
    get_console, get_error_console, ErrorDisplayManager, PolicyDisplayManager
)


class BaseCommandHandler(ABC):
    """Command handler base class"""

    def __init__(self, config: WgnetSettings, verbose: bool = False):
        self.logger = get_logger(__name__, "command")

        self.config = config
        self.verbose = verbose

        self.console = get_console()
        self.error_console = get_error_console()
        self.error_display = ErrorDisplayManager()
        self.display = PolicyDisplayManager()
        self.store = PolicyStore(config.config_path)

    @abstractmethod
    def execute(self, **kwargs) -> bool:
        """Execute command - Subclasses must implement"""
        pass

    def handle_error(self, error: Exception, context: str = "") -> None:
        if context:
            self.error_display.display_command_error(context, error)
        else:
            self.error_display.display_error(str(error))

        if self.verbose:
            import traceback
            self.error_console.print(traceback.format_exc(), markup=False)

    def validate_name(self, name: str) -> bool:
        if not name or not name.strip():
            self.error_display.display_error("Configuration name cannot be empty")
            return False
        return True

    def load_policy(self, name: str) -> Optional[NetworkPolicy]:
        """Load a configuration, reporting problems to the user"""
        if not self.validate_name(name):
            return None

        if not self.store.exists(name):
            self.error_display.display_error(
                f"{name}: config does not exist, or we can't read it ({self.store.path_for(name)})"
            )
            return None

        try:
            return self.store.load(name)
        except WgnetConfigurationError as e:
            self.error_display.display_configuration_error(name, e.message)
            return None

    def create_orchestrator(self):
        from wgnet.services.orchestrator import NetworkOrchestrator
        return NetworkOrchestrator.from_settings(self.config)

    def log_verbose(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"[dim]{message}[/dim]")
