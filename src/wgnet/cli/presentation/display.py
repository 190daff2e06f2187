"""
Display managers for the more involved views: configuration listings,
interface status and teardown results, and error output.
"""

from pathlib import Path
from typing import List, Optional

from rich.table import Table
from rich.markup import escape
from rich.text import Text

from wgnet.domain.entities.network_policy import NetworkPolicy
from wgnet.services.orchestrator import InterfaceStatus, TeardownReport, UpResult
from .formatters import StatusFormatter, PolicyFormatter, MessageFormatter
from .console import get_console, get_error_console


class PolicyDisplayManager:
    """Displays configurations, interfaces and orchestration results"""

    def __init__(self):
        self.console = get_console()
        self.error_console = get_error_console()

    def display_config_list(self, config_dir: Path, configs: List[Path]) -> None:
        self.console.print(Text.assemble(
            ("Configs in ", "bold blue"),
            (str(config_dir), "cyan")
        ))
        if not configs:
            self.console.print("  [dim]No configurations found[/dim]")
            return
        for path in configs:
            self.console.print(Text.assemble(("  Config: ", "dim"), (path.stem, "bold blue")))

    def display_device_list(self, devices: List[str]) -> None:
        if not devices:
            self.console.print(MessageFormatter.info("No active tunnels found"))
            return

        self.console.print(Text("\nActive tunnels", style="bold blue"))
        for name in devices:
            self.console.print(Text.assemble(
                ("  ", ""),
                StatusFormatter.format_status("running", name)
            ))

    def display_policy(self, name: str, path: Path, policy: NetworkPolicy) -> None:
        self.console.print(Text.assemble(
            ("Config ", "bold blue"),
            (name, "bold cyan"),
            (f" ({path})", "dim")
        ))
        for item in PolicyFormatter.format_policy(policy):
            self.console.print(item)

    def display_status(self, status: InterfaceStatus, policy: NetworkPolicy) -> None:
        """Interface state, device details and network summary"""
        table = Table(show_header=False, show_edge=False, padding=(0, 1))
        table.add_column("Field", style="dim", width=15)
        table.add_column("Value")

        table.add_row("Interface", Text(status.interface_name, style="bold"))
        if not status.config_exists:
            table.add_row("Status", StatusFormatter.format_status("warning", "unknown"))
        elif status.running:
            table.add_row("Status", StatusFormatter.format_status("up", "UP"))
        else:
            table.add_row("Status", StatusFormatter.format_status("down", "DOWN"))
        table.add_row(
            "WG config",
            StatusFormatter.format_status("ok", "present") if status.config_exists
            else StatusFormatter.format_status("missing", "missing")
        )
        self.console.print(table)

        if not status.config_exists:
            self.console.print(MessageFormatter.warning(
                f"Interface config for {status.interface_name} does not exist"
            ))

        if status.device_info:
            self.console.print(Text(status.device_info.rstrip(), style="dim"))

        for item in PolicyFormatter.format_summary(policy):
            self.console.print(item)

    def display_up_result(self, interface_name: str, result: UpResult, dry_run: bool = False) -> None:
        if result == UpResult.SUCCESS:
            self.console.print(MessageFormatter.success(f"Interface {interface_name} is up"))
        elif result == UpResult.ALREADY_UP:
            self.console.print(MessageFormatter.info(
                f"Interface {interface_name} is already up, use --force to re-apply the network policy"
            ))
        elif result == UpResult.DEVICE_SETUP_FAILED:
            self.error_console.print(MessageFormatter.error(
                f"Failed to set up device {interface_name}"
            ))
        else:
            self.error_console.print(MessageFormatter.error(
                f"Configuring {result.failed_stage} failed, {interface_name} was rolled back and is down"
            ))

        if dry_run:
            self.console.print("[dim]Dry run: no commands were executed[/dim]")

    def display_teardown(self, report: TeardownReport, dry_run: bool = False) -> None:
        if report.clean:
            self.console.print(MessageFormatter.success(f"Interface {report.interface_name} is down"))
        else:
            self.console.print(MessageFormatter.warning(
                f"Interface {report.interface_name} torn down with errors"
            ))
            for error in report.errors:
                self.console.print(f"  [dim]{escape(error)}[/dim]")
            for section in report.sections:
                if section.errors:
                    self.console.print(f"  [dim]{section.stage}: {section.errors} rule(s) could not be removed[/dim]")

        if dry_run:
            self.console.print("[dim]Dry run: no commands were executed[/dim]")


class ErrorDisplayManager:
    """Unified error display"""

    def __init__(self):
        self.error_console = get_error_console()

    def display_error(self, message: str, details: Optional[str] = None) -> None:
        self.error_console.print(MessageFormatter.error(message))
        if details:
            self.error_console.print(f"  Details: {escape(details)}")

    def display_command_error(self, command: str, error: Exception) -> None:
        self.error_console.print(MessageFormatter.error(f"Command '{command}' failed"))
        self.error_console.print(f"  Error: {escape(str(error))}")

    def display_configuration_error(self, config_name: str, error: str) -> None:
        self.error_console.print(MessageFormatter.error(f"Configuration error in {config_name}"))
        self.error_console.print(f"  {escape(error)}")

    def display_permission_error(self, interface_name: str) -> None:
        self.error_console.print(Text.assemble(
            ("[ERROR] Unable to access interface ", "bold red"),
            (interface_name, "red"),
            (", are you root?", "bold red")
        ))
