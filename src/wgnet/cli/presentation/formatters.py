"""
Rich text formatters for CLI output
"""

from typing import List, Optional
from rich.emoji import Emoji
from rich.text import Text

from wgnet.domain.entities.network_policy import NetworkPolicy


class StatusFormatter:
    """Status indicator formatter"""

    _styles = {
        'up': (':green_circle:', 'green'),
        'running': (':arrow_forward:', 'green'),
        'down': (':red_circle:', 'red'),
        'stopped': (':stop_button:', 'red'),
        'missing': (':cross_mark:', 'red'),
        'ok': (':check_mark:', 'green'),
        'warning': (':warning:', 'orange3'),
    }

    @classmethod
    def format_status(cls, status: str, label: Optional[str] = None) -> Text:
        """Format status with emoji and color"""
        status_lower = status.lower()
        label_text = label or status

        if status_lower in cls._styles:
            emoji, color = cls._styles[status_lower]
            return Text.assemble(
                (Emoji.replace(emoji), color),
                (" ", ""),
                (label_text, color)
            )
        return Text.assemble(
            ("•", "dim"),
            (" ", ""),
            (label_text, "dim")
        )


class PolicyFormatter:
    """Network policy display formatter"""

    @staticmethod
    def format_item(label: str, value: str, style: str = "cyan") -> Text:
        return Text.assemble(
            (f"  {label}: ", "dim"),
            (value, style)
        )

    @staticmethod
    def format_flag(label: str, enabled: bool) -> Text:
        return PolicyFormatter.format_item(
            label,
            "yes" if enabled else "no",
            "green" if enabled else "red"
        )

    @staticmethod
    def format_summary(policy: NetworkPolicy) -> List[Text]:
        """Network summary as shown by the status command"""
        return [
            Text("Network:", style="bold blue"),
            PolicyFormatter.format_flag("Route main subnet", policy.route_subnet),
            PolicyFormatter.format_item("Routed subnets", str(len(policy.routed_networks))),
            PolicyFormatter.format_flag("Enable NAT", policy.nat_enabled),
            PolicyFormatter.format_item("Firewall hosts", str(len(policy.firewall_hosts))),
        ]

    @staticmethod
    def format_policy(policy: NetworkPolicy) -> List[Text]:
        """Full policy listing"""
        items = [
            Text.assemble(("interface: ", "bold"), (policy.interface_name, "green")),
            Text("routing:", style="bold blue"),
            PolicyFormatter.format_flag("Route subnet", policy.route_subnet),
        ]

        for network in policy.routed_networks:
            items.append(PolicyFormatter.format_item("Network", network))

        items.append(Text("nat:", style="bold blue"))
        items.append(PolicyFormatter.format_flag("Enabled", policy.nat_enabled))
        if policy.nat_out_interface:
            items.append(PolicyFormatter.format_item("Out interface", policy.nat_out_interface, "yellow"))

        for host in policy.firewall_hosts:
            items.append(Text("firewall host:", style="bold blue"))
            items.append(PolicyFormatter.format_item("Host", host.host_address or "(none)"))
            ports = ", ".join(str(port) for port in host.allowed_ports) or "(none)"
            items.append(PolicyFormatter.format_item("Allowed ports", ports))

        return items


class MessageFormatter:
    """Generic message formatter"""

    @staticmethod
    def success(message: str) -> Text:
        return Text.assemble(
            ("[OK] ", "bold green"),
            (message, "green")
        )

    @staticmethod
    def error(message: str) -> Text:
        return Text.assemble(
            ("[ERROR] ", "bold red"),
            (message, "red")
        )

    @staticmethod
    def warning(message: str) -> Text:
        return Text.assemble(
            ("[WARNING] ", "bold yellow"),
            (message, "yellow")
        )

    @staticmethod
    def info(message: str) -> Text:
        return Text.assemble(
            ("[INFO] ", "bold blue"),
            (message, "blue")
        )
