"""
Network Policy Domain Entities

The policy describing one tunnel interface: whether its own subnet is
routed, which further networks are reachable through it, optional NAT and
the per-host TCP port exceptions. A policy is built fresh from the
configuration store for every invocation and never modified afterwards.
"""

import ipaddress
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import ValueObject


# Linux IFNAMSIZ minus the terminating NUL
MAX_INTERFACE_NAME_LENGTH = 15


class InterfaceState(Enum):
    """Observed state of a tunnel interface"""
    RUNNING = "running"
    NOT_RUNNING = "not_running"


class FirewallHost(ValueObject):
    """
    A host behind the tunnel and the TCP ports it may be reached on.

    Empty addresses, empty port lists and port 0 are accepted here; they
    are skipped with a warning when the firewall section is applied.
    """

    host_address: str = ""
    allowed_ports: List[int] = Field(default_factory=list)

    @field_validator('host_address', mode='before')
    @classmethod
    def normalize_address(cls, v):
        return "" if v is None else str(v).strip()

    @field_validator('allowed_ports')
    @classmethod
    def validate_ports(cls, v):
        for port in v:
            if not 0 <= port <= 65535:
                raise ValueError(f"Port {port} is outside 0..65535")
        return v

    @property
    def is_usable(self) -> bool:
        return bool(self.host_address) and bool(self.allowed_ports)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'host': self.host_address,
            'allowed_ports': list(self.allowed_ports)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FirewallHost':
        return cls(
            host_address=data.get('host', data.get('host_address', "")),
            allowed_ports=data.get('allowed_ports') or data.get('ports') or []
        )


class NetworkPolicy(ValueObject):
    """Policy applied to one tunnel interface"""

    interface_name: str
    route_subnet: bool = False
    routed_networks: List[str] = Field(default_factory=list)
    nat_enabled: bool = False
    nat_out_interface: Optional[str] = None
    firewall_hosts: List[FirewallHost] = Field(default_factory=list)

    @field_validator('interface_name')
    @classmethod
    def validate_interface_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Interface name must not be empty")
        if len(v) > MAX_INTERFACE_NAME_LENGTH or '/' in v or any(c.isspace() for c in v):
            raise ValueError(f"Invalid interface name: {v!r}")
        return v

    @field_validator('routed_networks')
    @classmethod
    def validate_routed_networks(cls, v):
        for network in v:
            try:
                ipaddress.ip_network(network, strict=False)
            except ValueError as e:
                raise ValueError(f"Invalid routed network {network!r}: {e}")
        return v

    @field_validator('nat_out_interface', mode='before')
    @classmethod
    def empty_out_interface_is_none(cls, v):
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    def summary(self) -> Dict[str, Any]:
        """Short description used by status and show views"""
        return {
            'interface': self.interface_name,
            'route_subnet': self.route_subnet,
            'routed_networks': len(self.routed_networks),
            'nat_enabled': self.nat_enabled,
            'firewall_hosts': len(self.firewall_hosts)
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert policy to its on-disk document layout"""
        return {
            'interface': self.interface_name,
            'routing': {
                'route_subnet': self.route_subnet,
                'networks': list(self.routed_networks)
            },
            'nat': {
                'enabled': self.nat_enabled,
                'out_interface': self.nat_out_interface
            },
            'firewall_hosts': [host.to_dict() for host in self.firewall_hosts]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetworkPolicy':
        """Create policy from its on-disk document layout"""
        routing = data.get('routing') or {}
        nat = data.get('nat') or {}
        hosts = data.get('firewall_hosts') or []

        return cls(
            interface_name=data.get('interface') or "",
            route_subnet=routing.get('route_subnet', False),
            routed_networks=routing.get('networks') or [],
            nat_enabled=nat.get('enabled', False),
            nat_out_interface=nat.get('out_interface'),
            firewall_hosts=[FirewallHost.from_dict(host or {}) for host in hosts]
        )
