"""
Exception Handling

Exception hierarchy for wgnet plus a small handler used on best-effort
paths (rollback, teardown) where errors are logged and never re-raised.
"""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class WgnetException(Exception):
    """Base exception class for wgnet"""

    def __init__(self, message: str, operation: str = "unknown", **kwargs):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = kwargs

        logger.error(f"* ERROR: wgnet: {operation}: {message}")


class WgnetConfigurationError(WgnetException):
    """Configuration missing, unreadable or invalid"""
    pass


class InterfacePermissionError(WgnetException):
    """Querying or controlling the tunnel device was denied"""

    def __init__(self, interface_name: str, detail: str = "", operation: str = "query"):
        message = f"Unable to access interface '{interface_name}', are you root?"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, operation=operation, interface=interface_name)
        self.interface_name = interface_name


class DeviceControlError(WgnetException):
    """Device tooling is missing or unusable"""
    pass


class PolicySectionError(WgnetException):
    """A policy stage failed to apply"""

    stage = "policy"

    def __init__(self, message: str, interface_name: Optional[str] = None, **kwargs):
        super().__init__(message, operation=f"{self.stage}", interface=interface_name, **kwargs)
        self.interface_name = interface_name


class RoutingError(PolicySectionError):
    stage = "routing"


class FirewallError(PolicySectionError):
    stage = "firewall"


class NatError(PolicySectionError):
    stage = "nat"


class LockdownError(PolicySectionError):
    stage = "lockdown"


class ExceptionHandler:
    """Logs errors from steps that must not interrupt the caller"""

    def __init__(self, logger: Optional[Any] = None):
        self.logger = logger or logging.getLogger(__name__)

    def handle_error(self, error: Exception, operation: str) -> None:
        self.logger.error(f"* ERROR: wgnet: {operation}: {error}")

