"""
Core Module Exports

Exports unified logging system and exception handling.
"""

from .unified_logger import (
    LoggerFactory,
    LoggerConfig,
    LogFormat,
    UnifiedLogger,
    get_logger,
    configure_logging,
    LoggingContext,
    InterfaceLoggingContext
)

from .exceptions import (
    WgnetException,
    WgnetConfigurationError,
    InterfacePermissionError,
    DeviceControlError,
    PolicySectionError,
    RoutingError,
    FirewallError,
    NatError,
    LockdownError,
    ExceptionHandler
)

__all__ = [
    # Unified logging system
    'LoggerFactory',
    'LoggerConfig',
    'LogFormat',
    'UnifiedLogger',
    'get_logger',
    'configure_logging',
    'LoggingContext',
    'InterfaceLoggingContext',

    # Exception handling
    'WgnetException',
    'WgnetConfigurationError',
    'InterfacePermissionError',
    'DeviceControlError',
    'PolicySectionError',
    'RoutingError',
    'FirewallError',
    'NatError',
    'LockdownError',
    'ExceptionHandler'
]
