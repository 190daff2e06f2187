"""
CLI Command Handlers
Business logic for each CLI command
"""

from .base_command import BaseCommandHandler
from .list_command import ListCommandHandler
from .status_command import StatusCommandHandler
from .network_commands import NetworkCommandHandler
from .config_commands import ConfigCommandHandler

__all__ = [
    'BaseCommandHandler',
    'ListCommandHandler',
    'StatusCommandHandler',
    'NetworkCommandHandler',
    'ConfigCommandHandler'
]
