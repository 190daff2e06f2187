"""
CLI Presentation Layer
All rich formatting and output display
"""

from .formatters import StatusFormatter, PolicyFormatter, MessageFormatter
from .display import PolicyDisplayManager, ErrorDisplayManager
from .console import get_console, get_error_console

__all__ = [
    'StatusFormatter',
    'PolicyFormatter',
    'MessageFormatter',
    'PolicyDisplayManager',
    'ErrorDisplayManager',
    'get_console',
    'get_error_console'
]
