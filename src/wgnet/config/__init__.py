"""Settings and network configuration storage"""

from .settings import WgnetSettings, RunOptions

__all__ = ['WgnetSettings', 'RunOptions']
