"""wgnet - WireGuard network bring-up and teardown"""

__version__ = "0.1.0"
