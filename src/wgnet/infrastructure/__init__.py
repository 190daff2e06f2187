"""
wgnet Infrastructure Layer

Host-facing adapters: device queries, device control and packet filter rules.
"""
