"""
PackVault command-line interface.

Offline commitment tooling, address derivation and the API server.
"""

__version__ = "0.1.0"
