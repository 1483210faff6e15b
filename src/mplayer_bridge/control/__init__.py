"""
Control-channel components for MPlayer Bridge

Contains the slave-mode protocol client and its typed accessors.
"""

from .slave_client import SlaveClient

__all__ = ["SlaveClient"]
