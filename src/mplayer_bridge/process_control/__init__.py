"""
Process control components for MPlayer Bridge

Contains mplayer process management, pipe ownership, and exit detection.
"""

from .process_controller import ProcessController, SLAVE_FLAGS

__all__ = ["ProcessController", "SLAVE_FLAGS"]
