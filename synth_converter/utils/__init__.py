"""
Utilities Module - Helper functions.

Console and file logging setup for the synth-converter pipeline.
"""

from .logging import add_file_handler, remove_file_handler, setup_colored_logging

__all__ = [
    "setup_colored_logging",
    "add_file_handler",
    "remove_file_handler",
]
