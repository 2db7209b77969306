"""Command-line interface for nmwifi.

Parses the flags, runs one-shot queries (status, rescan, list,
disconnect) with rich output, or starts the interactive curses mode.
"""

from .command import main

__all__ = ['main']
