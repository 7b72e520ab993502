"""Top-level package for the zen garden plotter.

This package drives a serial G-code table: a controller that paces commands
against the device's replies, keyboard pause/quit handling and a small
library of patterns to draw.
"""

__version__ = "0.2.0"

from .config import PlotterSettings, Workspace
from .controller import CommandResult, CommandStatus, PlotterController, RunState

__all__ = [
    "CommandResult",
    "CommandStatus",
    "PlotterController",
    "PlotterSettings",
    "RunState",
    "Workspace",
]
