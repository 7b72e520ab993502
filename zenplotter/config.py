"""Configuration models for the zen garden plotter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

ABSOLUTE = "absolute"
RELATIVE = "relative"
COORDINATE_MODES = (ABSOLUTE, RELATIVE)


@dataclass
class Workspace:
    """Physical dimensions of the table, in machine units."""

    width: float = 300.0
    height: float = 300.0

    def as_tuple(self) -> tuple[float, float]:
        return self.width, self.height

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2.0, self.height / 2.0

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)


@dataclass
class PlotterSettings:
    """Aggregate settings for the serial link, the handshake and the table."""

    port: Union[int, str] = 8
    baudrate: int = 57600
    coordinate_mode: str = ABSOLUTE
    workspace: Workspace = field(default_factory=Workspace)

    # Pause after each command so the device input buffer is not overrun.
    command_delay_s: float = 0.010
    # 0 only yields to the scheduler.
    poll_interval_s: float = 0.0
    read_chunk: int = 1024

    # Manual mode
    manual_step: float = 5.0
    jog_invert_x: bool = True

    def __post_init__(self) -> None:
        if self.coordinate_mode not in COORDINATE_MODES:
            raise ValueError(f"Unknown coordinate mode: {self.coordinate_mode!r}")
