"""G-code vocabulary used by the plotter.

Only the handful of codes the patterns need are defined here:

| Code | Meaning |
|------|---------|
| G01  | linear interpolation |
| G02  | circular interpolation, clockwise |
| G03  | circular interpolation, counter-clockwise |
| G28  | return to home position |
| G90  | absolute positioning |
| G91  | relative (incremental) positioning |

Commands travel as ASCII lines terminated by :data:`TERMINATOR`; there is no
escaping and no checksum.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .config import ABSOLUTE, RELATIVE

LINEAR = "G01"
ARC_CW = "G02"
ARC_CCW = "G03"
HOME = "G28"
ABSOLUTE_MODE = "G90"
RELATIVE_MODE = "G91"

ARC_MNEMONICS = (ARC_CW, ARC_CCW)
MODE_COMMANDS = {ABSOLUTE: ABSOLUTE_MODE, RELATIVE: RELATIVE_MODE}

TERMINATOR = b";\n"


@dataclass(frozen=True)
class Command:
    """A single formatted command line, without the terminator."""

    mnemonic: str
    params: Tuple[Tuple[str, float], ...] = ()

    def __str__(self) -> str:
        parts = [self.mnemonic]
        parts.extend(f"{axis}{value:.3f}" for axis, value in self.params)
        return " ".join(parts)


def linear(x: float, y: float) -> Command:
    return Command(LINEAR, (("X", float(x)), ("Y", float(y))))


def arc(x: float, y: float, i: float, j: float, mnemonic: str = ARC_CW) -> Command:
    if mnemonic not in ARC_MNEMONICS:
        raise ValueError(f"Not an arc command: {mnemonic!r}")
    return Command(
        mnemonic,
        (("X", float(x)), ("Y", float(y)), ("I", float(i)), ("J", float(j))),
    )


def mode(coordinate_mode: str) -> Command:
    try:
        return Command(MODE_COMMANDS[coordinate_mode])
    except KeyError:
        raise ValueError(f"Unknown coordinate mode: {coordinate_mode!r}") from None


def home() -> Command:
    return Command(HOME)
