"""Example script that draws a spiral of half-circle arcs around the table centre."""
from __future__ import annotations

import logging
import sys

from zenplotter import PlotterController, PlotterSettings
from zenplotter.device import MockSerialLink
from zenplotter.gcode import ARC_CCW
from zenplotter.keyboard import ConsoleKeyboard


def draw_spiral(controller: PlotterController, turns: int = 10, pitch: float = 5.0) -> bool:
    cx, cy = controller.settings.workspace.center
    if controller.move(cx, cy).interrupted:
        return False
    radius = 0.0
    x = cx
    for half_turn in range(2 * turns):
        if not controller.check_interrupt():
            return False
        radius += pitch / 2
        # alternate sides of the centre, growing each half turn
        sign = 1 if half_turn % 2 == 0 else -1
        target = cx + sign * radius
        # centre halfway between start and end
        result = controller.arc(target, cy, (target - x) / 2, 0.0, ARC_CCW)
        if result.interrupted:
            return False
        x = target
    return True


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    link = MockSerialLink() if "--dry-run" in sys.argv else None
    with ConsoleKeyboard() as keyboard, PlotterController(PlotterSettings(), link=link, keyboard=keyboard) as controller:
        if not controller.open():
            sys.exit(1)
        draw_spiral(controller)


if __name__ == "__main__":
    main()
