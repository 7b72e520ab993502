"""Pattern generators.

Every generator takes the :class:`~zenplotter.controller.PlotterController`
and traces its shape through ``move`` calls. With ``interruptible`` set (the
default) the keyboard is checked on every inner-loop iteration; otherwise keys
are only seen while the controller waits for the device. Generators return
True when the shape was completed and False when the run was stopped.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, Iterable, Optional

from .config import ABSOLUTE
from .controller import XY, CommandResult, PlotterController, RunState

logger = logging.getLogger(__name__)

BORDER_OFFSET = 10
BOX_STEP = 5
STAR_STEP = 50
RING_STEP = 10
ANGLE_STEP_DEG = 20


def _continue(controller: PlotterController, interruptible: bool) -> bool:
    if interruptible:
        return controller.check_interrupt()
    return controller.state is not RunState.SHUTDOWN


def _stopped(result: CommandResult) -> bool:
    # Other failures were logged by the controller; only a stop ends the shape.
    return result.interrupted


def _trace(controller: PlotterController, points: Iterable[XY]) -> bool:
    for x, y in points:
        if _stopped(controller.move(x, y)):
            return False
    return True


def _absolute(controller: PlotterController) -> bool:
    return not _stopped(controller.set_mode(ABSOLUTE))


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


def go_home(controller: PlotterController, *, interruptible: bool = True) -> bool:
    logger.info("Go home")
    return not _stopped(controller.home())


def go_to_center(controller: PlotterController, *, interruptible: bool = True) -> bool:
    logger.info("Go to center")
    if not _absolute(controller):
        return False
    return _trace(controller, [controller.settings.workspace.center])


def border(controller: PlotterController, *, interruptible: bool = True) -> bool:
    """Outline the working area."""

    logger.info("Border")
    width, height = controller.settings.workspace.as_tuple()
    b = BORDER_OFFSET
    if not _absolute(controller):
        return False
    return _trace(controller, [(b, b), (width, b), (width, height), (b, height), (b, b)])


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


def box_to_center(
    controller: PlotterController,
    *,
    step: int = BOX_STEP,
    interruptible: bool = True,
) -> bool:
    """Concentric boxes, stepping in from the border to the centre."""

    logger.info("Box to center")
    width, height = controller.settings.workspace.as_tuple()
    box_size = int(controller.settings.workspace.short_side)
    if not _absolute(controller):
        return False

    for offset in range(step, box_size - step, step):
        if not _continue(controller, interruptible):
            return False
        corners = [
            (offset, offset),
            (width - offset, offset),
            (width - offset, height - offset),
            (offset, height - offset),
            (offset, offset),
        ]
        if not _trace(controller, corners):
            return False
        logger.info("%d of %d loops", (box_size - offset) // step, box_size // step)
    return True


def box_from_center(
    controller: PlotterController,
    *,
    size: Optional[int] = None,
    interruptible: bool = True,
) -> bool:
    """Square spiral out from the origin in unit steps."""

    logger.info("Box from center")
    size = int(controller.settings.workspace.short_side) if size is None else size
    half = size / 2
    if not _absolute(controller):
        return False
    if not _trace(controller, [(0, 0)]):
        return False

    x = y = dx = 0
    dy = -1
    for _ in range(size * size):
        if not _continue(controller, interruptible):
            return False
        if -half <= x <= half and -half <= y <= half:
            if not _trace(controller, [(x, y)]):
                return False
        if x == y or (x < 0 and x == -y) or (x > 0 and x == 1 - y):
            dx, dy = -dy, dx
        x += dx
        y += dy

    return _trace(controller, [(0, 0)])


def star(
    controller: PlotterController,
    *,
    step: int = STAR_STEP,
    interruptible: bool = True,
) -> bool:
    """Lines swept across the table, first along X then along Y."""

    logger.info("Star")
    width, height = controller.settings.workspace.as_tuple()
    box_size = int(controller.settings.workspace.short_side)
    b = BORDER_OFFSET
    if not _absolute(controller):
        return False

    for offset in range(step, box_size, step):
        if not _continue(controller, interruptible):
            return False
        sweep = [
            (offset, b),
            (offset + b, b),
            (width - offset, height - b),
            (width - offset - b, height - b),
        ]
        if not _trace(controller, sweep):
            return False
        logger.info("X sweep %d of %d", offset // step, box_size // step)

    for offset in range(box_size, 0, -step):
        if not _continue(controller, interruptible):
            return False
        sweep = [
            (b, offset),
            (b, offset + b),
            (width - b, height - offset),
            (width - b, height - offset - b),
        ]
        if not _trace(controller, sweep):
            return False
        logger.info("Y sweep %d of %d", (box_size - offset) // step + 1, box_size // step)

    logger.info("Star done")
    return True


def circle_out_from_center(
    controller: PlotterController,
    *,
    ring_step: int = RING_STEP,
    angle_step: int = ANGLE_STEP_DEG,
    interruptible: bool = True,
) -> bool:
    """Rings of growing radius around the origin."""

    logger.info("Circle out from center")
    max_radius = int(controller.settings.workspace.short_side / 2)
    if not _absolute(controller):
        return False

    for radius in range(ring_step, max_radius, ring_step):
        for degrees in range(0, 360, angle_step):
            if not _continue(controller, interruptible):
                return False
            angle = math.radians(degrees)
            if not _trace(controller, [(math.cos(angle) * radius, math.sin(angle) * radius)]):
                return False

    logger.info("Circle out from center done")
    return True


def random_lines(
    controller: PlotterController,
    *,
    count: Optional[int] = None,
    seed: Optional[int] = None,
    stop_on_any_key: bool = False,
    interruptible: bool = True,
) -> bool:
    """Jump between random points until stopped, or ``count`` times.

    With ``stop_on_any_key`` the first key press ends the pattern normally
    instead of pausing, so manual mode can carry on jogging.
    """

    logger.info("Random lines (press %s to stop)", "any key" if stop_on_any_key else "Q")
    keyboard = controller.keyboard
    rng = random.Random(seed)
    width, height = controller.settings.workspace.as_tuple()
    b = BORDER_OFFSET
    if not _absolute(controller):
        return False

    done = 0
    while count is None or done < count:
        if stop_on_any_key and keyboard is not None and keyboard.key_pending():
            keyboard.read_key()
            logger.info("Random lines stopped after %d moves", done)
            return True
        if not _continue(controller, interruptible):
            return False
        x = rng.randrange(b, int(width))
        y = rng.randrange(b, int(height))
        if not _trace(controller, [(x, y)]):
            return False
        done += 1
    return True


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

Generator = Callable[..., bool]


@dataclass(frozen=True)
class PatternEntry:
    key: str
    name: str
    description: str
    run: Generator
    utility: bool = False


PATTERNS: Dict[str, PatternEntry] = {
    entry.key: entry
    for entry in (
        PatternEntry("1", "home", "Go Home", go_home, utility=True),
        PatternEntry("2", "center", "Go To Center", go_to_center, utility=True),
        PatternEntry("3", "border", "Outline the working area", border, utility=True),
        PatternEntry("4", "box", "Box to center", box_to_center),
        PatternEntry("5", "star", "Star", star),
        PatternEntry("6", "circles", "Circles out from center", circle_out_from_center),
        PatternEntry("7", "random", "Random lines", partial(random_lines, stop_on_any_key=True), utility=True),
    )
}


__all__ = [
    "PATTERNS",
    "PatternEntry",
    "border",
    "box_from_center",
    "box_to_center",
    "circle_out_from_center",
    "go_home",
    "go_to_center",
    "random_lines",
    "star",
]
