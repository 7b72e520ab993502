"""Command line front end: demo loop, manual jog mode and single patterns."""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from dataclasses import replace
from typing import Iterable, Optional

from . import __version__, patterns
from .config import RELATIVE, PlotterSettings, Workspace
from .controller import PlotterController, RunState, poll_until
from .device import MockSerialLink, SerialLink
from .keyboard import DOWN, LEFT, RIGHT, UP, ConsoleKeyboard

logger = logging.getLogger(__name__)


def print_help() -> None:
    print("Help:")
    print(f"Version: {__version__}")
    print()
    print("Utilities:")
    for entry in patterns.PATTERNS.values():
        if entry.utility:
            print(f"{entry.key} = {entry.description}")
    print("Patterns:")
    for entry in patterns.PATTERNS.values():
        if not entry.utility:
            print(f"{entry.key} = {entry.description}")
    print()
    print("Arrow keys jog in manual mode, Q quits, any other key pauses/resumes.")
    print()


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def demo_mode(controller: PlotterController) -> None:
    """Repeat the two demo patterns until the operator quits."""

    while controller.running:
        patterns.circle_out_from_center(controller)
        patterns.box_from_center(controller)


def _wait_for_key(controller: PlotterController) -> Optional[str]:
    keyboard = controller.keyboard
    if not poll_until(
        keyboard.key_pending,
        lambda: controller.state is not RunState.SHUTDOWN,
        controller.settings.poll_interval_s,
    ):
        return None
    return keyboard.read_key()


def manual_mode(controller: PlotterController) -> None:
    """Jog with the arrow keys and launch patterns with '1'..'7'."""

    logger.info("Entering manual mode")
    step = controller.settings.manual_step
    sx = step if controller.settings.jog_invert_x else -step
    jogs = {UP: (0.0, step), DOWN: (0.0, -step), LEFT: (sx, 0.0), RIGHT: (-sx, 0.0)}

    controller.set_mode(RELATIVE)
    while controller.state is not RunState.SHUTDOWN:
        key = _wait_for_key(controller)
        if key is None:
            continue
        logger.debug("Key [%s] was pressed", key)
        if key == "Q":
            break
        if key in jogs:
            if controller.mode != RELATIVE:
                controller.set_mode(RELATIVE)
            controller.move(*jogs[key])
        elif key in patterns.PATTERNS:
            patterns.PATTERNS[key].run(controller)
        else:
            print_help()
    logger.info("Leaving manual mode")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    defaults = PlotterSettings()
    names = [entry.name for entry in patterns.PATTERNS.values()]

    parser = argparse.ArgumentParser(description="Run G-code patterns on a serial XY table")
    parser.add_argument("--port", default=defaults.port, help="Port number (COM<n>) or device path")
    parser.add_argument("--baudrate", type=int, default=defaults.baudrate)
    parser.add_argument("--table-size", type=float, help="Square table size, sets width and height")
    parser.add_argument("--table-width", type=float, help="Table width in machine units")
    parser.add_argument("--table-height", type=float, help="Table height in machine units")
    parser.add_argument("--relative", action="store_true", help="Open in relative (G91) positioning")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--manual", action="store_true", help="Jog with the arrow keys instead of the demo loop")
    mode.add_argument("--pattern", choices=names, help="Run a single pattern and exit")
    parser.add_argument("--dry-run", action="store_true", help="Use an in-memory device instead of the serial port")
    parser.add_argument("--list-ports", action="store_true", help="List serial ports and exit")
    parser.add_argument("--verbose", action="store_true", help="Log every command and reply")
    return parser


def settings_from_args(args: argparse.Namespace) -> PlotterSettings:
    defaults = PlotterSettings()
    width, height = defaults.workspace.as_tuple()
    if args.table_size:
        width = height = args.table_size
    width = args.table_width or width
    height = args.table_height or height
    return replace(
        defaults,
        port=args.port,
        baudrate=args.baudrate,
        coordinate_mode=RELATIVE if args.relative else defaults.coordinate_mode,
        workspace=Workspace(width=width, height=height),
    )


def run(argv: Optional[Iterable[str]] = None, *, link=None, keyboard=None) -> int:
    """Run the plotter; returns the process exit code."""

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    if args.list_ports:
        for port in SerialLink.enumerate_ports():
            print(port)
        return 0

    settings = settings_from_args(args)
    print_help()

    if link is None:
        link = MockSerialLink() if args.dry_run else SerialLink()
    if keyboard is None:
        keyboard = ConsoleKeyboard()
        terminal = keyboard
    else:
        terminal = contextlib.nullcontext()

    with terminal:
        controller = PlotterController(settings, link=link, keyboard=keyboard)
        try:
            if not controller.open():
                if controller.state is RunState.SHUTDOWN:
                    return 0
                logger.error("Could not connect to the plotter")
                return 1
            if args.manual:
                manual_mode(controller)
            elif args.pattern:
                entry = next(e for e in patterns.PATTERNS.values() if e.name == args.pattern)
                entry.run(controller)
            else:
                demo_mode(controller)
        finally:
            controller.close()
    return 0


def main() -> None:
    sys.exit(run())


__all__ = ["build_parser", "demo_mode", "main", "manual_mode", "print_help", "run"]
