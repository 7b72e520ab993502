"""Command/acknowledgement handshake and keyboard interrupt handling.

The controller owns the serial link and sends one command at a time: before
each write it waits until the device has answered the previous command,
polling the keyboard on every idle spin so a long pattern can be paused,
resumed or stopped without signals or threads.
"""
from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from . import gcode
from .config import RELATIVE, PlotterSettings
from .device import SerialLink, TransportError

logger = logging.getLogger(__name__)

XY = Tuple[float, float]


class RunState(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"
    SHUTDOWN = "shutdown"


class CommandStatus(enum.Enum):
    OK = "ok"
    NOT_CONNECTED = "not_connected"
    INTERRUPTED = "interrupted"
    PARTIAL_WRITE = "partial_write"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single :meth:`PlotterController.send_command` call."""

    status: CommandStatus
    command: str = ""
    written: int = 0

    @property
    def ok(self) -> bool:
        return self.status is CommandStatus.OK

    @property
    def interrupted(self) -> bool:
        return self.status is CommandStatus.INTERRUPTED

    def __bool__(self) -> bool:
        return self.ok


def poll_until(
    predicate: Callable[[], bool],
    on_idle: Callable[[], bool],
    interval_s: float = 0.0,
) -> bool:
    """Spin until ``predicate`` holds, yielding between checks.

    ``on_idle`` runs once per idle spin; returning False aborts the wait and
    makes this return False. An ``interval_s`` of 0 just yields the CPU.
    """

    while not predicate():
        if not on_idle():
            return False
        time.sleep(interval_s)
    return True


class PlotterController:
    """Drive a G-code table over a serial link, one command at a time."""

    def __init__(
        self,
        settings: Optional[PlotterSettings] = None,
        *,
        link=None,
        keyboard=None,
    ) -> None:
        self.settings = settings or PlotterSettings()
        self._link = link if link is not None else SerialLink()
        self.keyboard = keyboard
        self._open = False
        self._state = RunState.RUNNING
        self._mode = self.settings.coordinate_mode
        self._position: XY = (0.0, 0.0)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> RunState:
        return self._state

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def position(self) -> XY:
        return self._position

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def running(self) -> bool:
        return self._state is RunState.RUNNING

    def _set_state(self, state: RunState) -> None:
        logger.info("!! %s !!", state.name)
        self._state = state

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self, port: Optional[Union[int, str]] = None, baudrate: Optional[int] = None) -> bool:
        port = self.settings.port if port is None else port
        baudrate = self.settings.baudrate if baudrate is None else baudrate
        if not self._link.open(port, baudrate):
            logger.error("Could not open the serial port. port=%s, baudrate=%d", port, baudrate)
            return False
        self._open = True
        result = self.set_mode(self.settings.coordinate_mode)
        if not result:
            if not result.interrupted:
                logger.error("Plotter did not accept the positioning mode (%s)", result.status.value)
            self.close()
        return result.ok

    def close(self) -> None:
        if not self._open:
            return
        logger.info("Disconnecting from plotter")
        try:
            self._link.close()
        finally:
            self._open = False

    def __enter__(self) -> "PlotterController":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------
    def set_mode(self, coordinate_mode: str) -> CommandResult:
        result = self.send_command(str(gcode.mode(coordinate_mode)))
        if result.ok:
            self._mode = coordinate_mode
        return result

    def home(self) -> CommandResult:
        result = self.send_command(str(gcode.home()))
        if result.ok:
            self._position = (0.0, 0.0)
        return result

    def move(self, x: float, y: float) -> CommandResult:
        if self._mode == RELATIVE:
            px, py = self._position
            self._position = (px + x, py + y)
        else:
            self._position = (float(x), float(y))
        logger.debug("Move X=[%.3f] Y=[%.3f] position=(%.3f, %.3f)", x, y, *self._position)
        return self.send_command(str(gcode.linear(x, y)))

    def arc(self, x: float, y: float, i: float, j: float, mnemonic: str = gcode.ARC_CW) -> CommandResult:
        command = gcode.arc(x, y, i, j, mnemonic)
        logger.debug("Arc %s", command)
        return self.send_command(str(command))

    # ------------------------------------------------------------------
    # Handshake
    # ------------------------------------------------------------------
    def send_command(self, command: str) -> CommandResult:
        if self._state is RunState.SHUTDOWN:
            return CommandResult(CommandStatus.INTERRUPTED, command)
        if not self._open:
            logger.error("Not connected, dropping command [%s]", command)
            return CommandResult(CommandStatus.NOT_CONNECTED, command)

        try:
            if not self.drain_incoming():
                return CommandResult(CommandStatus.INTERRUPTED, command)

            logger.debug("Sending command: [%s]", command)
            data = command.encode("ascii")
            written = self._link.send_bytes(data)
            if written != len(data):
                logger.error(
                    "Could not send message to plotter. length=%d, written=%d, command=[%s]",
                    len(data), written, command,
                )
                return CommandResult(CommandStatus.PARTIAL_WRITE, command, written)
            if self._link.send_bytes(gcode.TERMINATOR) != len(gcode.TERMINATOR):
                logger.error("Could not terminate command [%s]", command)
                return CommandResult(CommandStatus.PARTIAL_WRITE, command, written)
        except TransportError as exc:
            logger.error("Serial link failed while sending [%s]: %s", command, exc)
            return CommandResult(CommandStatus.TRANSPORT_ERROR, command)

        time.sleep(self.settings.command_delay_s)
        return CommandResult(CommandStatus.OK, command, written)

    def drain_incoming(self) -> bool:
        """Wait for the device to answer, then log and discard what it sent.

        Any inbound bytes count as the acknowledgement. Returns False when the
        wait was interrupted from the keyboard.
        """

        if not poll_until(
            lambda: self._link.bytes_available() > 0,
            self.check_interrupt,
            self.settings.poll_interval_s,
        ):
            return False
        while True:
            received = self._link.read_bytes(self.settings.read_chunk)
            if received:
                logger.debug("Received: %s", received.decode("ascii", errors="replace").rstrip())
            if not self.check_interrupt():
                return False
            if self._link.bytes_available() <= 0:
                return True

    # ------------------------------------------------------------------
    # Keyboard interrupt
    # ------------------------------------------------------------------
    def check_interrupt(self) -> bool:
        """Return False when work should stop.

        'Q' shuts down. Any other key toggles pause; while paused this spins
        until another key resumes or 'Q' shuts down.
        """

        if self._state is RunState.SHUTDOWN:
            return False
        if self.keyboard is None or not self.keyboard.key_pending():
            return True
        key = self.keyboard.read_key()
        if key is None:
            return True

        if key.upper() == "Q":
            self._set_state(RunState.SHUTDOWN)
            return False
        if self._state is RunState.PAUSED:
            self._set_state(RunState.RUNNING)
            return True

        self._set_state(RunState.PAUSED)
        poll_until(
            lambda: self._state is not RunState.PAUSED,
            self.check_interrupt,
            self.settings.poll_interval_s,
        )
        return self._state is not RunState.SHUTDOWN


__all__ = [
    "CommandResult",
    "CommandStatus",
    "PlotterController",
    "RunState",
    "poll_until",
]
