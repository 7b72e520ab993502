from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, Optional, Tuple, Union

from zenplotter.device import MockSerialLink, TransportError
from zenplotter.gcode import TERMINATOR


class ScriptedKeyboard:
    """Replays key presses; a ``None`` entry means "nothing pending" for one poll."""

    def __init__(self, events: Iterable[Optional[str]] = ()) -> None:
        self.events = deque(events)
        self.polls = 0

    def press(self, *keys: str) -> None:
        self.events.extend(keys)

    def key_pending(self) -> bool:
        self.polls += 1
        if self.events and self.events[0] is None:
            self.events.popleft()
            return False
        return bool(self.events)

    def read_key(self) -> Optional[str]:
        if not self.events or self.events[0] is None:
            return None
        return self.events.popleft()


class ScheduledLink(MockSerialLink):
    """Presses a key right after the Nth command has been terminated."""

    def __init__(self, keyboard: ScriptedKeyboard, schedule: Dict[int, Union[str, Tuple[str, ...]]], **kwargs) -> None:
        super().__init__(**kwargs)
        self.keyboard = keyboard
        self.schedule = dict(schedule)
        self.terminated = 0

    def send_bytes(self, data: bytes) -> int:
        written = super().send_bytes(data)
        if data == TERMINATOR:
            self.terminated += 1
            keys = self.schedule.get(self.terminated)
            if keys:
                self.keyboard.press(*((keys,) if isinstance(keys, str) else keys))
        return written


class LateReplyLink(MockSerialLink):
    """Reports an empty inbound buffer for the first ``delay_polls`` queries."""

    def __init__(self, delay_polls: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.delay_polls = delay_polls

    def bytes_available(self) -> int:
        if self.delay_polls > 0:
            self.delay_polls -= 1
            return 0
        return super().bytes_available()


class ShortTerminatorLink(MockSerialLink):
    """Terminates the first ``intact`` commands, then writes one terminator byte only."""

    intact = 1

    def send_bytes(self, data: bytes) -> int:
        if data == TERMINATOR:
            if self.intact <= 0:
                self.writes.append(data[:1])
                return 1
            self.intact -= 1
        return super().send_bytes(data)


class FailingLink(MockSerialLink):
    """Raises on every write once ``broken`` is set."""

    broken = False

    def send_bytes(self, data: bytes) -> int:
        if self.broken:
            raise TransportError("cable pulled")
        return super().send_bytes(data)
