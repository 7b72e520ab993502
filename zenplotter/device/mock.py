"""In-memory serial link used for dry runs and unit tests."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..gcode import TERMINATOR


@dataclass
class MockSerialLink:
    """Small simulation that mimics the :class:`SerialLink` API.

    Every terminated command is answered with ``ack`` so the handshake never
    stalls. ``banner`` is queued on open, the way a controller board greets a
    fresh connection.
    """

    available: bool = True
    banner: bytes = b"start\r\n"
    ack: bytes = b">\r\n"
    # Cap on bytes accepted per write; ``None`` accepts everything.
    write_limit: Optional[int] = None

    def __post_init__(self) -> None:
        self.writes: List[bytes] = []
        self.inbound = bytearray()
        self.port: Optional[str] = None
        self.baudrate: Optional[int] = None
        self.open_count = 0
        self.close_count = 0
        self._open = False

    # Connection ---------------------------------------------------------
    @property
    def is_open(self) -> bool:
        return self._open

    def open(self, port: Union[int, str], baudrate: int) -> bool:
        if not self.available:
            return False
        self.port = str(port)
        self.baudrate = baudrate
        self.open_count += 1
        self._open = True
        self.inbound.extend(self.banner)
        return True

    def close(self) -> None:
        self.close_count += 1
        self._open = False

    # IO -----------------------------------------------------------------
    def send_bytes(self, data: bytes) -> int:
        accepted = data if self.write_limit is None else data[: self.write_limit]
        self.writes.append(bytes(accepted))
        if accepted == TERMINATOR:
            self.inbound.extend(self.ack)
        return len(accepted)

    def bytes_available(self) -> int:
        return len(self.inbound)

    def read_bytes(self, max_length: int) -> bytes:
        chunk = bytes(self.inbound[:max_length])
        del self.inbound[:max_length]
        return chunk

    # Inspection ---------------------------------------------------------
    @property
    def commands(self) -> List[str]:
        """Command lines that were followed by a terminator."""

        lines: List[str] = []
        for prev, cur in zip(self.writes, self.writes[1:]):
            if cur == TERMINATOR and prev != TERMINATOR:
                lines.append(prev.decode("ascii"))
        return lines
