"""Byte-level serial transport backed by pyserial."""
from __future__ import annotations

import logging
import os
from typing import List, Optional, Union

import serial
from serial.tools import list_ports

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when the serial link fails while it is open."""


def resolve_port(port: Union[int, str]) -> str:
    """Map a bare port number to a device name; paths pass through."""

    text = str(port).strip()
    if text.isdigit():
        return f"COM{int(text)}" if os.name == "nt" else f"/dev/ttyS{int(text)}"
    return text


class SerialLink:
    """Thin wrapper that owns the OS serial handle."""

    def __init__(self) -> None:
        self._serial: Optional[serial.Serial] = None

    @staticmethod
    def enumerate_ports() -> List[str]:
        return [p.device for p in list_ports.comports()]

    @property
    def is_open(self) -> bool:
        return bool(self._serial and self._serial.is_open)

    def open(self, port: Union[int, str], baudrate: int) -> bool:
        name = resolve_port(port)
        if self._serial and self._serial.is_open:
            self.close()
        try:
            self._serial = serial.Serial(name, baudrate=baudrate, timeout=0, write_timeout=1.0)
        except serial.SerialException as exc:
            logger.error("Could not open %s at %d baud: %s", name, baudrate, exc)
            self._serial = None
            return False
        logger.info("Opened %s at %d baud", name, baudrate)
        return True

    def close(self) -> None:
        if self._serial:
            try:
                self._serial.close()
            finally:
                self._serial = None

    def _require_open(self) -> serial.Serial:
        if not self._serial or not self._serial.is_open:
            raise TransportError("Serial port is not open")
        return self._serial

    def send_bytes(self, data: bytes) -> int:
        ser = self._require_open()
        try:
            written = ser.write(data)
        except serial.SerialException as exc:
            raise TransportError(str(exc)) from exc
        return written or 0

    def bytes_available(self) -> int:
        ser = self._require_open()
        try:
            return ser.in_waiting
        except (serial.SerialException, OSError) as exc:
            raise TransportError(str(exc)) from exc

    def read_bytes(self, max_length: int) -> bytes:
        ser = self._require_open()
        try:
            return ser.read(max_length)
        except serial.SerialException as exc:
            raise TransportError(str(exc)) from exc
