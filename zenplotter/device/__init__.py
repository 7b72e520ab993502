"""Serial transports used by the plotter controller."""

from .serial_link import SerialLink, TransportError, resolve_port
from .mock import MockSerialLink

__all__ = ["SerialLink", "TransportError", "resolve_port", "MockSerialLink"]
