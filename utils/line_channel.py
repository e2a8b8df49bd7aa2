"""
Line-oriented duplex channels to the arbiter
"""
import logging
import socket
from typing import Optional, Protocol

from game.errors import ChannelUnavailable, ProtocolTimeout, TransportError

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\n"


class LineChannel(Protocol):
    """Blocking duplex line stream; one request line is answered by one reply line"""

    def write_line(self, line: str) -> None:
        ...

    def read_line(self) -> str:
        ...

    def close(self) -> None:
        ...


class SocketLineChannel:
    """LineChannel over a TCP connection, e.g. a serial-to-TCP bridge in front of the arbiter"""

    def __init__(self, host: str, port: int, read_timeout: float = 5.0, connect_timeout: float = 5.0):
        self.host = host
        self.port = port
        self.read_timeout = read_timeout
        self.connect_timeout = connect_timeout
        self.sock: Optional[socket.socket] = None
        self._buffer = b""

    @property
    def is_open(self) -> bool:
        return self.sock is not None

    def open(self) -> "SocketLineChannel":
        try:
            self.sock = socket.create_connection((self.host, self.port), timeout=self.connect_timeout)
        except OSError as e:
            raise ChannelUnavailable(f"Cannot connect to {self.host}:{self.port}: {e}") from e
        self.sock.settimeout(self.read_timeout)
        logger.info(f"Opened channel to {self.host}:{self.port}")
        return self

    def write_line(self, line: str) -> None:
        if self.sock is None:
            raise TransportError("Channel is not open")
        try:
            self.sock.sendall(line.encode("ascii") + LINE_TERMINATOR)
        except OSError as e:
            raise TransportError(f"Write failed: {e}") from e

    def read_line(self) -> str:
        if self.sock is None:
            raise TransportError("Channel is not open")
        while LINE_TERMINATOR not in self._buffer:
            try:
                chunk = self.sock.recv(1024)
            except socket.timeout as e:
                raise ProtocolTimeout("No reply line from arbiter") from e
            except OSError as e:
                raise TransportError(f"Read failed: {e}") from e
            if not chunk:
                raise TransportError("Arbiter closed the connection")
            self._buffer += chunk

        line, self._buffer = self._buffer.split(LINE_TERMINATOR, 1)
        return line.decode("ascii", errors="replace").rstrip("\r")

    def close(self) -> None:
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None
                self._buffer = b""
            logger.info(f"Closed channel to {self.host}:{self.port}")


def parse_port_spec(port_spec: str):
    """Split a "host:port" channel identifier"""
    if not port_spec or ":" not in port_spec:
        raise ChannelUnavailable(f"Invalid channel identifier: {port_spec!r} (expected host:port)")
    host, _, port = port_spec.rpartition(":")
    try:
        return host or "localhost", int(port)
    except ValueError as e:
        raise ChannelUnavailable(f"Invalid channel port in {port_spec!r}") from e


def open_channel(port_spec: str, read_timeout: float = 5.0) -> SocketLineChannel:
    host, port = parse_port_spec(port_spec)
    return SocketLineChannel(host, port, read_timeout=read_timeout).open()
