# slammer/dispatcher.py
import logging
import time
from dataclasses import dataclass
from typing import Optional

from pythonosc.udp_client import UDPClient

from .durations import Duration, to_seconds
from .errors import ConfigError, SendError
from .message import OscMessage
from .wire import build_packet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchTarget:
    """Where datagrams go. Fixed for the lifetime of a Dispatcher."""

    host: str = "127.0.0.1"
    port: int = 53000

    def __post_init__(self):
        if not isinstance(self.host, str) or not self.host.strip():
            raise ConfigError(f"target host must be a non-empty string, got {self.host!r}")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 1 <= self.port <= 65535:
            raise ConfigError(f"target port must be an int in 1..65535, got {self.port!r}")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def pace(interval: Duration) -> None:
    """Block the caller for interval. Zero returns straight away."""
    seconds = to_seconds(interval)
    if seconds < 0:
        raise ValueError(f"pace interval must not be negative: {interval!r}")
    if seconds > 0:
        time.sleep(seconds)


class Dispatcher:
    """
    Sends OscMessages to one DispatchTarget through a single python-osc UDPClient.

    The client is opened lazily on the first send (or by open()/``with``) and
    reused until close(). A failed send raises SendError and leaves the
    dispatcher usable; if the failure happened while opening, the next send
    tries to open again.

    Usage:
        with Dispatcher(DispatchTarget("127.0.0.1", 53000)) as d:
            d.send(build("/cue/title/liveText", 1, 0.0))
            d.pace(0.01)
    """

    def __init__(self, target: DispatchTarget):
        self.target = target
        self._client: Optional[UDPClient] = None
        self.sent = 0

    # -------------------- Lifecycle --------------------

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def open(self) -> "Dispatcher":
        if self._client is not None:
            return self
        try:
            # resolves the host and creates the socket
            self._client = UDPClient(self.target.host, self.target.port)
        except OSError as e:
            raise SendError(f"cannot open UDP client for {self.target}: {e}") from e
        logger.info("[osc] Opened UDP client to %s", self.target)
        return self

    def close(self) -> None:
        if self._client is None:
            return
        try:
            self._client.close()
        finally:
            self._client = None
            logger.info("[osc] Closed UDP client to %s after %d datagrams", self.target, self.sent)

    def __enter__(self) -> "Dispatcher":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------- Sending --------------------

    def send(self, msg: OscMessage) -> None:
        """Encode msg and fire it as one datagram. Raises SendError on transport failure."""
        packet = build_packet(msg)
        self.open()
        try:
            self._client.send(packet)
        except OSError as e:
            # includes BlockingIOError from the client's non-blocking socket
            raise SendError(f"send to {self.target} failed: {e}") from e
        self.sent += 1
        logger.debug("[osc] -> %s %s (%d bytes)", self.target, msg, len(packet.dgram))

    def pace(self, interval: Duration) -> None:
        pace(interval)


def send(target: DispatchTarget, msg: OscMessage) -> None:
    """One-shot send: open a client, send msg, close it again."""
    with Dispatcher(target) as d:
        d.send(msg)
