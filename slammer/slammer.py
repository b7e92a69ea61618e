# slammer/slammer.py
import logging
import threading
import time
from typing import Callable, Optional

from .dispatcher import Dispatcher
from .durations import format_duration, to_seconds
from .errors import SendError
from .message import build

logger = logging.getLogger(__name__)


class Slammer:
    """
    The send loop: count, build, send, pace, repeat.

    Owns the message counter and the monotonic start time; nothing else
    touches them. Runs until stop() is called, the optional limit is hit,
    or the process is interrupted. Failed sends are logged and skipped.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        address: str = "/cue/title/liveText",
        sleep: float = 0.0,
        limit: Optional[int] = None,
        log_every: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.dispatcher = dispatcher
        self.address = address
        self.sleep = sleep
        self.limit = limit
        self.log_every = log_every
        self._clock = clock
        self._stop = threading.Event()

        self.counter = 0
        self.failures = 0
        self.elapsed = 0.0

    @classmethod
    def from_settings(cls, settings) -> "Slammer":
        return cls(
            Dispatcher(settings.target),
            address=settings.address,
            sleep=settings.sleep,
            limit=settings.limit,
            log_every=settings.log_every,
        )

    def stop(self) -> None:
        self._stop.set()

    def _pace(self) -> None:
        """Wait out the send interval; stop() cuts the wait short."""
        seconds = to_seconds(self.sleep)
        if seconds < 0:
            raise ValueError(f"sleep must not be negative: {self.sleep!r}")
        if seconds > 0:
            self._stop.wait(seconds)

    def _done(self) -> bool:
        if self._stop.is_set():
            return True
        return self.limit is not None and self.counter >= self.limit

    def run(self) -> int:
        """Run the loop and return how many messages were attempted."""
        start = self._clock()
        logger.info(
            "Slamming %s with %s every %s%s",
            self.dispatcher.target, self.address, format_duration(self.sleep),
            f" (limit {self.limit})" if self.limit is not None else "",
        )

        try:
            while not self._done():
                self.counter += 1
                self.elapsed = max(0.0, self._clock() - start)
                msg = build(self.address, self.counter, self.elapsed)

                try:
                    self.dispatcher.send(msg)
                except SendError as e:
                    self.failures += 1
                    logger.warning("Message %d not sent: %s", self.counter, e)
                else:
                    if self.log_every and self.counter % self.log_every == 0:
                        logger.info("%d messages sent, %s elapsed", self.counter, format_duration(self.elapsed))

                if not self._done():
                    self._pace()
        finally:
            self.dispatcher.close()
            logger.info(
                "Stopped after %d messages (%d failed) in %s",
                self.counter, self.failures, format_duration(self.elapsed),
            )
        return self.counter
