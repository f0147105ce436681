"""
autoplay.py — Hero Carousel Autoplay

One daemon thread per scheduler advances the carousel every `interval`
seconds. Every manual navigation or selection calls `restart()`, which pushes
the next tick a full interval into the future.

Thread model:
    - `_cond` protects the deadline, the generation counter and the thread handle.
    - `on_tick` runs outside `_cond`, so the tick callback may take its own locks
      (the selection engine's) while user actions call `restart()` under them.
    - `start()` on a running scheduler only restarts it; there is never more
      than one timer thread per scheduler.
"""

import os
import threading
import time
from typing import Callable, Optional

from storefront_service.logging_config import get_logger

AUTOPLAY_INTERVAL = float(os.environ.get("AUTOPLAY_INTERVAL", "4.5"))

log = get_logger(__name__)


class AutoplayScheduler:
    """
    Repeating timer that drives `SelectionEngine.autoplay_tick`.

    Args:
        on_tick (callable): Called as `on_tick(still_due)` on every tick. `still_due()`
            returns False once the tick has been superseded by `restart()` or `stop()`.
        interval (float): Seconds between ticks and length of the quiet period
            after a user action.
    """

    def __init__(self, on_tick: Callable[[Callable[[], bool]], object], interval: float = AUTOPLAY_INTERVAL):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = float(interval)
        self._on_tick = on_tick
        self._cond = threading.Condition()
        self._generation = 0
        self._deadline = 0.0
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        """Starts the timer, or restarts it if it is already running."""
        with self._cond:
            self._reset_deadline()
            if self._thread is not None:
                return
            self._thread = threading.Thread(target=self._run, name="carousel-autoplay", daemon=True)
            self._thread.start()
        log.debug(f"Autoplay started ({self.interval}s interval).")

    def restart(self) -> None:
        """Gives the carousel a full quiet period. No effect when the timer is stopped."""
        with self._cond:
            if self._thread is None:
                return
            self._reset_deadline()

    def stop(self, join: bool = True) -> None:
        """Cancels the timer. Pending ticks are dropped."""
        with self._cond:
            thread = self._thread
            self._thread = None
            self._generation += 1
            self._cond.notify_all()

        if join and thread is not None and thread is not threading.current_thread():
            thread.join()
        if thread is not None:
            log.debug("Autoplay stopped.")

    dispose = stop

    # -------------------- worker thread --------------------

    def _reset_deadline(self) -> None:
        # Caller holds self._cond
        self._generation += 1
        self._deadline = time.monotonic() + self.interval
        self._cond.notify_all()

    def _run(self) -> None:
        me = threading.current_thread()
        while True:
            with self._cond:
                while self._thread is me:
                    remaining = self._deadline - time.monotonic()
                    if remaining <= 0:
                        break
                    self._cond.wait(remaining)
                if self._thread is not me:
                    return
                generation = self._generation
                self._deadline = time.monotonic() + self.interval

            self._fire(generation)

    def _fire(self, generation: int) -> None:
        def still_due() -> bool:
            return self._generation == generation

        try:
            self._on_tick(still_due)
        except Exception:
            # A failing tick must not kill the timer thread
            log.exception("Autoplay tick failed.")
