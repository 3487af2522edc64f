"""
Ctrl-C handling for a capture session.

The signal handler only raises a flag. The exposure cycle looks at the flag
between its states, so the shutter release that follows an abort is issued
from the main flow, after any camera command already in progress.
"""
import logging
import signal
import threading

from .exceptions import CaptureAborted

class AbortHandler:
    def __init__(self, signum: int = signal.SIGINT):
        self.signum = signum
        self._event = threading.Event()
        self._previous = None
        self._installed = False

    @property
    def triggered(self) -> bool:
        return self._event.is_set()

    def install(self):
        self._previous = signal.signal(self.signum, self._handle)
        self._installed = True

    def uninstall(self):
        if self._installed:
            signal.signal(self.signum, self._previous)
            self._installed = False

    def __enter__(self):
        self.install()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.uninstall()

    def _handle(self, signum, frame):
        # A second Ctrl-C falls through to the default KeyboardInterrupt.
        signal.signal(self.signum, signal.default_int_handler)
        self.trigger()

    def trigger(self):
        if not self._event.is_set():
            logging.warning("Interrupt received, aborting capture...")
        self._event.set()

    def wait(self, seconds: float) -> bool:
        """Sleeps up to `seconds`; returns True if the session was aborted meanwhile."""
        return self._event.wait(seconds)

    def check(self):
        if self._event.is_set():
            raise CaptureAborted("Capture aborted by user")
