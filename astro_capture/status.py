import threading
from typing import Optional, TextIO

from tqdm import tqdm

from . import config
from .models import Session

def format_status(kind: str, current: int, frames: int, remaining: int, battery: str) -> str:
    if frames == 0:
        return f"Capturing {kind} frame {current:3d}; {remaining} seconds remaining; battery: {battery}"
    return f"Capturing {kind} frame {current:3d}/{frames}; {remaining} seconds remaining; battery: {battery}"


class StatusReporter:
    """
    Single-line countdown of the running exposure, drawn from a background
    thread. It keeps its own one-second tick and never touches the exposure
    timing; the cycle stops it as soon as the wait is over.
    """
    def __init__(self, session: Session, seconds: int,
                 stream: Optional[TextIO] = None, tick: float = config.STATUS_TICK):
        self.session = session
        self.seconds = seconds
        self.stream = stream
        self.tick = tick
        self.lines_shown = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def line(self, remaining: int) -> str:
        s = self.session
        return format_status(s.kind, s.current, s.frames, remaining, s.battery)

    def start(self):
        self._thread = threading.Thread(target=self._run, name="status-reporter", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def _run(self):
        bar = tqdm(total=self.seconds, bar_format="{desc}", file=self.stream, leave=False)
        try:
            for remaining in range(self.seconds, 0, -1):
                if self._stop.is_set():
                    break
                bar.set_description_str(self.line(remaining))
                self.lines_shown += 1
                if self._stop.wait(self.tick):
                    break
        finally:
            bar.close()
