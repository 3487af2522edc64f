import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, TextIO

from tqdm import tqdm

from . import config
from .abort import AbortHandler
from .device.camera import Camera
from .manifest import advance, find_new, load_manifest
from .models import CameraFile, Session
from .status import StatusReporter

class ExposureState(Enum):
    IDLE = "idle"
    ARMING = "arming"
    EXPOSING = "exposing"
    RELEASING = "releasing"
    SETTLING = "settling"
    LISTING = "listing"
    DOWNLOADING = "downloading"


class ExposureCycle:
    """
    Captures one bulb frame and downloads the files it produced.

    States run strictly in order:
      IDLE -> ARMING -> EXPOSING -> RELEASING -> SETTLING -> LISTING -> DOWNLOADING -> IDLE
    Camera errors propagate unchanged. The abort flag is checked between
    states; an abort during EXPOSING skips RELEASING and leaves the single
    release attempt to the abort path.
    """
    def __init__(self,
                 camera: Camera,
                 session: Session,
                 abort: AbortHandler,
                 count_shortcut: bool = True,
                 status_stream: Optional[TextIO] = None):
        self.camera = camera
        self.session = session
        self.abort = abort
        self.count_shortcut = count_shortcut
        self.status_stream = status_stream
        self.state = ExposureState.IDLE

    def _enter(self, state: ExposureState):
        logging.debug(f"Frame {self.session.current}: {self.state.value} -> {state.value}")
        self.state = state

    def run(self, frame: int) -> List[Path]:
        """Runs a full cycle for `frame` and returns the local paths written."""
        s = self.session
        self.abort.check()
        s.current = frame

        self._enter(ExposureState.ARMING)
        s.battery = self.camera.battery_level()
        self.camera.set_config(config.REMOTE_RELEASE, config.SHUTTER_ARM)

        self._enter(ExposureState.EXPOSING)
        with StatusReporter(s, s.duration, stream=self.status_stream):
            self.abort.wait(s.duration + config.EXPOSURE_SETTLE_MARGIN)
        self.abort.check()

        self._enter(ExposureState.RELEASING)
        self.camera.set_config(config.REMOTE_RELEASE, config.SHUTTER_RELEASE)

        self._enter(ExposureState.SETTLING)
        self.abort.wait(config.WRITE_SETTLE_DELAY)
        self.abort.check()

        self._enter(ExposureState.LISTING)
        self.camera.reset()
        listing = load_manifest(self.camera)

        self._enter(ExposureState.DOWNLOADING)
        new_files = find_new(s.files, listing, self.count_shortcut)
        written, removed = self._download(new_files)

        s.files = advance(listing, removed)
        self._enter(ExposureState.IDLE)
        return written

    def _download(self, new_files: List[CameraFile]):
        s = self.session
        written: List[Path] = []
        removed: List[CameraFile] = []
        if not new_files:
            logging.warning(f"Frame {s.current}: no new files found on camera")
            return written, removed

        for file in tqdm(new_files, desc="Downloading", leave=False, file=self.status_stream):
            self.abort.check()
            dest = s.destination(file.name)
            self.camera.download(file, dest)
            written.append(dest)
            logging.info(f"Frame {s.current}: saved {file.path} -> {dest}")
            if not s.keep:
                self.camera.delete(file)
                removed.append(file)
        return written, removed
