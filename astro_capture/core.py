import logging
from typing import Optional, TextIO

from . import config
from .abort import AbortHandler
from .device.camera import Camera
from .exceptions import DeviceError, SettingError
from .exposure import ExposureCycle
from .manifest import load_manifest
from .models import Session

class AstroCaptureApp:
    def __init__(self,
                 camera: Camera,
                 session: Session,
                 abort: AbortHandler,
                 count_shortcut: bool = True,
                 status_stream: Optional[TextIO] = None):
        self.camera = camera
        self.session = session
        self.abort = abort
        self.cycle = ExposureCycle(camera, session, abort,
                                   count_shortcut=count_shortcut,
                                   status_stream=status_stream)

    def initialize(self):
        """
        Reads camera identity, takes the baseline listing and applies the
        fixed shooting settings. Every failure names the setting involved.
        """
        s = self.session
        s.model = self._read(config.CAMERA_MODEL)
        s.lens = self._read(config.LENS_NAME)
        s.files = load_manifest(self.camera)

        logging.info(f"Initializing camera: {s.model}...")
        for name, value in config.INIT_SETTINGS:
            if value is None:
                value = self._session_value(name)
            try:
                self.camera.set_config(name, value)
            except SettingError as e:
                raise SettingError(name, f"initialization failed: {e.message}") from e

        s.battery = self._read(config.BATTERY_LEVEL)
        logging.info("Camera initialized.")

    def _read(self, setting: str) -> str:
        try:
            return self.camera.get_config(setting)
        except SettingError as e:
            raise SettingError(setting, f"initialization failed: {e.message}") from e

    def _session_value(self, name: str) -> str:
        s = self.session
        if name == "shutterspeed":
            return s.shutter
        if name == "iso":
            return str(s.iso)
        if name == "aperture":
            return f"{s.aperture:.1f}"
        raise KeyError(name)

    def describe(self):
        s = self.session
        logging.info(f"Camera Model:  {s.model}")
        logging.info(f"Lens Model:    {s.lens}")
        logging.info(f"SD Card Files: {len(s.files)}")
        logging.info(f"Battery Level: {s.battery}")

    def capture_loop(self) -> int:
        """
        Captures frames 1, 2, ... until the requested count is reached
        (forever when frames is 0). The first failing cycle ends the loop.
        """
        s = self.session
        frame = 0
        while not s.finished:
            frame += 1
            self.cycle.run(frame)
        logging.info("Frames capture complete.")
        return frame

    def release_shutter(self):
        """Best-effort release used when aborting; the outcome is ignored."""
        try:
            self.camera.set_config(config.REMOTE_RELEASE, config.SHUTTER_RELEASE)
        except DeviceError as e:
            logging.warning(f"Shutter release on abort failed: {e}")

    def close(self):
        self.camera.close()
