"""
Serialized access to the camera.
"""
import logging
import threading
from pathlib import Path
from typing import List

from .. import config
from ..exceptions import DownloadError
from ..models import CameraFile

class Camera:
    """
    Single owner of the device handle. Every command holds the same lock,
    so a shutter release issued by the abort path is ordered after any
    command already in flight.
    """
    def __init__(self, backend):
        self.backend = backend
        self._lock = threading.RLock()

    def get_config(self, name: str) -> str:
        with self._lock:
            value = self.backend.get_config(name)
        logging.debug(f"get {name} -> {value!r}")
        return str(value)

    def set_config(self, name: str, value: str):
        logging.debug(f"set {name} = {value!r}")
        with self._lock:
            self.backend.set_config(name, value)

    def battery_level(self) -> str:
        return self.get_config(config.BATTERY_LEVEL)

    def list_files(self) -> List[CameraFile]:
        with self._lock:
            return self.backend.list_files()

    def download(self, file: CameraFile, dest: Path):
        """Streams a camera file into `dest`, creating parent folders."""
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with dest.open("wb") as fh:
                with self._lock:
                    self.backend.download(file, fh)
        except OSError as e:
            raise DownloadError(file.name, f"cannot write {dest}: {e}") from e

    def delete(self, file: CameraFile):
        with self._lock:
            self.backend.delete(file)

    def reset(self):
        with self._lock:
            self.backend.reset()

    def close(self):
        with self._lock:
            self.backend.close()


def open_camera(name: str = "") -> Camera:
    """Connects to the named camera through libgphoto2."""
    from .gphoto import GPhotoBackend

    backend = GPhotoBackend()
    backend.connect(name)
    return Camera(backend)
