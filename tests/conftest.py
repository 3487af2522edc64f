import io

import pytest

from astro_capture import config
from astro_capture.abort import AbortHandler
from astro_capture.device.camera import Camera
from astro_capture.models import CameraFile, Session

STORAGE = "/store_00020001"
DCIM = "/store_00020001/DCIM"
FOLDER = "/store_00020001/DCIM/100CANON"


class FakeBackend:
    """
    In-memory camera. Releasing the shutter writes a new frame to the card,
    so the listing grows by one file per exposure.
    """
    def __init__(self, existing=("IMG_0001.CR2", "IMG_0002.CR2")):
        self.settings = {
            config.CAMERA_MODEL: "Canon EOS 6D",
            config.LENS_NAME: "EF24-70mm f/2.8L",
            config.BATTERY_LEVEL: "75%",
        }
        self.files = {name: f"data-{name}".encode() for name in existing}
        self.commands = []
        self.on_command = None
        self.shots = len(existing)

    def _record(self, *cmd):
        self.commands.append(cmd)
        if self.on_command:
            self.on_command(cmd)

    def get_config(self, name):
        self._record("get", name)
        return self.settings[name]

    def set_config(self, name, value):
        self._record("set", name, value)
        self.settings[name] = value
        if name == config.REMOTE_RELEASE and value == config.SHUTTER_RELEASE:
            self.shots += 1
            name = f"IMG_{self.shots:04d}.CR2"
            self.files[name] = f"data-{name}".encode()

    def list_files(self):
        self._record("list")
        files = tuple(CameraFile(name=n, folder=FOLDER) for n in self.files)
        return [
            CameraFile(name="store_00020001", folder="/", is_dir=True, children=(
                CameraFile(name="DCIM", folder=STORAGE, is_dir=True, children=(
                    CameraFile(name="100CANON", folder=DCIM, is_dir=True, children=files),
                )),
            )),
        ]

    def download(self, file, stream):
        self._record("download", file.name)
        stream.write(self.files[file.name])

    def delete(self, file):
        self._record("delete", file.name)
        del self.files[file.name]

    def reset(self):
        self._record("reset")

    def close(self):
        self._record("close")

    def count(self, *cmd):
        return sum(1 for c in self.commands if c == cmd)


class InstantAbort(AbortHandler):
    """AbortHandler whose waits return immediately."""
    def __init__(self):
        super().__init__()
        self.waits = []

    def wait(self, seconds):
        self.waits.append(seconds)
        return self.triggered


@pytest.fixture
def backend():
    return FakeBackend()

@pytest.fixture
def camera(backend):
    return Camera(backend)

@pytest.fixture
def abort():
    return InstantAbort()

@pytest.fixture
def stream():
    return io.StringIO()

@pytest.fixture
def session(tmp_path):
    return Session(duration=1, frames=3, target=tmp_path / "out", kind="lights")
