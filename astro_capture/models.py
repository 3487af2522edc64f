from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from . import config

@dataclass(frozen=True)
class CameraFile:
    """
    One entry of the camera storage listing.
    The name is the sole identity key within a snapshot.
    """
    name: str
    folder: str
    is_dir: bool = False
    children: Tuple["CameraFile", ...] = ()

    @property
    def path(self) -> str:
        return f"{self.folder.rstrip('/')}/{self.name}"


@dataclass
class Session:
    """
    State of one capture run. Created once from the CLI options and
    mutated in place by every exposure cycle.
    """
    iso: int = config.DEFAULT_ISO
    aperture: float = config.DEFAULT_APERTURE
    shutter: str = config.DEFAULT_SHUTTER
    duration: int = config.DEFAULT_DURATION
    frames: int = config.DEFAULT_FRAMES    # 0 = no limit
    target: Path = config.DEFAULT_TARGET
    kind: str = config.DEFAULT_KIND        # lights/darks
    keep: bool = False

    # Filled in by initialization / each cycle
    model: str = ""
    lens: str = ""
    battery: str = ""
    current: int = 0
    files: List[CameraFile] = field(default_factory=list)

    @property
    def bounded(self) -> bool:
        return self.frames > 0

    @property
    def finished(self) -> bool:
        return self.bounded and self.current >= self.frames

    def destination(self, name: str) -> Path:
        return Path(self.target) / self.kind / name
