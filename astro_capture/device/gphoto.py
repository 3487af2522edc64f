"""
libgphoto2 backend: the only module that talks to python-gphoto2.

Every gphoto2.GPhoto2Error is translated into the capture exception
hierarchy, tagged with the operation that failed.
"""
import logging
from typing import BinaryIO, List

import gphoto2 as gp

from ..exceptions import (
    CameraConnectionError, SettingError, ListError, DownloadError, ResetError,
)
from ..models import CameraFile

class GPhotoBackend:
    def __init__(self):
        self.camera = None

    def connect(self, name: str = ""):
        """
        Opens the camera whose model matches `name`, or the first
        autodetected camera when no name is given.
        """
        camera = gp.Camera()
        try:
            if name:
                self._select_model(camera, name)
            camera.init()
        except gp.GPhoto2Error as e:
            raise CameraConnectionError(f"Cannot open camera '{name or 'auto'}': {e}") from e
        self.camera = camera

    def _select_model(self, camera, name: str):
        detected = list(gp.Camera.autodetect())
        logging.debug(f"Detected cameras: {detected}")
        matches = [(model, addr) for model, addr in detected if model == name]
        if not matches:
            raise CameraConnectionError(f"Camera '{name}' not found")
        model, addr = matches[0]

        port_info_list = gp.PortInfoList()
        port_info_list.load()
        camera.set_port_info(port_info_list[port_info_list.lookup_path(addr)])

        abilities_list = gp.CameraAbilitiesList()
        abilities_list.load()
        camera.set_abilities(abilities_list[abilities_list.lookup_model(model)])

    def get_config(self, name: str):
        try:
            return self.camera.get_single_config(name).get_value()
        except gp.GPhoto2Error as e:
            raise SettingError(name, str(e)) from e

    def set_config(self, name: str, value):
        try:
            widget = self.camera.get_single_config(name)
            widget.set_value(value)
            self.camera.set_single_config(name, widget)
        except gp.GPhoto2Error as e:
            raise SettingError(name, str(e)) from e

    def list_files(self) -> List[CameraFile]:
        """Returns the storage tree rooted at '/' (storages -> folders -> files)."""
        try:
            return list(self._walk("/"))
        except gp.GPhoto2Error as e:
            raise ListError(f"Listing camera files failed: {e}") from e

    def _walk(self, folder: str):
        for name, _ in self.camera.folder_list_folders(folder):
            path = f"{folder.rstrip('/')}/{name}"
            yield CameraFile(name=name, folder=folder, is_dir=True,
                             children=tuple(self._walk(path)))
        for name, _ in self.camera.folder_list_files(folder):
            yield CameraFile(name=name, folder=folder)

    def download(self, file: CameraFile, stream: BinaryIO):
        try:
            camera_file = self.camera.file_get(file.folder, file.name, gp.GP_FILE_TYPE_NORMAL)
            stream.write(memoryview(camera_file.get_data_and_size()))
        except gp.GPhoto2Error as e:
            raise DownloadError(file.name, str(e)) from e

    def delete(self, file: CameraFile):
        try:
            self.camera.file_delete(file.folder, file.name)
        except gp.GPhoto2Error as e:
            raise DownloadError(file.name, f"delete failed: {e}") from e

    def reset(self):
        """Re-opens the session; some bodies only refresh their listing after this."""
        try:
            self.camera.exit()
            self.camera.init()
        except gp.GPhoto2Error as e:
            raise ResetError(f"Camera reset failed: {e}") from e

    def close(self):
        if self.camera is None:
            return
        try:
            self.camera.exit()
        except gp.GPhoto2Error as e:
            raise CameraConnectionError(f"Camera exit failed: {e}") from e
        finally:
            self.camera = None
