"""
Custom exception hierarchy for the capture application.

Every device command failure maps onto one of these types so the top level
can report which operation failed before terminating.
"""


class AstroCaptureError(Exception):
    """Base exception for all capture errors."""
    pass


class DeviceError(AstroCaptureError):
    """Base for failures reported by the camera."""
    pass


class CameraConnectionError(DeviceError):
    """Raised when the camera cannot be found or opened."""
    pass


class SettingError(DeviceError):
    """Raised when reading or writing a camera setting fails."""

    def __init__(self, setting: str, message: str):
        super().__init__(f"{setting}: {message}")
        self.setting = setting
        self.message = message


class ListError(DeviceError):
    """Raised when the file listing cannot be retrieved."""
    pass


class DownloadError(DeviceError):
    """Raised when a file transfer fails or its destination is unwritable."""

    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name


class ResetError(DeviceError):
    """Raised when the camera connection cannot be reset."""
    pass


class ValidationError(AstroCaptureError):
    """Raised when session options violate their constraints."""
    pass


class CaptureAborted(AstroCaptureError):
    """Raised at a cycle checkpoint after the user interrupted the session."""
    pass
