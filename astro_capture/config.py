"""
Configuration constants for the bulb capture session.
"""
from pathlib import Path

# --- Camera Settings ---
REMOTE_RELEASE = "eosremoterelease"
BATTERY_LEVEL = "batterylevel"
CAMERA_MODEL = "cameramodel"
LENS_NAME = "lensname"

# Values for the remote release trigger
SHUTTER_ARM = "Immediate"
SHUTTER_RELEASE = "Release Full"

# Applied once at session start, in this order.
# None means the value comes from the session (shutter, iso, aperture).
INIT_SETTINGS = [
    ("focusmode", "Manual"),
    ("shutterspeed", None),
    ("iso", None),
    ("whitebalance", "Daylight"),
    ("imageformat", "RAW"),
    ("aperture", None),
    ("capturetarget", "Memory card"),
]

# --- Timing ---
# Extra time on top of the exposure so the camera registers the full duration
EXPOSURE_SETTLE_MARGIN = 0.1  # seconds
# Time for the camera to finish writing the frame before the listing is read
WRITE_SETTLE_DELAY = 2.0  # seconds
STATUS_TICK = 1.0  # seconds

# --- Validation ---
FRAME_KINDS = ("lights", "darks")
MAX_SESSION_SECONDS = 8 * 60 * 60  # 8 hours

# --- CLI Defaults ---
DEFAULT_FRAMES = 0
DEFAULT_TARGET = Path("/tmp/target")
DEFAULT_DURATION = 60
DEFAULT_SHUTTER = "bulb"
DEFAULT_APERTURE = 2.8
DEFAULT_ISO = 800
DEFAULT_KIND = "lights"
LOG_FILE_NAME = "capture.log"

# --- Exit Codes ---
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_ABORTED = 130
