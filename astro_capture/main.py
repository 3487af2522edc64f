import argparse
import logging
import sys
from pathlib import Path

from tqdm.contrib.logging import logging_redirect_tqdm

from . import config
from .abort import AbortHandler
from .core import AstroCaptureApp
from .device.camera import open_camera
from .exceptions import AstroCaptureError, CaptureAborted, ValidationError
from .models import Session

def setup_logging(target: Path, verbose: bool):
    """Sets up logging to both console and a file in the target directory."""
    log_level = logging.DEBUG if verbose else logging.INFO

    target.mkdir(parents=True, exist_ok=True)
    log_file = target / config.LOG_FILE_NAME

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Astro Capture: bulb exposure sessions over a tethered camera")

    p.add_argument("--frames", type=int, default=config.DEFAULT_FRAMES, help="Number of images to take or 0 for no limit")
    p.add_argument("--target", type=Path, default=config.DEFAULT_TARGET, help="Target directory to download images to")
    p.add_argument("--duration", type=int, default=config.DEFAULT_DURATION, help="Exposure length in seconds")
    p.add_argument("--shutter", default=config.DEFAULT_SHUTTER, help="Camera shutter speed")
    p.add_argument("--aperture", type=float, default=config.DEFAULT_APERTURE, help="Lens aperture ratio")
    p.add_argument("--iso", type=int, default=config.DEFAULT_ISO, help="ISO value")
    p.add_argument("--kind", default=config.DEFAULT_KIND, help="Capture 'lights' or 'darks' frames")
    p.add_argument("--keep", action="store_true", help="Keep files on the camera after download")
    p.add_argument("--name", default="", help="Camera model to use (default: first detected)")
    p.add_argument("--strict-diff", action="store_true",
                   help="Always compare file names when looking for new frames, even if the file count is unchanged")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)

def validate_options(kind: str, frames: int, duration: int):
    """Rejects unusable sessions before any camera command is sent."""
    if kind not in config.FRAME_KINDS:
        raise ValidationError(f"Bad 'kind' option: {kind} (must be either 'lights' or 'darks')")
    if frames < 0:
        raise ValidationError(f"Bad 'frames' option: {frames} (must be 0 or more)")
    if duration < 1:
        raise ValidationError(f"Bad 'duration' option: {duration} (must be at least 1 second)")
    if frames * duration > config.MAX_SESSION_SECONDS:
        raise ValidationError("Specified shooting time is longer than 8 hours, aborting.")

def build_session(args) -> Session:
    return Session(
        iso=args.iso,
        aperture=args.aperture,
        shutter=args.shutter,
        duration=args.duration,
        frames=args.frames,
        target=args.target.resolve(),
        kind=args.kind,
        keep=args.keep,
    )

def run(args, abort: AbortHandler) -> int:
    """Runs a validated session and maps its outcome to an exit code."""
    session = build_session(args)
    try:
        camera = open_camera(args.name)
    except AstroCaptureError as e:
        logging.error(f"Camera connection failed: {e}")
        return config.EXIT_FAILURE

    app = AstroCaptureApp(camera, session, abort, count_shortcut=not args.strict_diff)
    try:
        app.initialize()
        app.describe()
        with logging_redirect_tqdm():
            app.capture_loop()
        abort.check()
    except (CaptureAborted, KeyboardInterrupt):
        app.release_shutter()
        _close_quietly(app)
        return config.EXIT_ABORTED
    except AstroCaptureError as e:
        logging.error(f"Capture failed on frame {session.current}: {e}")
        _close_quietly(app)
        return config.EXIT_FAILURE
    except Exception:
        logging.exception("Fatal error during capture.")
        _close_quietly(app)
        return config.EXIT_FAILURE

    try:
        app.close()
    except AstroCaptureError as e:
        logging.error(f"Camera close failed: {e}")
        return config.EXIT_FAILURE
    return config.EXIT_OK

def _close_quietly(app: AstroCaptureApp):
    try:
        app.close()
    except AstroCaptureError as e:
        logging.debug(f"Camera close failed: {e}")

def main(argv=None) -> int:
    args = parse_args(argv)
    target = args.target.resolve()

    setup_logging(target, args.verbose)

    try:
        validate_options(args.kind, args.frames, args.duration)
    except ValidationError as e:
        logging.error(str(e))
        return config.EXIT_FAILURE

    logging.info("=== Astro Capture Started ===")
    logging.info(f"Target: {target / args.kind}")

    try:
        with AbortHandler() as abort:
            return run(args, abort)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return config.EXIT_ABORTED

if __name__ == "__main__":
    sys.exit(main())
