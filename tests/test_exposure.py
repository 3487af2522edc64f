import pytest

from astro_capture import config
from astro_capture.exceptions import CaptureAborted, DownloadError, ResetError, SettingError
from astro_capture.exposure import ExposureCycle, ExposureState
from astro_capture.manifest import load_manifest

ARM = ("set", config.REMOTE_RELEASE, config.SHUTTER_ARM)
RELEASE = ("set", config.REMOTE_RELEASE, config.SHUTTER_RELEASE)

@pytest.fixture
def cycle(camera, session, abort, stream):
    session.files = load_manifest(camera)
    return ExposureCycle(camera, session, abort, status_stream=stream)

def test_cycle_runs_states_in_order(cycle, backend):
    backend.commands.clear()
    cycle.run(1)

    assert backend.commands == [
        ("get", config.BATTERY_LEVEL),
        ARM,
        RELEASE,
        ("reset",),
        ("list",),
        ("download", "IMG_0003.CR2"),
        ("delete", "IMG_0003.CR2"),
    ]
    assert cycle.state is ExposureState.IDLE

def test_cycle_waits_exposure_then_settle(cycle, abort, session):
    cycle.run(1)
    assert abort.waits == [
        session.duration + config.EXPOSURE_SETTLE_MARGIN,
        config.WRITE_SETTLE_DELAY,
    ]

def test_cycle_downloads_new_file_to_kind_folder(cycle, session):
    written = cycle.run(1)

    dest = session.target / "lights" / "IMG_0003.CR2"
    assert written == [dest]
    assert dest.read_bytes() == b"data-IMG_0003.CR2"
    assert session.current == 1

def test_cycle_refreshes_battery(cycle, backend, session):
    backend.settings[config.BATTERY_LEVEL] = "40%"
    cycle.run(1)
    assert session.battery == "40%"

def test_baseline_advances_when_keeping_files(cycle, backend, session):
    session.keep = True
    cycle.run(1)
    assert [f.name for f in session.files] == ["IMG_0001.CR2", "IMG_0002.CR2", "IMG_0003.CR2"]

    written = cycle.run(2)
    assert [p.name for p in written] == ["IMG_0004.CR2"]
    assert backend.count("download", "IMG_0003.CR2") == 1
    assert not any(c[0] == "delete" for c in backend.commands)

def test_baseline_drops_deleted_files(cycle, backend, session):
    cycle.run(1)
    assert [f.name for f in session.files] == ["IMG_0001.CR2", "IMG_0002.CR2"]
    assert "IMG_0003.CR2" not in backend.files

    written = cycle.run(2)
    assert [p.name for p in written] == ["IMG_0004.CR2"]

def test_arm_failure_propagates(cycle, backend):
    def fail(cmd):
        if cmd == ARM:
            raise SettingError(config.REMOTE_RELEASE, "device busy")
    backend.on_command = fail

    with pytest.raises(SettingError) as exc:
        cycle.run(1)

    assert exc.value.setting == config.REMOTE_RELEASE
    assert backend.count(*RELEASE) == 0
    assert cycle.state is ExposureState.ARMING

def test_reset_failure_propagates(cycle, backend):
    def fail(cmd):
        if cmd == ("reset",):
            raise ResetError("usb gone")
    backend.on_command = fail

    with pytest.raises(ResetError):
        cycle.run(1)
    assert not any(c[0] == "download" for c in backend.commands)

def test_unwritable_destination_is_download_error(cycle, session, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    session.target = blocker

    with pytest.raises(DownloadError) as exc:
        cycle.run(1)
    assert exc.value.name == "IMG_0003.CR2"

def test_abort_during_exposure_skips_release(cycle, backend, abort):
    def interrupt(cmd):
        if cmd == ARM:
            abort.trigger()
    backend.on_command = interrupt
    backend.commands.clear()

    with pytest.raises(CaptureAborted):
        cycle.run(1)

    assert cycle.state is ExposureState.EXPOSING
    assert backend.count(*RELEASE) == 0
    assert not any(c[0] == "list" for c in backend.commands)

def test_aborted_session_does_not_start_new_cycle(cycle, backend, abort):
    abort.trigger()
    backend.commands.clear()
    with pytest.raises(CaptureAborted):
        cycle.run(1)
    assert backend.commands == []

def test_release_failure_propagates(cycle, backend):
    def fail(cmd):
        if cmd == RELEASE:
            raise SettingError(config.REMOTE_RELEASE, "release rejected")
    backend.on_command = fail
    backend.commands.clear()

    with pytest.raises(SettingError):
        cycle.run(1)

    assert cycle.state is ExposureState.RELEASING
    assert backend.count("reset") == 0
    assert backend.count("list") == 0

def test_transfer_failure_propagates_without_delete(cycle, backend):
    def fail(cmd):
        if cmd == ("download", "IMG_0003.CR2"):
            raise DownloadError("IMG_0003.CR2", "usb timeout")
    backend.on_command = fail

    with pytest.raises(DownloadError) as exc:
        cycle.run(1)

    assert exc.value.name == "IMG_0003.CR2"
    assert not any(c[0] == "delete" for c in backend.commands)
    assert "IMG_0003.CR2" in backend.files
