from __future__ import annotations

import subprocess

import pytest

from webcam_capture import NullBackend
from webcam_capture.devices import (
    parse_commandcam_devices,
    parse_imagesnap_devices,
    probe_opencv_devices,
)
from webcam_capture.process import CommandResult, SubprocessRunner


class FakeCapture:
    """Stand-in for cv2.VideoCapture that opens only listed indices."""

    openable = {0, 2}
    released: list[int] = []

    def __init__(self, index: int) -> None:
        self.index = index

    def isOpened(self) -> bool:
        return self.index in self.openable

    def release(self) -> None:
        FakeCapture.released.append(self.index)


@pytest.fixture()
def fake_cv2(monkeypatch) -> type[FakeCapture]:
    FakeCapture.released = []
    monkeypatch.setattr("webcam_capture.devices.cv2.VideoCapture", FakeCapture)
    return FakeCapture


def test_probe_opencv_devices(fake_cv2) -> None:
    """Only openable indices are reported, and every handle is released."""
    assert probe_opencv_devices(4) == ["0", "2"]
    assert fake_cv2.released == [0, 1, 2, 3]


def test_null_backend_lists_with_opencv(fake_cv2) -> None:
    """The null backend falls back to OpenCV probing."""
    assert NullBackend().list_devices() == ["0", "2"]


def test_parse_imagesnap_bracketed_style() -> None:
    """Older imagesnap prints names in brackets."""
    output = "Video Devices:\n[FaceTime HD Camera (Built-in)][0x8020000005ac8514]\n\n"
    assert parse_imagesnap_devices(output) == ["FaceTime HD Camera (Built-in)"]


def test_parse_imagesnap_empty() -> None:
    """A header with no devices yields nothing."""
    assert parse_imagesnap_devices("Video Devices:\n") == []


def test_parse_commandcam_ignores_other_lines() -> None:
    """Banner and summary lines are skipped."""
    output = "CommandCam  Copyright (C) 2012 Ted Burke\nDevice name: Webcam\nDone.\n"
    assert parse_commandcam_devices(output) == ["Webcam"]


def test_subprocess_runner_skips_blank_commands(monkeypatch) -> None:
    """Blank commands succeed without spawning a shell."""

    def fail(*args, **kwargs):
        raise AssertionError("subprocess.run should not be called")

    monkeypatch.setattr(subprocess, "run", fail)
    assert SubprocessRunner()("  ") == CommandResult(returncode=0)


def test_subprocess_runner_collects_output(monkeypatch) -> None:
    """The runner returns exit status and both streams."""
    seen = {}

    def fake_run(command, **kwargs):
        seen.update(kwargs, command=command)
        return subprocess.CompletedProcess(command, 3, stdout="out", stderr="err")

    monkeypatch.setattr(subprocess, "run", fake_run)
    result = SubprocessRunner(timeout=5)("fswebcam x.jpg")

    assert result == CommandResult(returncode=3, stdout="out", stderr="err")
    assert seen["command"] == "fswebcam x.jpg"
    assert seen["shell"] is True
    assert seen["timeout"] == 5


def test_subprocess_runner_zero_timeout_waits_forever(monkeypatch) -> None:
    """A zero timeout disables the limit."""
    seen = {}

    def fake_run(command, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    SubprocessRunner(timeout=0)("true")

    assert seen["timeout"] is None
