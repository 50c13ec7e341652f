"""Capture device enumeration helpers.

撮影デバイスの列挙ヘルパー。
"""

from __future__ import annotations

import glob
import logging
import re

import cv2

logger = logging.getLogger(__name__)

_IMAGESNAP_HEADER = "Video Devices:"
_IMAGESNAP_BRACKETED = re.compile(r"^\[(?P<name>[^\]]+)\]")
_COMMANDCAM_DEVICE = re.compile(r"^\s*Device name:\s*(?P<name>.+?)\s*$", re.IGNORECASE)


def list_video_device_nodes(pattern: str = "/dev/video*") -> list[str]:
    """Return V4L2 device nodes, e.g. ``/dev/video0``."""
    return sorted(glob.glob(pattern))


def parse_imagesnap_devices(output: str) -> list[str]:
    """Parse the output of ``imagesnap -l`` into device names.

    Handles both the ``=> Name`` and ``[Name][id]`` listing styles.

    Args:
        output: Text printed by ``imagesnap -l``.
            ``imagesnap -l`` の出力テキスト。

    Returns:
        Device names in listing order.
            一覧順のデバイス名。
    """
    devices: list[str] = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line == _IMAGESNAP_HEADER:
            continue
        if line.startswith("=>"):
            line = line[2:].strip()
        match = _IMAGESNAP_BRACKETED.match(line)
        if match:
            line = match.group("name")
        if line:
            devices.append(line)
    return devices


def parse_commandcam_devices(output: str) -> list[str]:
    """Parse the output of ``CommandCam /devlist`` into device names."""
    return [
        match.group("name")
        for match in map(_COMMANDCAM_DEVICE.match, output.splitlines())
        if match
    ]


def probe_opencv_devices(max_index: int = 8) -> list[str]:
    """Return the indices OpenCV can open, as strings.

    Used where no capture utility offers a listing of its own.

    独自の一覧機能を持たない環境向けに、OpenCV で開けるデバイス番号を返す。

    Args:
        max_index: Number of consecutive indices to try, starting at 0.
            0 から順に試すインデックス数。

    Returns:
        Openable device indices.
            オープンできたデバイス番号。
    """
    found: list[str] = []
    for index in range(max_index):
        cap = cv2.VideoCapture(index)
        try:
            if cap.isOpened():
                found.append(str(index))
        finally:
            cap.release()
    logger.debug("OpenCV probe found %d device(s)", len(found))
    return found
