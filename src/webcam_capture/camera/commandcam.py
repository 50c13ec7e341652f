"""CommandCam capture backend for Windows.

Windows 向け CommandCam バックエンド。
"""

from __future__ import annotations

import re
import subprocess
from typing import Optional

from webcam_capture.config import CaptureConfig
from webcam_capture.devices import parse_commandcam_devices

from .base import CameraBackend, CaptureProcessError, CaptureValidationError

_NO_WEBCAM = re.compile(r"no video devices found", re.IGNORECASE)


class CommandCamBackend(CameraBackend):
    """Capture backend driving ``CommandCam.exe``.

    CommandCam takes its delay in milliseconds and always writes BMP data;
    commands are quoted for ``cmd.exe``.

    ``CommandCam.exe`` を用いて 1 枚撮影する。遅延はミリ秒で指定する。
    """

    name = "commandcam"
    default_executable = "CommandCam.exe"

    def generate_sh(self, config: CaptureConfig, location: str) -> str:
        args = [self.executable]
        if config.delay:
            args += ["/delay", str(config.delay * 1000)]
        if config.device:
            args += ["/devnum", str(config.device)]
        args += ["/filename", location]
        return subprocess.list2cmdline(args)

    def run_capture_validations(self, diagnostics: str) -> Optional[Exception]:
        if diagnostics and _NO_WEBCAM.search(diagnostics):
            return CaptureValidationError("No webcam found")
        return None

    def list_devices(self) -> list[str]:
        """List devices with ``CommandCam /devlist``.

        CommandCam prints its listing on stderr, so both streams are parsed.

        Raises:
            CaptureProcessError: If the listing command exits with an error.
        """
        command = subprocess.list2cmdline([self.executable, "/devlist"])
        result = self.runner(command)
        if result.returncode != 0:
            raise CaptureProcessError(command, result.returncode, result.stderr)
        return parse_commandcam_devices(f"{result.stdout}\n{result.stderr}")
