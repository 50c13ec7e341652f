"""imagesnap capture backend for macOS.

macOS 向け imagesnap バックエンド。
"""

from __future__ import annotations

import logging
import re
import shlex
from typing import Optional

from webcam_capture.config import CaptureConfig
from webcam_capture.devices import parse_imagesnap_devices

from .base import CameraBackend, CaptureProcessError, CaptureValidationError

logger = logging.getLogger(__name__)

_NO_WEBCAM = re.compile(r"no video devices found", re.IGNORECASE)


class ImageSnapBackend(CameraBackend):
    """Capture backend driving ``imagesnap``.

    ``imagesnap`` only writes JPEG; the output extension is passed through
    unchanged.

    ``imagesnap`` を用いて 1 枚撮影する。
    """

    name = "imagesnap"
    default_executable = "imagesnap"

    def generate_sh(self, config: CaptureConfig, location: str) -> str:
        args = [self.executable]
        if config.delay:
            args += ["-w", str(config.delay)]
        if config.device:
            args += ["-d", str(config.device)]
        args.append("-v" if config.verbose else "-q")
        args.append(location)
        return shlex.join(args)

    def run_capture_validations(self, diagnostics: str) -> Optional[Exception]:
        if diagnostics and _NO_WEBCAM.search(diagnostics):
            return CaptureValidationError("No webcam found")
        return None

    def list_devices(self) -> list[str]:
        """List devices with ``imagesnap -l``.

        Raises:
            CaptureProcessError: If ``imagesnap -l`` exits with an error.
                ``imagesnap -l`` がエラー終了した場合。
        """
        command = shlex.join([self.executable, "-l"])
        result = self.runner(command)
        if result.returncode != 0:
            raise CaptureProcessError(command, result.returncode, result.stderr)
        devices = parse_imagesnap_devices(result.stdout)
        logger.debug("imagesnap listed %d device(s)", len(devices))
        return devices
