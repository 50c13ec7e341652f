"""fswebcam capture backend for Linux.

Builds ``fswebcam`` command lines for V4L2 devices and recognises the
"no such device" message fswebcam prints while still exiting with 0.

Linux 向け fswebcam バックエンド。

V4L2 デバイス用の ``fswebcam`` コマンドを生成し、終了コード 0 のまま
出力される「デバイスが存在しない」メッセージを検出する。
"""

from __future__ import annotations

import re
import shlex
from typing import Optional

from webcam_capture.config import CaptureConfig
from webcam_capture.devices import list_video_device_nodes

from .base import CameraBackend, CaptureValidationError

_NO_WEBCAM = re.compile(r"no.*such.*(file|device)", re.IGNORECASE)


class FSWebcamBackend(CameraBackend):
    """Capture backend driving ``fswebcam``.

    ``fswebcam`` を用いて 1 枚撮影する。
    """

    name = "fswebcam"
    default_executable = "fswebcam"

    def generate_sh(self, config: CaptureConfig, location: str) -> str:
        """Build an ``fswebcam`` command line.

        Args:
            config: Effective capture options.
                有効な撮影オプション。
            location: Final output path.
                最終的な出力パス。

        Returns:
            Command string with every argument shell-quoted.
                各引数をシェルクォートしたコマンド文字列。
        """
        args = [self.executable, "-q", "-r", f"{config.width}x{config.height}"]

        if config.frames:
            args += ["-F", str(config.frames)]
        if config.skip:
            args += ["-S", str(config.skip)]
        if config.delay:
            args += ["-D", str(config.delay)]
        if config.device:
            args += ["-d", str(config.device)]
        if config.greyscale:
            args.append("--greyscale")
        if config.rotation:
            args += ["--rotate", str(config.rotation)]

        # fswebcam has no bmp writer; the extension alone decides.
        if config.output == "jpeg":
            args += ["--jpeg", str(config.quality)]
        elif config.output == "png":
            args += ["--png", "-1"]

        args += self._banner_args(config)

        for key, value in config.set_values.items():
            args += ["--set", f"{key}={value}"]

        args.append(location)
        return shlex.join(args)

    @staticmethod
    def _banner_args(config: CaptureConfig) -> list[str]:
        if not config.top_banner and not config.bottom_banner:
            return ["--no-banner"]

        args = ["--top-banner" if config.top_banner else "--bottom-banner"]
        if config.title:
            args += ["--title", config.title]
        if config.subtitle:
            args += ["--subtitle", config.subtitle]
        if config.timestamp:
            args += ["--timestamp", config.timestamp]
        return args

    def run_capture_validations(self, diagnostics: str) -> Optional[Exception]:
        if diagnostics and _NO_WEBCAM.search(diagnostics):
            return CaptureValidationError("No webcam found")
        return None

    def list_devices(self) -> list[str]:
        return list_video_device_nodes()
