"""Capture backend factory.

Maps backend names from configuration to concrete capture backend
implementations, and picks one from the running platform for ``auto``.

撮影バックエンドのファクトリ。

設定で指定されたバックエンド名を具体的な実装クラスに解決する。
``auto`` の場合は実行中のプラットフォームから選択する。
"""

from __future__ import annotations

import sys
from typing import Optional

from webcam_capture.config import BackendConfig
from webcam_capture.process import SubprocessRunner

from .base import CameraBackend, CaptureConfigurationError, NullBackend
from .commandcam import CommandCamBackend
from .fswebcam import FSWebcamBackend
from .imagesnap import ImageSnapBackend

_BACKENDS: dict[str, type[CameraBackend]] = {
    "commandcam": CommandCamBackend,
    "fswebcam": FSWebcamBackend,
    "imagesnap": ImageSnapBackend,
    "null": NullBackend,
}

_PLATFORM_BACKENDS: dict[str, str] = {
    "linux": "fswebcam",
    "darwin": "imagesnap",
    "win32": "commandcam",
    "cygwin": "commandcam",
}


def available_camera_backends() -> tuple[str, ...]:
    """Return registered backend names.

    Returns:
        Sorted backend names.
            利用可能なバックエンド名のソート済みタプル。
    """
    return tuple(sorted(_BACKENDS.keys()))


def detect_backend_name(platform: Optional[str] = None) -> str:
    """Return the backend name for ``platform`` (``sys.platform`` by default).

    Unknown platforms map to ``null``.

    プラットフォームに対応するバックエンド名を返す。未知の場合は ``null``。
    """
    platform = platform or sys.platform
    for prefix, name in _PLATFORM_BACKENDS.items():
        if platform.startswith(prefix):
            return name
    return "null"


def create_camera_backend(config: BackendConfig) -> CameraBackend:
    """Instantiate a capture backend from config.

    Args:
        config: Backend configuration object.
            バックエンド設定オブジェクト。

    Returns:
        Concrete capture backend instance.
            具体的な撮影バックエンドインスタンス。

    Raises:
        CaptureConfigurationError: If the backend name is not registered.
            設定されたバックエンド名が未登録の場合。
    """
    backend_name = config.name.strip().lower()
    if backend_name == "auto":
        backend_name = detect_backend_name()
    backend_cls = _BACKENDS.get(backend_name)
    if backend_cls is None:
        names = ", ".join(available_camera_backends())
        raise CaptureConfigurationError(
            f"Unknown camera backend: '{config.name}'. Available backends: auto, {names}."
        )
    return backend_cls(config.executable, runner=SubprocessRunner(config.timeout))
