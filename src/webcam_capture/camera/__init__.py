"""Capture backends and factory helpers.

Provides a unified entry point for the native capture utilities driven
by the project.

撮影バックエンドとファクトリをまとめた公開モジュール。

プロジェクトが利用するネイティブ撮影ユーティリティへの統一的な入口を提供する。
"""

from .base import (
    CameraBackend,
    CameraCaptureError,
    CaptureConfigurationError,
    CaptureProcessError,
    CaptureValidationError,
    NoLastShotError,
    NullBackend,
    ShotNotFoundError,
)
from .commandcam import CommandCamBackend
from .factory import (
    available_camera_backends,
    create_camera_backend,
    detect_backend_name,
)
from .fswebcam import FSWebcamBackend
from .imagesnap import ImageSnapBackend

__all__ = [
    "CameraBackend",
    "CameraCaptureError",
    "CaptureConfigurationError",
    "CaptureProcessError",
    "CaptureValidationError",
    "CommandCamBackend",
    "FSWebcamBackend",
    "ImageSnapBackend",
    "NoLastShotError",
    "NullBackend",
    "ShotNotFoundError",
    "available_camera_backends",
    "create_camera_backend",
    "detect_backend_name",
]
