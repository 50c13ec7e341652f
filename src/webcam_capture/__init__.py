"""Cross-platform webcam capture through native command-line utilities.

ネイティブのコマンドライン撮影ユーティリティを用いたクロスプラットフォーム
Web カメラ撮影ライブラリ。
"""

from webcam_capture.camera import (
    CameraBackend,
    CameraCaptureError,
    CaptureConfigurationError,
    CaptureProcessError,
    CaptureValidationError,
    CommandCamBackend,
    FSWebcamBackend,
    ImageSnapBackend,
    NoLastShotError,
    NullBackend,
    ShotNotFoundError,
    available_camera_backends,
    create_camera_backend,
    detect_backend_name,
)
from webcam_capture.config import (
    CALLBACK_RETURN_TYPES,
    OUTPUT_TYPES,
    AppConfig,
    BackendConfig,
    CaptureConfig,
    resolve_options,
)
from webcam_capture.events import EventDispatcher
from webcam_capture.process import CommandResult, SubprocessRunner
from webcam_capture.webcam import Webcam, create_webcam

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "BackendConfig",
    "CALLBACK_RETURN_TYPES",
    "CameraBackend",
    "CameraCaptureError",
    "CaptureConfig",
    "CaptureConfigurationError",
    "CaptureProcessError",
    "CaptureValidationError",
    "CommandCamBackend",
    "CommandResult",
    "EventDispatcher",
    "FSWebcamBackend",
    "ImageSnapBackend",
    "NoLastShotError",
    "NullBackend",
    "OUTPUT_TYPES",
    "ShotNotFoundError",
    "SubprocessRunner",
    "Webcam",
    "available_camera_backends",
    "create_camera_backend",
    "create_webcam",
    "detect_backend_name",
    "resolve_options",
]
