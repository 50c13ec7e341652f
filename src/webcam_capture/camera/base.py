"""Base interface for capture backends.

A backend turns resolved capture options into a command line for one
native capture utility and recognises that utility's failure output, so
platform-specific code stays isolated from the capture pipeline.

撮影バックエンドの基底インターフェース。

撮影オプションをネイティブ撮影ユーティリティのコマンドラインに変換し、
そのユーティリティ固有の失敗出力を判定する。プラットフォーム固有の実装を
撮影パイプライン本体から分離するための共通契約を定義する。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from webcam_capture.config import CaptureConfig
from webcam_capture.devices import probe_opencv_devices
from webcam_capture.process import CommandRunner, SubprocessRunner


class CameraCaptureError(RuntimeError):
    """Base class for errors raised or delivered by the capture layer.

    撮影レイヤーで発生するエラーの基底クラス。
    """


class CaptureProcessError(CameraCaptureError):
    """The capture utility exited with a nonzero status.

    撮影ユーティリティが 0 以外の終了コードで終了した。
    """

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit status {returncode}: {command}"
        if stderr.strip():
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class CaptureValidationError(CameraCaptureError):
    """The utility reported success but its diagnostics show a failure.

    終了コードは成功だが、診断出力に既知の失敗パターンが含まれていた。
    """


class CaptureConfigurationError(CameraCaptureError, ValueError):
    """An option value is not usable.

    オプション値が不正。
    """


class ShotNotFoundError(CameraCaptureError, LookupError):
    """No shot is recorded at the requested index.

    指定したインデックスに撮影記録が存在しない。
    """


class NoLastShotError(ShotNotFoundError):
    """The shot store is empty.

    撮影記録が空。
    """


class CameraBackend(ABC):
    """Abstract capture backend.

    抽象撮影バックエンド。

    Args:
        executable: Path or name of the capture utility. Empty string uses
            :attr:`default_executable`.
            撮影ユーティリティのパスまたは名前。
        runner: Runs helper commands such as device listing. Defaults to
            :class:`SubprocessRunner`.
            デバイス一覧取得などの補助コマンドを実行するランナー。
    """

    name = ""
    default_executable = ""

    def __init__(
        self, executable: str = "", runner: Optional[CommandRunner] = None
    ) -> None:
        self.executable = executable or self.default_executable
        self.runner = runner if runner is not None else SubprocessRunner()

    @abstractmethod
    def generate_sh(self, config: CaptureConfig, location: str) -> str:
        """Build the command line that captures one image.

        Args:
            config: Effective capture options.
                有効な撮影オプション。
            location: Final output path, extension included.
                拡張子を含む最終的な出力パス。

        Returns:
            Shell command string. An empty string is a no-op capture.
                シェルコマンド文字列。空文字列は何もしない撮影。
        """

    def run_capture_validations(self, diagnostics: str) -> Optional[Exception]:
        """Inspect utility diagnostics for failures the exit status hides.

        Args:
            diagnostics: Captured stderr of the utility.
                ユーティリティの標準エラー出力。

        Returns:
            An error when a known failure signature is found, else ``None``.
                既知の失敗パターンが見つかった場合はエラー、なければ ``None``。
        """
        return None

    def list_devices(self) -> list[str]:
        """Return the capture devices this backend can address."""
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(executable={self.executable!r})"


class NullBackend(CameraBackend):
    """Backend that captures nothing.

    Emits an empty command, so the pipeline still records the requested
    location. Devices are discovered by probing with OpenCV.

    何も撮影しないバックエンド。デバイスは OpenCV で探索する。
    """

    name = "null"

    def generate_sh(self, config: CaptureConfig, location: str) -> str:
        return ""

    def list_devices(self) -> list[str]:
        return probe_opencv_devices()
