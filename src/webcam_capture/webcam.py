"""Capture pipeline and shot history.

:class:`Webcam` runs a backend's capture command, validates its output,
records the resulting file location and delivers the result to the
caller as a path, raw bytes or a base64 data URI.

撮影パイプラインと撮影履歴。

:class:`Webcam` はバックエンドの撮影コマンドを実行して出力を検証し、
保存先を記録したうえで、結果をパス・バイト列・base64 データ URI の
いずれかで呼び出し元に返す。
"""

from __future__ import annotations

import base64
import logging
import os
import subprocess
import threading
from typing import Any, Callable, Mapping, Optional, Union

from webcam_capture.camera.base import (
    CameraBackend,
    CameraCaptureError,
    CaptureConfigurationError,
    CaptureProcessError,
    NoLastShotError,
    NullBackend,
    ShotNotFoundError,
)
from webcam_capture.camera.factory import create_camera_backend
from webcam_capture.config import OUTPUT_TYPES, AppConfig, CaptureConfig, resolve_options
from webcam_capture.events import EventDispatcher, Listener
from webcam_capture.process import CommandRunner, FileReader, SubprocessRunner, read_file

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Any], None]
DeviceLister = Callable[[], list]


class Webcam:
    """Camera instance bound to one capture backend.

    All results and errors are delivered through callbacks with the
    signature ``callback(error, result)``; nothing in the capture or
    retrieval path raises. Callbacks run before the method returns.

    1 つの撮影バックエンドに結び付いたカメラインスタンス。
    結果とエラーはすべて ``callback(error, result)`` で通知される。

    Args:
        options: Partial capture options merged over the defaults, or a
            full :class:`CaptureConfig`.
            デフォルトへ重ねる部分的な撮影オプション。
        backend: Command synthesizer and validator. Defaults to
            :class:`NullBackend`.
            コマンド生成と検証を担うバックエンド。
        runner: Executes a command string. Defaults to
            :class:`SubprocessRunner`.
        reader: Reads a shot file as bytes.
        device_lister: Returns the available devices. Defaults to
            ``backend.list_devices``.
    """

    def __init__(
        self,
        options: Optional[Union[Mapping[str, Any], CaptureConfig]] = None,
        backend: Optional[CameraBackend] = None,
        *,
        runner: Optional[CommandRunner] = None,
        reader: Optional[FileReader] = None,
        device_lister: Optional[DeviceLister] = None,
    ) -> None:
        self.opts = resolve_options(options)
        self.backend = backend if backend is not None else NullBackend()
        self.runner = runner if runner is not None else SubprocessRunner()
        self.reader = reader if reader is not None else read_file
        self.device_lister = device_lister
        self.shots: list[str] = []
        self.events = EventDispatcher()
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Webcam(backend={self.backend!r}, shots={len(self.shots)})"

    # ── Events ───────────────────────────────────────────────────────

    def on(self, event_type: str, listener: Listener) -> None:
        """Subscribe to camera events.

        カメライベントを購読する。

        Args:
            event_type: Event name. Only ``"capture"`` is fired.
                イベント名（発火するのは ``"capture"`` のみ）。
            listener: Called with the event mapping, e.g.
                ``{"type": "capture"}``. Registering twice has no effect.
                イベント辞書を受け取るリスナー。二重登録は無視される。
        """
        self.events.on(event_type, listener)

    def off(self, event_type: str, listener: Listener) -> None:
        """Unsubscribe a listener added with :meth:`on`.

        :meth:`on` で登録したリスナーを解除する。

        Args:
            event_type: Event name the listener was registered for.
                登録時のイベント名。
            listener: Listener to remove. Unknown listeners are ignored.
                解除するリスナー（未登録なら何もしない）。
        """
        self.events.off(event_type, listener)

    # ── Instance management ──────────────────────────────────────────

    def clone(self) -> "Webcam":
        """Return a new camera with the same options and an empty history."""
        return type(self)(
            self.opts,
            self.backend,
            runner=self.runner,
            reader=self.reader,
            device_lister=self.device_lister,
        )

    def clear(self) -> None:
        """Forget all recorded shots. Files on disk are left in place."""
        with self._lock:
            self.shots = []

    # ── Devices ──────────────────────────────────────────────────────

    def list(self, callback: Callable[[list], None]) -> None:
        """Deliver the list of available capture devices.

        A failing listing is logged and reported as no devices.
        """
        lister = self.device_lister or self.backend.list_devices
        try:
            devices = list(lister())
        except (CameraCaptureError, OSError, subprocess.SubprocessError) as exc:
            logger.warning("Device listing failed: %s", exc)
            devices = []
        callback(devices)

    def has_camera(self, callback: Callable[[bool], None]) -> None:
        """Deliver whether at least one capture device is available."""
        self.list(lambda devices: callback(bool(devices)))

    # ── Capture ──────────────────────────────────────────────────────

    def capture(
        self, location: Optional[str] = None, callback: Optional[Callback] = None
    ) -> None:
        """Capture one image to ``location``.

        The extension for the configured output format is appended unless
        ``location`` already ends with one. An unrecognised ``output`` is
        appended as given and only affects the utility's flags and the
        data URI prefix.

        Captures on one instance are serialised through result delivery.
        The lock is re-entrant, so ``callback`` may start another capture.

        1 枚撮影して ``location`` に保存する。

        Args:
            location: Output path, with or without extension.
                出力先パス（拡張子は省略可）。
            callback: Receives ``(error, result)``. ``result`` is shaped by
                the ``callback_return`` option.
                ``(error, result)`` を受け取るコールバック。
        """
        location = location or ""
        if not os.path.splitext(location)[1]:
            # Unknown formats are used verbatim as the extension.
            extension = OUTPUT_TYPES.get(self.opts.output, self.opts.output)
            location = f"{location}.{extension}"

        sh = self.backend.generate_sh(self.opts, location)
        if self.opts.verbose:
            logger.info("%s", sh)

        with self._lock:
            try:
                result = self.runner(sh)
            except (OSError, subprocess.SubprocessError) as exc:
                self._deliver(callback, exc)
                return

            if result.returncode != 0:
                self._deliver(
                    callback, CaptureProcessError(sh, result.returncode, result.stderr)
                )
                return

            if self.opts.verbose and result.stderr:
                logger.info("%s", result.stderr)

            validation_error = self.backend.run_capture_validations(result.stderr)
            if validation_error is not None:
                self._deliver(callback, validation_error)
                return

            self.shots.append(location)
            logger.debug("Recorded shot %d at %s", len(self.shots) - 1, location)
            self.events.dispatch({"type": "capture"})

            if callback is not None:
                self.handle_callback_return_type(callback, location)

    def handle_callback_return_type(self, callback: Callback, location: str) -> None:
        """Deliver a finished capture in the configured representation.

        撮影結果を ``callback_return`` で指定された形式で通知する。

        Args:
            callback: Receives ``(error, result)``.
                ``(error, result)`` を受け取るコールバック。
            location: Location of the shot that was just recorded.
                直前に記録した撮影の保存先。

        Delivered errors:
            CaptureConfigurationError: If ``callback_return`` is not one of
                ``location``, ``buffer`` or ``base64``. The shot stays
                recorded.
                ``callback_return`` が不正な場合（撮影記録は残る）。
            NoLastShotError: Propagated from the buffer and base64 paths.
            OSError: If the shot file cannot be read.
                ファイルを読み込めない場合。
        """
        return_type = self.opts.callback_return

        if return_type == "location":
            callback(None, location)
        elif return_type == "buffer":
            self.get_last_shot(callback)
        elif return_type == "base64":
            self.get_last_shot64(callback)
        else:
            callback(
                CaptureConfigurationError(
                    f"Callback return type not valid: {return_type!r}"
                ),
                None,
            )

    # ── Retrieval ────────────────────────────────────────────────────

    def get_shot(self, index: int, callback: Optional[Callback] = None) -> None:
        """Read the shot at ``index`` (0 is the first capture) from disk.

        An invalid index is rejected before anything is read.

        ``index`` 番目（0 が最初）の撮影ファイルを読み込む。

        Args:
            index: Position in :attr:`shots`. Booleans and non-integers are
                rejected.
                :attr:`shots` 内の位置。bool や整数以外は不正とみなす。
            callback: Receives ``(error, data)`` with the file contents.
                ``None`` logs errors and discards the data.
                ファイル内容を ``(error, data)`` で受け取るコールバック。

        Delivered errors:
            ShotNotFoundError: If ``index`` is out of range.
                ``index`` が範囲外の場合。
            OSError: If the file cannot be read.
                ファイルを読み込めない場合。
        """
        shots = self.shots
        if isinstance(index, bool) or not isinstance(index, int) or not (
            0 <= index < len(shots)
        ):
            self._deliver(callback, ShotNotFoundError(f"Shot number {index} not found"))
            return

        try:
            data = self.reader(shots[index])
        except OSError as exc:
            self._deliver(callback, exc)
            return
        if callback is not None:
            callback(None, data)

    def get_last_shot(self, callback: Optional[Callback] = None) -> None:
        """Read the most recent shot from disk.

        最新の撮影ファイルを読み込む。

        Args:
            callback: Receives ``(error, data)`` with the file contents.
                ファイル内容を ``(error, data)`` で受け取るコールバック。

        Delivered errors:
            NoLastShotError: If nothing has been recorded. Nothing is read.
                撮影記録がない場合（読み込みは行わない）。
            OSError: If the file cannot be read.
        """
        if not self.shots:
            self._deliver(callback, NoLastShotError("Camera has no last shot"))
            return
        self.get_shot(len(self.shots) - 1, callback)

    def get_base64(
        self, shot: Union[int, bytes, bytearray, memoryview], callback: Callback
    ) -> None:
        """Deliver a shot as a ``data:image/<output>;base64,...`` URI.

        Args:
            shot: Shot index, or the image bytes themselves.
                撮影インデックス、または画像のバイト列。
            callback: Receives ``(error, data_uri)``.
        """
        if isinstance(shot, int):

            def on_shot(err: Optional[BaseException], data: Any) -> None:
                if err is not None:
                    callback(err, None)
                    return
                self.get_base64(data, callback)

            self.get_shot(shot, on_shot)
            return

        encoded = base64.b64encode(bytes(shot)).decode("ascii")
        callback(None, f"data:image/{self.opts.output};base64,{encoded}")

    def get_last_shot64(self, callback: Optional[Callback] = None) -> None:
        """Deliver the most recent shot as a base64 data URI.

        最新の撮影を base64 データ URI として通知する。

        Args:
            callback: Receives ``(error, data_uri)``. Without a callback
                the shot is not read.
                ``(error, data_uri)`` を受け取るコールバック。

        Delivered errors:
            NoLastShotError: If nothing has been recorded.
                撮影記録がない場合。
            OSError: If the file cannot be read.
                ファイルを読み込めない場合。
        """
        if not self.shots:
            self._deliver(callback, NoLastShotError("Camera has no last shot"))
            return
        if callback is None:
            return
        self.get_base64(len(self.shots) - 1, callback)

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _deliver(callback: Optional[Callback], error: BaseException) -> None:
        if callback is None:
            logger.warning("Unhandled capture error: %s", error)
            return
        callback(error, None)


def create_webcam(
    options: Optional[Union[Mapping[str, Any], CaptureConfig]] = None,
    app_config: Optional[AppConfig] = None,
) -> Webcam:
    """Build a :class:`Webcam` for the configured backend.

    ``options`` are merged over the ``capture`` section of ``app_config``.

    設定されたバックエンド用の :class:`Webcam` を生成する。

    Args:
        options: Per-instance capture options.
            インスタンスごとの撮影オプション。
        app_config: Application configuration. Defaults to :class:`AppConfig`.
            アプリケーション設定。

    Returns:
        Camera instance with an empty shot history.
            撮影履歴が空のカメラインスタンス。

    Raises:
        CaptureConfigurationError: If the backend name is not registered.
            設定されたバックエンド名が未登録の場合。
    """
    if app_config is None:
        app_config = AppConfig()
    backend = create_camera_backend(app_config.backend)
    return Webcam(
        resolve_options(options, app_config.capture),
        backend,
        runner=SubprocessRunner(app_config.backend.timeout),
    )
