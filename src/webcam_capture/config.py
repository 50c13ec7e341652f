# coding: utf-8
"""Centralized configuration for webcam-capture.

Provides typed, immutable dataclasses for capture options and backend
selection, the options resolver that merges user options over defaults,
and a TOML loader that falls back to hardcoded defaults when the file or
individual fields are absent.

webcam-capture の集中型設定モジュール。

撮影オプションとバックエンド選択のための不変データクラス、ユーザー指定を
デフォルトへ重ねるオプションリゾルバ、および TOML ローダーを提供する。
ファイルまたは個々のフィールドが存在しない場合はデフォルト値を用いる。
"""

from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

# Resolved against the working directory at load time.
_DEFAULT_CONFIG_PATH = Path("webcam.toml")

# Output format -> file extension.
OUTPUT_TYPES: dict[str, str] = {
    "jpeg": "jpg",
    "png": "png",
    "bmp": "bmp",
}

CALLBACK_RETURN_TYPES: tuple[str, ...] = ("location", "buffer", "base64")


# ── Section dataclasses ──────────────────────────────────────────────


@dataclass(frozen=True)
class CaptureConfig:
    """Effective options for a single camera instance.

    Values are hints passed to the capture utility. ``output`` and
    ``callback_return`` are not validated here; invalid values surface when
    a capture is performed.

    Attributes:
        width: Requested frame width in pixels.
            要求するフレーム幅（ピクセル）。
        height: Requested frame height in pixels.
            要求するフレーム高さ（ピクセル）。
        delay: Delay in seconds before the shot is taken.
            撮影前の待機時間（秒）。
        quality: Image quality, 0 to 100.
            画質（0〜100）。
        output: Output format, one of ``jpeg``, ``png`` or ``bmp``.
            出力形式。``jpeg``、``png``、``bmp`` のいずれか。
        device: Device name or index understood by the utility.
            ``None`` lets the utility pick its default device.
            撮影ユーティリティが解釈するデバイス名。``None`` で既定デバイス。
        callback_return: Shape of a successful capture result:
            ``location``, ``buffer`` or ``base64``.
            撮影成功時に返す結果の形式。
        verbose: Log each command and the utility's stderr at ``INFO`` on
            the ``webcam_capture.webcam`` logger. The host application must
            configure logging (e.g. ``logging.basicConfig(level=logging.INFO)``)
            for these lines to appear; Python's last-resort handler only
            shows ``WARNING`` and above.
            コマンドと診断出力を ``INFO`` レベルでログに出すかどうか。
            表示するには呼び出し側でロギングを設定する必要がある。
        frames: Frames to grab and average (fswebcam only).
        skip: Frames to skip before grabbing (fswebcam only).
        greyscale: Capture in greyscale (fswebcam only).
        rotation: Rotation in degrees (fswebcam only).
        top_banner: Draw the banner at the top (fswebcam only).
        bottom_banner: Draw the banner at the bottom (fswebcam only).
        title: Banner title (fswebcam only).
        subtitle: Banner subtitle (fswebcam only).
        timestamp: Banner timestamp format (fswebcam only).
        set_values: Device controls passed as ``--set key=value``
            (fswebcam only).

    カメラインスタンスごとの有効オプション。
    """

    width: int = 1280
    height: int = 720
    delay: int = 0
    quality: int = 100
    output: str = "jpeg"
    device: Optional[str] = None
    callback_return: str = "location"
    verbose: bool = False
    frames: int = 1
    skip: int = 0
    greyscale: bool = False
    rotation: int = 0
    top_banner: bool = False
    bottom_banner: bool = False
    title: Optional[str] = None
    subtitle: Optional[str] = None
    timestamp: Optional[str] = None
    set_values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BackendConfig:
    """Capture backend selection.

    Attributes:
        name: Backend name. ``auto`` picks one from the running platform.
            バックエンド名。``auto`` は実行中のプラットフォームから選択する。
        executable: Override for the capture utility path. Empty string
            uses the backend's default binary name.
            撮影ユーティリティのパス。空文字列で既定のバイナリ名を使う。
        timeout: Process timeout in seconds. ``0`` disables it.
            プロセスのタイムアウト（秒）。``0`` で無効。

    撮影バックエンドの選択設定。
    """

    name: str = "auto"
    executable: str = ""
    timeout: float = 0.0


# ── Top-level config container ───────────────────────────────────────


@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration container.

    Attributes:
        capture: Capture option defaults.
            撮影オプションの既定値。
        backend: Backend selection.
            バックエンドの選択。

    アプリケーション全体の設定コンテナ。
    """

    capture: CaptureConfig = field(default_factory=CaptureConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)


DEFAULT_CAPTURE_CONFIG = CaptureConfig()


# ── Options resolver ─────────────────────────────────────────────────

# Historical camelCase option names accepted alongside the field names.
_OPTION_ALIASES: dict[str, str] = {
    "callbackReturn": "callback_return",
    "topBanner": "top_banner",
    "bottomBanner": "bottom_banner",
    "setValues": "set_values",
}


def _option_fields(cls: type) -> set[str]:
    return {f.name for f in dataclasses.fields(cls)}


def resolve_options(
    options: Optional[Mapping[str, Any] | CaptureConfig] = None,
    defaults: CaptureConfig = DEFAULT_CAPTURE_CONFIG,
) -> CaptureConfig:
    """Merge user options over defaults.

    Fields present in ``options`` override ``defaults`` verbatim, without
    coercion or validation. Unknown keys are ignored.

    ユーザー指定のオプションをデフォルトへ重ねる。値の変換や検証は行わない。

    Args:
        options: Partial options as a mapping, a full :class:`CaptureConfig`,
            or ``None``.
            部分的なオプション（マッピング）、:class:`CaptureConfig`、
            または ``None``。
        defaults: Fallback values for unset fields.
            未指定フィールドのフォールバック値。

    Returns:
        The effective :class:`CaptureConfig`.
        有効な :class:`CaptureConfig`。
    """
    if options is None:
        return defaults
    if isinstance(options, CaptureConfig):
        return options

    known = _option_fields(CaptureConfig)
    overrides: dict[str, Any] = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        if name in known:
            overrides[name] = value
    return dataclasses.replace(defaults, **overrides)


# ── Loading logic ────────────────────────────────────────────────────


def _build_section(cls: type, data: dict, key: str):
    """Build a dataclass instance from a TOML sub-dictionary, ignoring unknown keys.

    TOML サブ辞書からデータクラスインスタンスを構築する。
    未知のキーは無視される。

    Args:
        cls: The dataclass type to instantiate.
            インスタンス化するデータクラス型。
        data: The full TOML dictionary.
            TOML 辞書全体。
        key: The section key to extract from *data*.
            *data* から抽出するセクションキー。

    Returns:
        An instance of *cls* populated with values from the TOML section.
        TOML セクションの値で生成された *cls* のインスタンス。
    """
    section = data.get(key, {})
    known = _option_fields(cls)
    filtered = {}
    for k, v in section.items():
        k = _OPTION_ALIASES.get(k, k)
        if k in known:
            filtered[k] = v
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to compiled-in defaults if the file does not exist
    or if individual fields are absent.

    TOML ファイルから設定を読み込む。

    ファイルが存在しない場合、または個々のフィールドが欠落している場合は
    デフォルト値にフォールバックする。

    Args:
        config_path: Path to the TOML configuration file. Defaults to
            ``webcam.toml`` in the working directory.
            TOML 設定ファイルのパス。デフォルトは作業ディレクトリの
            ``webcam.toml``。

    Returns:
        A fully populated :class:`AppConfig` instance.
        完全に設定された :class:`AppConfig` インスタンス。
    """
    if config_path is None:
        config_path = _DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    with open(config_path, "rb") as f:
        data = dict(tomllib.load(f))

    return AppConfig(
        capture=_build_section(CaptureConfig, data, "capture"),
        backend=_build_section(BackendConfig, data, "backend"),
    )


# ── Module-level singleton ───────────────────────────────────────────

_config: Optional[AppConfig] = None


def get_config(config_path: Optional[Path] = None) -> AppConfig:
    """Return the cached webcam configuration, loading it on first call.

    Later calls ignore ``config_path``; use :func:`reload_config` to switch
    files.

    キャッシュされた webcam 設定を返す。初回呼び出し時に読み込みを行う。

    Args:
        config_path: TOML file to load. Defaults to ``webcam.toml`` in the
            working directory.
            読み込む TOML ファイル（既定は作業ディレクトリの ``webcam.toml``）。

    Returns:
        The cached :class:`AppConfig`.
            キャッシュされた :class:`AppConfig`。
    """
    global _config
    if _config is None:
        _config = load_config(config_path)
    return _config


def reload_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load ``config_path`` and replace the cached webcam configuration.

    A missing file resets the cache to the built-in defaults.

    ``config_path`` を読み込み、キャッシュ済みの設定を置き換える。
    ファイルが存在しない場合は組み込みの既定値に戻る。

    Args:
        config_path: TOML file to load. Defaults to ``webcam.toml``.
            読み込む TOML ファイル。

    Returns:
        The newly cached :class:`AppConfig`.
            新たにキャッシュされた :class:`AppConfig`。
    """
    global _config
    _config = load_config(config_path)
    return _config


_CONFIG_FLAGS = ("--config", "-c")
_MISSING_CONFIG_PATH = "`--config` requires a path to a webcam.toml file."


def split_cli_config_path(argv: Sequence[str]) -> tuple[list[str], Optional[Path]]:
    """Remove ``--config PATH`` / ``-c PATH`` / ``--config=PATH`` from argv.

    If the option is repeated the last occurrence wins.

    CLI 引数から webcam.toml のパス指定を取り除く。

    Args:
        argv: Raw CLI argument sequence (typically ``sys.argv``).
            生の CLI 引数列（通常は ``sys.argv``）。

    Returns:
        Tuple of ``(remaining_argv, config_path_or_none)``.
            ``(残りの argv, 設定パスまたは None)`` のタプル。

    Raises:
        ValueError: If the option is given without a path.
            パスが指定されていない場合。
    """
    remaining: list[str] = []
    config_path: Optional[Path] = None

    args = iter(argv)
    for arg in args:
        if arg in _CONFIG_FLAGS:
            value = next(args, "")
        elif arg.startswith("--config="):
            value = arg.partition("=")[2]
        else:
            remaining.append(arg)
            continue
        if not value:
            raise ValueError(_MISSING_CONFIG_PATH)
        config_path = Path(value)

    return remaining, config_path
