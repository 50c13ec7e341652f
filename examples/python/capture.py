"""Simple one-shot capture example script.

Captures an image with the configured backend and prints where it was
saved, followed by the shot as a base64 data URI length.

1 枚撮影のサンプルスクリプト。

設定されたバックエンドで 1 枚撮影し、保存先と base64 データ URI の長さを
表示する。
"""

import logging
import sys

from webcam_capture import create_webcam
from webcam_capture.config import get_config, reload_config, split_cli_config_path


def main(argv: list[str] | None = None) -> None:
    """Run one-shot capture workflow.

    Usage:
        python examples/python/capture.py [--config <path>] [location]

    1 回の撮影を実行する。
    """
    if argv is None:
        argv = sys.argv

    try:
        clean_argv, config_path = split_cli_config_path(argv)
    except ValueError as e:
        print(f"Invalid CLI arguments: {e}")
        return

    if len(clean_argv) > 2:
        print("Usage: python examples/python/capture.py [--config <webcam.toml>] [location]")
        return

    if config_path is not None:
        reload_config(config_path)

    cfg = get_config()
    if cfg.capture.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")

    location = clean_argv[1] if len(clean_argv) == 2 else "capture"
    cam = create_webcam({"callbackReturn": "location"}, cfg)

    def on_capture(err, saved_location):
        if err is not None:
            print(f"Failed to capture image: {err}")
            raise SystemExit(1)
        print(f"Captured image saved to {saved_location}")

    cam.capture(location, on_capture)

    def on_base64(err, data_uri):
        if err is not None:
            print(f"Failed to read image: {err}")
            raise SystemExit(1)
        print(f"Data URI length: {len(data_uri)}")

    cam.get_last_shot64(on_base64)


if __name__ == "__main__":
    main()
