"""Process runner for capture utilities.

撮影ユーティリティを実行するプロセスランナー。
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command invocation.

    Attributes:
        returncode: Exit status of the command.
            コマンドの終了コード。
        stdout: Captured standard output.
            標準出力。
        stderr: Captured standard error. Capture utilities write their
            diagnostics here.
            標準エラー出力。撮影ユーティリティは診断情報をここに出力する。
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""


CommandRunner = Callable[[str], CommandResult]
FileReader = Callable[[str], bytes]


class SubprocessRunner:
    """Run shell command strings with :func:`subprocess.run`.

    Blank commands are treated as successful no-ops and never spawn a
    shell. Spawn failures and timeouts propagate as ``OSError`` and
    ``subprocess.TimeoutExpired``.

    シェルコマンド文字列を :func:`subprocess.run` で実行する。

    Args:
        timeout: Timeout in seconds. ``None`` or ``0`` waits indefinitely.
            タイムアウト（秒）。``None`` または ``0`` で無制限。
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout or None

    def __call__(self, command: str) -> CommandResult:
        if not command.strip():
            return CommandResult(returncode=0)

        logger.debug("Running: %s", command)
        completed = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def read_file(path: str) -> bytes:
    """Read a whole file as bytes."""
    with open(path, "rb") as f:
        return f.read()
