from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import pytest

from webcam_capture.process import CommandResult


class FakeRunner:
    """Command runner that records commands and replays canned results."""

    def __init__(self, result: Optional[CommandResult] = None, error: Optional[BaseException] = None) -> None:
        self.result = result if result is not None else CommandResult(returncode=0)
        self.error = error
        self.commands: list[str] = []

    def __call__(self, command: str) -> CommandResult:
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        return self.result


class FakeReader:
    """File reader backed by a dict that records every path read."""

    def __init__(self, files: Optional[dict[str, bytes]] = None) -> None:
        self.files = files if files is not None else {}
        self.reads: list[str] = []

    def __call__(self, path: str) -> bytes:
        self.reads.append(path)
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None


@dataclass
class Recorder:
    """Callback that stores every ``(error, result)`` pair it receives."""

    calls: list[tuple[Optional[BaseException], Any]] = field(default_factory=list)

    def __call__(self, err: Optional[BaseException], result: Any = None) -> None:
        self.calls.append((err, result))

    @property
    def error(self) -> Optional[BaseException]:
        assert len(self.calls) == 1
        return self.calls[0][0]

    @property
    def result(self) -> Any:
        assert len(self.calls) == 1
        return self.calls[0][1]


@pytest.fixture()
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def reader() -> FakeReader:
    return FakeReader()


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()
