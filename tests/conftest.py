"""测试公共夹具。"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Iterable, List

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from efm_perl.checker.prober import CapabilityProber


class StaticProber(CapabilityProber):
    """内存中的探测器：只有 `available` 中的模块视为已安装。"""

    def __init__(self, available: Iterable[str] = (), everything: bool = False):
        self.available = set(available)
        self.everything = everything
        self.calls: List[str] = []

    def exists(self, identifier: str) -> bool:
        self.calls.append(identifier)
        return self.everything or identifier in self.available


@pytest.fixture
def all_available():
    return StaticProber(everything=True)


@pytest.fixture
def nothing_available():
    return StaticProber()


@pytest.fixture
def write_source(tmp_path, monkeypatch):
    """在临时目录写入源码，并切换到该目录，返回相对文件名。"""

    monkeypatch.chdir(tmp_path)

    def _write(text: str, name: str = "foo.pl") -> str:
        (tmp_path / name).write_text(text, encoding="utf-8")
        return name

    return _write


class FakeCompletedRun:
    """记录 `subprocess.run` 调用并返回预设的 stderr。"""

    def __init__(self, stderr: str | bytes = "", stdout: str | bytes = "", returncode: int = 0):
        self.stderr = stderr
        self.stdout = stdout
        self.returncode = returncode
        self.commands: List[List[str]] = []

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        stdout, stderr = self.stdout, self.stderr
        if kwargs.get("text") and isinstance(stderr, bytes):
            # 与 subprocess 一致：按调用方给出的 errors 解码
            errors = kwargs.get("errors") or "strict"
            stdout = stdout.decode("utf-8", errors) if isinstance(stdout, bytes) else stdout
            stderr = stderr.decode("utf-8", errors)
        return subprocess.CompletedProcess(command, self.returncode, stdout, stderr)


@pytest.fixture
def fake_run(monkeypatch):
    def _install(stderr: str | bytes = "", stdout: str | bytes = "") -> FakeCompletedRun:
        fake = FakeCompletedRun(stderr=stderr, stdout=stdout)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake

    return _install
