"""Shared test fixtures."""

import os
import subprocess
from typing import Callable, Dict, List, Optional, Tuple

import pytest

import utils

COMMIT = '0123456789abcdef0123456789abcdef01234567'


class FakeRunner:
    """Stands in for utils.subprocess_run and records every command."""

    def __init__(self) -> None:
        self.calls: List[Tuple[List[str], Optional[str]]] = []
        self.outputs: Dict[str, str] = {}
        self._fail: Optional[Callable[[List[str]], bool]] = None

    def fail_when(self, predicate: Callable[[List[str]], bool]) -> None:
        self._fail = predicate

    @property
    def commands(self) -> List[List[str]]:
        return [cmd for cmd, _ in self.calls]

    def __call__(self, cmd, *args, **kwargs):
        cmd = [os.fspath(arg) for arg in cmd]
        cwd = kwargs.get('cwd')
        self.calls.append((cmd, os.fspath(cwd) if cwd else None))
        returncode = 1 if self._fail and self._fail(cmd) else 0
        if returncode and kwargs.get('check'):
            raise subprocess.CalledProcessError(returncode, cmd)
        stdout = self.outputs.get(' '.join(cmd[:2]), '')
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout)


@pytest.fixture
def fake_run(monkeypatch) -> FakeRunner:
    runner = FakeRunner()
    runner.outputs['git rev-parse'] = COMMIT + '\n'
    runner.outputs['git log'] = '0123456 Release 17.0.0\n'
    monkeypatch.setattr(utils, 'subprocess_run', runner)
    return runner


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Removes the BUILD_CLANG_* overrides and points temp dirs into tmp_path."""
    for name in ('BUILD_CLANG_DEBUG_LEVEL', 'BUILD_CLANG_INSTALL_STRIP'):
        monkeypatch.delenv(name, raising=False)
    tmp_base = tmp_path / 'tmp'
    tmp_base.mkdir()
    monkeypatch.setenv('BUILD_CLANG_TMPDIR', str(tmp_base))
    return tmp_base
