from __future__ import annotations

import sys
from pathlib import Path

from pgls.core.result import Err, Ok
from pgls.platform.process import ProcessError, run, run_passthrough


def test_run_returns_stdout() -> None:
    result = run([sys.executable, "-c", "print('Version: 0.8.1')"])
    assert isinstance(result, Ok)
    assert result.value.strip() == "Version: 0.8.1"


def test_run_nonzero_exit() -> None:
    result = run([sys.executable, "-c", "import sys; sys.exit(3)"])
    assert isinstance(result, Err)
    assert result.error.returncode == 3


def test_run_missing_executable(tmp_path: Path) -> None:
    result = run([str(tmp_path / "does-not-exist")])
    assert isinstance(result, Err)
    assert result.error.returncode == -1


def test_run_timeout() -> None:
    result = run([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)
    assert isinstance(result, Err)
    assert "timed out" in result.error.stderr


def test_run_passthrough_cwd(tmp_path: Path) -> None:
    assert run_passthrough([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)


def test_process_error_str_truncates() -> None:
    error = ProcessError(command=("a", "b", "c", "d"), returncode=1, stdout="", stderr="")
    assert str(error) == "a b c ... failed (exit 1)"
