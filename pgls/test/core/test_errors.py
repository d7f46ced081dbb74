"""Tests for pgls.core.errors module."""

from __future__ import annotations

import pytest

from pgls.core.errors import ErrorCode, InvariantError


class TestErrorCode:
    def test_values_are_stable(self) -> None:
        assert int(ErrorCode.OK) == 0
        assert int(ErrorCode.USER_ERROR) == 1
        assert int(ErrorCode.ENV_ERROR) == 2
        assert int(ErrorCode.NETWORK_ERROR) == 4
        assert int(ErrorCode.IO_ERROR) == 5

    def test_str(self) -> None:
        assert str(ErrorCode.NETWORK_ERROR) == "network error"

    def test_is_success(self) -> None:
        assert ErrorCode.OK.is_success
        assert not ErrorCode.ENV_ERROR.is_success


class TestInvariantError:
    def test_is_runtime_error(self) -> None:
        with pytest.raises(RuntimeError, match="no version"):
            raise InvariantError("binary reports no version")
