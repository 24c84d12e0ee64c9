from __future__ import annotations

import pytest

from nvrsync.config import MissingConfigurationError, require_env_var, require_env_vars


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NVRSYNC_EXAMPLE", "  value ")

    result = require_env_vars(["NVRSYNC_EXAMPLE"])

    assert result == {"NVRSYNC_EXAMPLE": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NVRSYNC_MISSING_A", raising=False)
    monkeypatch.delenv("NVRSYNC_MISSING_B", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["NVRSYNC_MISSING_B", "NVRSYNC_MISSING_A"])

    assert exc.value.names == ("NVRSYNC_MISSING_A", "NVRSYNC_MISSING_B")
    assert "NVRSYNC_MISSING_A, NVRSYNC_MISSING_B" in str(exc.value)


def test_require_env_var_rejects_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NVRSYNC_EXAMPLE", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("NVRSYNC_EXAMPLE")
