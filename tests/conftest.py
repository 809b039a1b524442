"""Pytest fixtures shared across all tests."""

from __future__ import annotations

import pytest

from latin1_ascii.core.buffer import StringBuffer
from latin1_ascii.core.config import ENV_VAR
from latin1_ascii.core.models import Decision


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the developer's own config files out of the tests."""
    config_home = tmp_path / "config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("APPDATA", str(config_home))
    monkeypatch.delenv(ENV_VAR, raising=False)
    return config_home


@pytest.fixture
def mixed_buffer() -> StringBuffer:
    """Guillemets, a copyright sign and one character the table does not cover."""
    return StringBuffer("«Café» © 2001 Ð")


class ScriptedPrompt:
    """Answer interactive prompts from a fixed list; running out means quit."""

    def __init__(self, *answers: Decision | str) -> None:
        self._answers = list(answers)
        self.messages: list[str] = []

    def __call__(self, message: str) -> Decision | str:
        self.messages.append(message)
        if not self._answers:
            return Decision.QUIT
        return self._answers.pop(0)


@pytest.fixture
def scripted_prompt():
    return ScriptedPrompt
