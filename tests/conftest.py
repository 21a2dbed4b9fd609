"""Shared pytest fixtures. No test talks to the real completion service."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

import pytest

from second_brain.config import AppConfig
from second_brain.workspace import Workspace

Reply = Union[str, Exception, Callable[[str], str]]


class FakeCompletionClient:
    """Returns scripted replies and records every call."""

    def __init__(self, *replies: Reply, default: Reply = "RESOURCES") -> None:
        self.replies: List[Reply] = list(replies)
        self.default = default
        self.calls: List[Tuple[str, int, str]] = []

    async def complete(self, model: str, max_tokens: int, prompt: str) -> str:
        self.calls.append((model, max_tokens, prompt))
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


@pytest.fixture
def cfg(tmp_path: Path) -> AppConfig:
    return AppConfig(state_dir=tmp_path / "state")


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def make_workspace(cfg: AppConfig) -> Callable[..., Workspace]:
    def _make(client: Optional[FakeCompletionClient] = None) -> Workspace:
        return Workspace(cfg, client or FakeCompletionClient())

    return _make


def paragraph(*words: str) -> str:
    """A paragraph long enough to survive the chunk length filter."""
    text = " ".join(words)
    return text + " " + "-" * max(0, 60 - len(text))
