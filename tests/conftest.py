"""Pytest configuration and shared fakes for context-hopper tests."""

import pytest

from context_hopper.file_reader import FileReadError
from context_hopper.file_reader import slice_lines
from context_hopper.models import LineRange
from context_hopper.storage import MemoryKeyValueStore
from context_hopper.tokens import TokenEstimator


class FakeFiles:
    """Dict-backed file reader; missing paths fail like deleted files."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})
        self.reads: list[str] = []

    def __call__(self, path: str, line_range: LineRange | None = None) -> str:
        self.reads.append(path)
        if path not in self.files:
            raise FileReadError(path, "No such file or directory")
        return slice_lines(self.files[path], line_range)


@pytest.fixture
def files():
    return FakeFiles(
        {
            "/proj/src/a.ts": "// header\nconst a = 1;\n\n\nexport default a;\n",
            "/proj/src/b.ts": "const b = 2; /* inline */\n",
        }
    )


@pytest.fixture
def state():
    return MemoryKeyValueStore()


@pytest.fixture
def estimator():
    return TokenEstimator.heuristic()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep CLI state, settings and logs inside the test's temp dir."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("CONTEXT_HOPPER_LOG_PATH", str(tmp_path / "logs" / "test.log.jsonl"))
    monkeypatch.delenv("CONTEXT_HOPPER_STATE", raising=False)
