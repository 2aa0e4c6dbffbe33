from __future__ import annotations

import io
import os
import sys
from pathlib import Path

import pytest

from chunkflow.model import WorkflowConfig
from chunkflow.ui.console import Console


class FakeClient:
    """Records every storage-client call; download writes what upload stored."""

    def __init__(self, fail_on: int | None = None, exit_code: int = 1):
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []
        self.store: dict[str, bytes] = {}
        self.fail_on = fail_on
        self.exit_code = exit_code

    def __call__(self, argv, timeout):
        self.calls.append(list(argv))
        self.timeouts.append(timeout)
        if self.fail_on is not None and len(self.calls) - 1 == self.fail_on:
            return self.exit_code

        args = argv[1:]
        opts = dict(zip(args[1::2], args[2::2]))
        if args[0] == "upload":
            self.store[opts["--remote-name"]] = Path(opts["--file"]).read_bytes()
        elif args[0] == "download":
            Path(opts["--output"]).write_bytes(self.store.get(opts["--remote-name"], b""))
        return 0


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def console(out):
    return Console(out=out, err=out)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def make_source(tmp_path):
    def _make(data: bytes, name: str = "source.bin") -> Path:
        p = tmp_path / "data" / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        return p

    return _make


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides) -> WorkflowConfig:
        options = dict(
            source_file=tmp_path / "data" / "source.bin",
            work_dir=tmp_path / "work",
            client_bin=sys.executable,
            remote_prefix="demo",
            fragment_size="1KB",
            chunk_count=4,
            chunk_size=1024,
        )
        options.update(overrides)
        return WorkflowConfig.from_options(**options)

    return _make


def pattern(size: int) -> bytes:
    return bytes((i * 7 + 3) % 251 for i in range(size))


@pytest.fixture
def payload():
    return pattern


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("CHUNKFLOW_"):
            monkeypatch.delenv(key)
