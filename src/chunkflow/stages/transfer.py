# stages/transfer.py
from __future__ import annotations

import shutil
import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..errors import ToolInvocationError, ToolNotFoundError, ToolTimeoutError
from ..model import FragmentDescriptor
from ..ui.console import Console

# runner(argv, timeout) -> exit code; raises subprocess.TimeoutExpired on timeout
CommandRunner = Callable[[List[str], Optional[float]], int]

TOOL_HINT = "Install the storage client or pass its full path with --client-bin."


class Deadline:
    """One wall-clock budget shared by every external invocation of a run."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


def run_subprocess(argv: List[str], timeout: Optional[float]) -> int:
    """
    Run argv with stdout/stderr inherited from this process.

    subprocess.run kills the child before re-raising TimeoutExpired.
    """
    proc = subprocess.run(argv, timeout=timeout, check=False)
    return proc.returncode


def ensure_binary(client_bin: str, stage: str) -> str:
    """Resolve client_bin on PATH (or as an explicit path); raise if it is missing."""
    resolved = shutil.which(client_bin)
    if resolved is None:
        raise ToolNotFoundError(
            stage=stage,
            message=f"cannot find {client_bin}",
            details={"hint": TOOL_HINT},
        )
    return resolved


class TransferClient:
    """
    Drives the external storage client, one fragment at a time.

    Both upload and download stop at the first failing invocation.
    """

    def __init__(
        self,
        client_bin: str,
        fragment_size: str,
        deadline: Deadline,
        console: Console,
        runner: CommandRunner = run_subprocess,
    ):
        self.client_bin = client_bin
        self.fragment_size = fragment_size
        self.deadline = deadline
        self.console = console
        self.runner = runner

    def _invoke(self, stage: str, args: List[str]) -> None:
        argv = [self.client_bin, *args]
        if self.deadline.expired:
            raise ToolTimeoutError(
                stage=stage,
                message="deadline elapsed before invocation",
                details={"cmd": " ".join(argv), "timeout_seconds": self.deadline.seconds},
            )

        self.console.print_debug(f"exec: {' '.join(argv)}")
        try:
            exit_code = self.runner(argv, self.deadline.remaining())
        except subprocess.TimeoutExpired as e:
            raise ToolTimeoutError(
                stage=stage,
                message="deadline elapsed; invocation cancelled",
                details={"cmd": " ".join(argv), "timeout_seconds": self.deadline.seconds},
            ) from e
        except OSError as e:
            raise ToolInvocationError(
                stage=stage,
                message=f"could not launch {self.client_bin}: {e}",
                details={"cmd": " ".join(argv)},
            ) from e

        if exit_code != 0:
            raise ToolInvocationError(
                stage=stage,
                message=f"{self.client_bin} exited with status {exit_code}",
                details={"cmd": " ".join(argv), "exit_code": exit_code},
            )

    def upload(
        self,
        descriptors: Sequence[FragmentDescriptor],
        extra: Sequence[str] = (),
    ) -> None:
        ensure_binary(self.client_bin, "upload")
        for d in descriptors:
            args = [
                "upload",
                "--file", str(d.local_path),
                "--remote-name", d.remote_name,
                "--fragment-size", self.fragment_size,
                *extra,
            ]
            self.console.print_fragment("uploading", str(d.local_path), d.remote_name)
            self._invoke("upload", args)

    def download(
        self,
        descriptors: Sequence[FragmentDescriptor],
        download_dir: str | Path,
        extra: Sequence[str] = (),
    ) -> List[FragmentDescriptor]:
        """Fetch every fragment into download_dir; returns descriptors for the fetched files."""
        ensure_binary(self.client_bin, "download")
        download_dir = Path(download_dir)
        download_dir.mkdir(parents=True, exist_ok=True)

        result: List[FragmentDescriptor] = []
        for d in descriptors:
            target = download_dir / Path(d.remote_name).name
            args = [
                "download",
                "--remote-name", d.remote_name,
                "--output", str(target),
                "--fragment-size", self.fragment_size,
                *extra,
            ]
            self.console.print_fragment("downloading", d.remote_name, str(target))
            self._invoke("download", args)
            result.append(FragmentDescriptor(local_path=target, remote_name=d.remote_name))
        return result
