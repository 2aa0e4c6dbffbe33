# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .errors import ConfigError

DEFAULT_SOURCE_FILE = Path("data") / "source.bin"
DEFAULT_WORK_DIR = Path("workdir")
DEFAULT_CLIENT_BIN = "0g-storage-client"
DEFAULT_REMOTE_PREFIX = "four-gig-demo"
DEFAULT_FRAGMENT_SIZE = "400MB"
DEFAULT_CHUNK_COUNT = 10
DEFAULT_CHUNK_SIZE = 400 * 1024 * 1024  # 400MB
DEFAULT_MERGED_NAME = "merged.bin"
DEFAULT_TIMEOUT_SECONDS = 12 * 60 * 60


def split_args(raw: Optional[str]) -> List[str]:
    """Split a free-form extra-argument string on whitespace."""
    if raw is None or not raw.strip():
        return []
    return raw.split()


@dataclass(frozen=True)
class FragmentDescriptor:
    """A fragment's local file paired with the name the storage client knows it by."""
    local_path: Path
    remote_name: str


@dataclass(frozen=True)
class WorkflowConfig:
    """
    Everything a pipeline run needs, resolved once at startup.

    total_size (chunk_count * chunk_size) is the exact size the source
    file must have.
    """
    source_file: Path
    work_dir: Path
    chunk_dir: Path
    download_dir: Path
    merged_file: Path

    chunk_count: int = DEFAULT_CHUNK_COUNT
    chunk_size: int = DEFAULT_CHUNK_SIZE

    client_bin: str = DEFAULT_CLIENT_BIN
    remote_prefix: str = DEFAULT_REMOTE_PREFIX
    fragment_size: str = DEFAULT_FRAGMENT_SIZE
    upload_extra: tuple[str, ...] = field(default_factory=tuple)
    download_extra: tuple[str, ...] = field(default_factory=tuple)

    skip_upload: bool = False
    skip_download: bool = False
    skip_verify: bool = False

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.chunk_count <= 0:
            raise ConfigError(
                stage="config",
                message="chunk-count must be positive",
                details={"chunk_count": self.chunk_count},
            )
        if self.chunk_size <= 0:
            raise ConfigError(
                stage="config",
                message="chunk-size must be positive",
                details={"chunk_size": self.chunk_size},
            )
        if self.timeout_seconds <= 0:
            raise ConfigError(
                stage="config",
                message="timeout must be positive",
                details={"timeout_seconds": self.timeout_seconds},
            )

    @property
    def total_size(self) -> int:
        return self.chunk_count * self.chunk_size

    @classmethod
    def from_options(
        cls,
        *,
        source_file: str | Path = DEFAULT_SOURCE_FILE,
        work_dir: str | Path = DEFAULT_WORK_DIR,
        merged_name: str = DEFAULT_MERGED_NAME,
        upload_extra: Optional[str] = None,
        download_extra: Optional[str] = None,
        **kwargs,
    ) -> WorkflowConfig:
        """
        Build a config the way the CLI does: chunks/, downloads/ and the
        merged file all live under work_dir, extra-argument strings are
        split on whitespace.
        """
        work = Path(work_dir)
        return cls(
            source_file=Path(source_file),
            work_dir=work,
            chunk_dir=work / "chunks",
            download_dir=work / "downloads",
            merged_file=work / merged_name,
            upload_extra=tuple(split_args(upload_extra)),
            download_extra=tuple(split_args(download_extra)),
            **kwargs,
        )
