# stages/provision.py
from __future__ import annotations

from pathlib import Path

from ..errors import SizeMismatchError
from ..ui.console import Console


def ensure_source_file(path: str | Path, size: int, console: Console) -> Path:
    """
    Make sure a file of exactly `size` bytes exists at `path`.

    A missing file is created sparse (truncated up to size, nothing written).
    An existing file is only checked for size, never resized or rewritten.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.exists():
        actual = path.stat().st_size
        if actual != size:
            raise SizeMismatchError(
                stage="provision",
                message="source file exists but size mismatch",
                details={"path": path, "want": size, "got": actual},
            )
        console.print_info(f"source file already present at {path} ({size} bytes)")
        return path

    console.print_info(f"creating sparse file at {path} ({size} bytes)")
    with path.open("wb") as f:
        f.truncate(size)
    return path
