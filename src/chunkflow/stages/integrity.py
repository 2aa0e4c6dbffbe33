# stages/integrity.py
from __future__ import annotations

import hashlib
from pathlib import Path

from ..errors import IntegrityMismatchError
from ..ui.console import Console


def file_hash(path: str | Path) -> str:
    h = hashlib.sha256()
    with Path(path).open("rb") as f:
        while True:
            chunk = f.read(1024 * 1024)
            if not chunk:
                break
            h.update(chunk)
    return h.hexdigest()


def verify_integrity(source: str | Path, merged: str | Path, console: Console) -> str:
    """Return the shared SHA-256 of source and merged, or raise on mismatch."""
    src_hash = file_hash(source)
    dst_hash = file_hash(merged)
    if src_hash != dst_hash:
        raise IntegrityMismatchError(
            stage="verify",
            message="checksum mismatch",
            details={"source": src_hash, "merged": dst_hash},
        )
    console.print_digest(src_hash)
    return src_hash
