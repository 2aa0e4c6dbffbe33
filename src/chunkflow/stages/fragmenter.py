# stages/fragmenter.py
from __future__ import annotations

from pathlib import Path
from typing import List

from ..ui.console import Console

BUFFER_SIZE = 8 * 1024 * 1024


def index_width(count: int) -> int:
    """
    Digits needed to zero-pad indexes 0..count-1.

    Never below 2, so up to 100 fragments the names stay chunk-00 .. chunk-99
    and lexicographic order matches numeric order for any count.
    """
    return max(2, len(str(max(count - 1, 0))))


def chunk_name(index: int, width: int = 2) -> str:
    return f"chunk-{index:0{width}d}.bin"


def split_file(
    source: str | Path,
    out_dir: str | Path,
    chunk_size: int,
    chunk_count: int,
    console: Console,
) -> List[Path]:
    """
    Write exactly chunk_count fragment files from source, in order.

    Each fragment gets chunk_size bytes until the source runs out; after that
    fragments are short or empty, never padded. Errors propagate as-is and
    already written fragments stay on disk.
    """
    source = Path(source)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    width = index_width(chunk_count)

    paths: List[Path] = []
    with source.open("rb") as src:
        for i in range(chunk_count):
            target = out_dir / chunk_name(i, width)
            written = 0
            with target.open("wb") as out:
                while written < chunk_size:
                    data = src.read(min(BUFFER_SIZE, chunk_size - written))
                    if not data:
                        break
                    out.write(data)
                    written += len(data)
            console.print_debug(f"wrote {target} ({written} bytes)")
            paths.append(target)

    return paths
