# stages/naming.py
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ..model import FragmentDescriptor
from .fragmenter import index_width


def remote_name(prefix: str, index: int, width: int = 2) -> str:
    return f"{prefix}-{index:0{width}d}.bin"


def make_descriptors(prefix: str, local_paths: Sequence[str | Path]) -> List[FragmentDescriptor]:
    """Pair each local fragment with its remote name; index = list position."""
    width = index_width(len(local_paths))
    return [
        FragmentDescriptor(local_path=Path(p), remote_name=remote_name(prefix, i, width))
        for i, p in enumerate(local_paths)
    ]
