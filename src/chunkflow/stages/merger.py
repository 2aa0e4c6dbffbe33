# stages/merger.py
from __future__ import annotations

import shutil
from pathlib import Path
from typing import Sequence

from ..errors import ConfigError
from ..model import FragmentDescriptor
from ..ui.console import Console
from .fragmenter import BUFFER_SIZE


def merge_fragments(
    descriptors: Sequence[FragmentDescriptor],
    target: str | Path,
    console: Console,
) -> Path:
    """
    Concatenate every fragment into target, in list order, nothing in between.

    On error the partially written target is left where it is. A target that
    is also one of the fragments is refused before anything is opened.
    """
    target = Path(target)
    resolved = target.resolve()
    for d in descriptors:
        if d.local_path.resolve() == resolved:
            raise ConfigError(
                stage="merge",
                message="output path is also an input fragment",
                details={"path": target},
            )

    target.parent.mkdir(parents=True, exist_ok=True)

    with target.open("wb") as out:
        for d in descriptors:
            with d.local_path.open("rb") as src:
                shutil.copyfileobj(src, out, BUFFER_SIZE)
            console.print_debug(f"appended {d.local_path}")
    return target
