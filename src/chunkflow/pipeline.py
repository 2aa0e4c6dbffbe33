# pipeline.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import filesystem_errors
from .model import FragmentDescriptor, WorkflowConfig
from .stages.fragmenter import split_file
from .stages.integrity import verify_integrity
from .stages.merger import merge_fragments
from .stages.naming import make_descriptors
from .stages.provision import ensure_source_file
from .stages.transfer import CommandRunner, Deadline, TransferClient, run_subprocess
from .ui.console import Console

# Init -> SourceReady -> Fragmented -> [Uploaded] -> [Downloaded|AssumedRemote]
#      -> Merged -> [Verified] -> Done


@dataclass
class PipelineResult:
    statuses: Dict[str, str] = field(default_factory=dict)  # stage -> "ok" | "skipped" | "failed"
    fragments: List[FragmentDescriptor] = field(default_factory=list)
    downloaded: List[FragmentDescriptor] = field(default_factory=list)
    merged_file: Optional[Path] = None
    digest: Optional[str] = None


def plan(cfg: WorkflowConfig) -> List[Tuple[str, bool]]:
    """Stages in execution order, paired with whether they will run."""
    return [
        ("prepare", True),
        ("provision", True),
        ("split", True),
        ("name", True),
        ("upload", not cfg.skip_upload),
        ("download", not cfg.skip_download),
        ("merge", True),
        ("verify", not cfg.skip_verify),
    ]


@contextmanager
def _stage(name: str, console: Console, result: PipelineResult) -> Iterator[None]:
    """Report the stage, record its status and wrap bare OSErrors with context."""
    console.print_stage(name)
    try:
        with filesystem_errors(name):
            yield
    except Exception:
        result.statuses[name] = "failed"
        raise
    result.statuses[name] = "ok"
    console.print_success(name)


def _skip(name: str, reason: str, console: Console, result: PipelineResult) -> None:
    console.print_stage_skipped(name, reason)
    result.statuses[name] = "skipped"


def run_pipeline(
    cfg: WorkflowConfig,
    console: Console,
    *,
    runner: CommandRunner = run_subprocess,
    print_plan: bool = True,
    result: Optional[PipelineResult] = None,
) -> PipelineResult:
    """
    Run every stage in order. The first failure raises and nothing after it runs.

    Pass a PipelineResult to keep the per-stage statuses when a stage fails.
    """
    result = result if result is not None else PipelineResult()

    console.print_run_started(
        source=str(cfg.source_file),
        work_dir=str(cfg.work_dir),
        chunk_count=cfg.chunk_count,
        chunk_size=cfg.chunk_size,
    )
    if print_plan:
        console.print_plan(plan(cfg))

    with _stage("prepare", console, result):
        for d in (cfg.work_dir, cfg.chunk_dir, cfg.download_dir):
            d.mkdir(parents=True, exist_ok=True)

    with _stage("provision", console, result):
        ensure_source_file(cfg.source_file, cfg.total_size, console)

    with _stage("split", console, result):
        chunks = split_file(cfg.source_file, cfg.chunk_dir, cfg.chunk_size, cfg.chunk_count, console)
        console.print_info(f"created {len(chunks)} fragments under {cfg.chunk_dir}")

    with _stage("name", console, result):
        result.fragments = make_descriptors(cfg.remote_prefix, chunks)

    # the deadline starts once, here, and covers both transfer stages
    deadline = Deadline(cfg.timeout_seconds)
    client = TransferClient(cfg.client_bin, cfg.fragment_size, deadline, console, runner=runner)

    if cfg.skip_upload:
        _skip("upload", "skip-upload is set; not calling the storage client", console, result)
    else:
        with _stage("upload", console, result):
            client.upload(result.fragments, cfg.upload_extra)

    if cfg.skip_download:
        _skip("download", "skip-download is set; assuming remote fragments already retrieved", console, result)
        result.downloaded = list(result.fragments)
    else:
        with _stage("download", console, result):
            result.downloaded = client.download(result.fragments, cfg.download_dir, cfg.download_extra)

    with _stage("merge", console, result):
        result.merged_file = merge_fragments(result.downloaded, cfg.merged_file, console)
        console.print_info(f"merged file created at {result.merged_file}")

    if cfg.skip_verify:
        _skip("verify", "skip-verify is set; checksum comparison skipped", console, result)
    else:
        with _stage("verify", console, result):
            result.digest = verify_integrity(cfg.source_file, result.merged_file, console)

    return result
