# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from .errors import WorkflowError, filesystem_errors
from .model import (
    DEFAULT_CHUNK_COUNT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CLIENT_BIN,
    DEFAULT_FRAGMENT_SIZE,
    DEFAULT_MERGED_NAME,
    DEFAULT_REMOTE_PREFIX,
    DEFAULT_SOURCE_FILE,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_WORK_DIR,
    FragmentDescriptor,
    WorkflowConfig,
)
from .pipeline import PipelineResult, run_pipeline
from .stages.fragmenter import split_file
from .stages.integrity import verify_integrity
from .stages.merger import merge_fragments
from .ui.console import Console


def _fail(console: Console, exc: BaseException) -> None:
    """Single top-level error report; always exits non-zero."""
    if isinstance(exc, WorkflowError):
        console.print_error(
            f"stage '{exc.stage}' failed",
            f"{exc.kind}: {exc.message}",
            details=[f"{k}={v}" for k, v in exc.details.items()] or None,
        )
        if console.debug:
            console.print_exception(exc)
    else:
        console.print_exception(exc)
    sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """chunkflow: split, transfer, merge and verify large files."""
    ctx.ensure_object(dict)
    ctx.obj["console"] = Console(debug=debug)


@cli.command()
@click.option("--source-file", default=str(DEFAULT_SOURCE_FILE), show_default=True, help="Path to the source file (created if missing)")
@click.option("--work-dir", default=str(DEFAULT_WORK_DIR), show_default=True, help="Base working directory")
@click.option("--client-bin", default=DEFAULT_CLIENT_BIN, show_default=True, help="Path to the storage client executable")
@click.option("--remote-prefix", default=DEFAULT_REMOTE_PREFIX, show_default=True, help="Prefix used when naming remote fragments")
@click.option("--fragment-size", default=DEFAULT_FRAGMENT_SIZE, show_default=True, help="Fragment size passed to the storage client")
@click.option("--upload-extra", default="", help="Extra arguments appended to upload commands (space separated)")
@click.option("--download-extra", default="", help="Extra arguments appended to download commands (space separated)")
@click.option("--chunk-count", default=DEFAULT_CHUNK_COUNT, type=int, show_default=True, help="Number of fragments to create")
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, type=int, show_default=True, help="Size of each fragment in bytes")
@click.option("--merged-name", default=DEFAULT_MERGED_NAME, show_default=True, help="File name of the merged output inside the work dir")
@click.option("--timeout", "timeout_seconds", default=DEFAULT_TIMEOUT_SECONDS, type=float, show_default=True, help="Deadline in seconds for all storage client calls")
@click.option("--skip-upload", is_flag=True, default=False, help="Skip invoking the storage client upload commands")
@click.option("--skip-download", is_flag=True, default=False, help="Skip invoking the storage client download commands")
@click.option("--skip-verify", is_flag=True, default=False, help="Skip checksum comparison between source and merged files")
@click.option("--print-plan/--no-print-plan", default=True, show_default=True, help="Print which stages will run")
@click.pass_context
def run(ctx, print_plan, **options):
    """Run the full split / upload / download / merge / verify workflow."""
    console = ctx.obj["console"]

    result = PipelineResult()

    try:
        cfg = WorkflowConfig.from_options(**options)
        run_pipeline(cfg, console, print_plan=print_plan, result=result)
        console.print_results(result.statuses)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        if result.statuses:
            console.print_results(result.statuses)
        _fail(console, e)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out-dir", required=True, type=click.Path(file_okay=False, path_type=Path), help="Directory for chunk-NN.bin files")
@click.option("--chunk-count", default=DEFAULT_CHUNK_COUNT, type=click.IntRange(min=1), show_default=True, help="Number of fragments to create")
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, type=click.IntRange(min=1), show_default=True, help="Size of each fragment in bytes")
@click.pass_context
def split(ctx, source, out_dir, chunk_count, chunk_size):
    """Split SOURCE into fragments without transferring anything."""
    console = ctx.obj["console"]
    try:
        with filesystem_errors("split"):
            paths = split_file(source, out_dir, chunk_size, chunk_count, console)
    except Exception as e:
        _fail(console, e)
    for p in paths:
        console.print_info(str(p))


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("fragments", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def merge(ctx, output, fragments):
    """Concatenate FRAGMENTS, in the order given, into OUTPUT."""
    console = ctx.obj["console"]
    descriptors = [FragmentDescriptor(local_path=p, remote_name=p.name) for p in fragments]
    try:
        with filesystem_errors("merge"):
            merged = merge_fragments(descriptors, output, console)
    except Exception as e:
        _fail(console, e)
    console.print_info(f"merged file created at {merged}")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("merged", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def verify(ctx, source, merged):
    """Compare the SHA-256 digests of SOURCE and MERGED."""
    console = ctx.obj["console"]
    try:
        with filesystem_errors("verify"):
            verify_integrity(source, merged, console)
    except Exception as e:
        _fail(console, e)


def main() -> None:
    cli(auto_envvar_prefix="CHUNKFLOW")


if __name__ == "__main__":
    main()
