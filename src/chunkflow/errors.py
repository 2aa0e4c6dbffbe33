# errors.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterator


@dataclass(eq=False)
class WorkflowError(Exception):
    """
    Structured pipeline error with enough context for:
      - clean CLI output
      - naming the stage that failed
      - debugging without full tracebacks
    """
    stage: str
    message: str
    details: Dict[str, object] = field(default_factory=dict)

    kind: ClassVar[str] = "workflow_error"

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}", f"stage={self.stage}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class ConfigError(WorkflowError):
    kind = "config_error"


class FilesystemError(WorkflowError):
    kind = "filesystem_error"


class SizeMismatchError(WorkflowError):
    kind = "size_mismatch"


class ToolNotFoundError(WorkflowError):
    kind = "tool_not_found"


class ToolInvocationError(WorkflowError):
    kind = "tool_failed"


class ToolTimeoutError(ToolInvocationError):
    kind = "tool_timeout"


class IntegrityMismatchError(WorkflowError):
    kind = "integrity_mismatch"


@contextmanager
def filesystem_errors(stage: str) -> Iterator[None]:
    """Re-raise a bare OSError as FilesystemError carrying the stage and path."""
    try:
        yield
    except OSError as e:
        raise FilesystemError(
            stage=stage,
            message=e.strerror or str(e),
            details={"path": e.filename} if e.filename else {},
        ) from e
