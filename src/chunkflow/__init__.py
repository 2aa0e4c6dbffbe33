from .model import FragmentDescriptor, WorkflowConfig
from .pipeline import PipelineResult, run_pipeline
from .errors import WorkflowError

__all__ = ["FragmentDescriptor", "WorkflowConfig", "PipelineResult", "run_pipeline", "WorkflowError"]
