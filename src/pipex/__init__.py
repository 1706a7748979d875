"""pipex: run shell-style ``a | b | c`` pipelines as chained processes."""

from .errors import (
    LineTooLongError,
    MalformedPipelineError,
    PipelineError,
    SpawnError,
)
from .executor import PipelineExecutor, run_pipeline
from .models import PipelineResult, Stage, StageResult
from .pipeline import Pipeline
from .tokenizer import tokenize

__all__ = [
    "__version__",
    "LineTooLongError",
    "MalformedPipelineError",
    "Pipeline",
    "PipelineError",
    "PipelineExecutor",
    "PipelineResult",
    "SpawnError",
    "Stage",
    "StageResult",
    "run_pipeline",
    "tokenize",
]

__version__ = "0.1.0"
