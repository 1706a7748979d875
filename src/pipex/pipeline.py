"""Pipeline container with scoped ownership of its stages."""

from typing import Iterator, List, Optional, Sequence

from .errors import PipelineError
from .models import Stage


class Pipeline:
    """Ordered sequence of stages built from one input line.

    A pipeline owns its stages until it is closed. Use it as a context
    manager so the stages are released once execution has finished:

        with tokenize("printf hello | tr a-z A-Z") as pipeline:
            run_pipeline(pipeline)
    """

    def __init__(self, stages: Optional[Sequence[Stage]] = None):
        self._stages: List[Stage] = list(stages or [])
        self._closed = False
        self._running = False

    @property
    def stages(self) -> List[Stage]:
        return list(self._stages)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> bool:
        return self._running

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self._stages)

    def __getitem__(self, index: int) -> Stage:
        return self._stages[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pipeline):
            return NotImplemented
        return self._stages == other._stages

    def __repr__(self) -> str:
        return f"Pipeline({describe_pipeline(self)!r})"

    def mark_running(self, running: bool) -> None:
        """Flag the pipeline as in use by an executor."""
        if running and self._closed:
            raise PipelineError("Pipeline has already been closed")
        self._running = running

    def close(self) -> None:
        """Release every stage.

        Raises:
            PipelineError: If an executor is still running the pipeline
        """
        if self._running:
            raise PipelineError("Cannot close a pipeline while it is running")
        self._stages.clear()
        self._closed = True

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def describe_pipeline(pipeline: Pipeline) -> str:
    """Render a pipeline back into a one-line description."""
    return " | ".join(str(stage) for stage in pipeline)
