"""Pipeline execution engine.

Runs every stage of a pipeline as its own OS process, chaining standard
output to standard input with anonymous pipes, and waits for all of
them before returning.
"""

import os
import subprocess
from dataclasses import dataclass
from typing import IO, List, Optional, Set, Union

import click

from .errors import MalformedPipelineError, SpawnError
from .models import PipelineResult, Stage, StageResult
from .pipeline import Pipeline, describe_pipeline
from .process_utils import (
    PopenSpawner,
    Spawner,
    exec_failure_status,
    terminate_and_reap,
)

Stream = Union[int, IO, None]


@dataclass
class _Launched:
    """A stage after its spawn attempt."""

    stage: Stage
    process: Optional[subprocess.Popen] = None
    failed_status: Optional[int] = None


def validate_pipeline(pipeline: Pipeline) -> None:
    """Reject pipelines that cannot be run, before anything is spawned.

    Raises:
        MalformedPipelineError: If the pipeline is closed, has an empty stage,
            or an argument contains a NUL character
    """
    if pipeline.closed:
        raise MalformedPipelineError("Pipeline has already been closed")
    for index, stage in enumerate(pipeline):
        if stage.is_empty:
            raise MalformedPipelineError(
                f"Stage {index + 1} of {len(pipeline)} is empty"
            )
        if any("\0" in argument for argument in stage.arguments):
            raise MalformedPipelineError(
                f"Stage {index + 1} of {len(pipeline)} contains a NUL character"
            )


class PipelineExecutor:
    """Executes complete pipelines."""

    def __init__(self, spawner: Optional[Spawner] = None, verbose: bool = False):
        """Initialize pipeline executor.

        Args:
            spawner: Spawn capability (default: subprocess.Popen based)
            verbose: Describe each stage on stderr as it is spawned
        """
        self.spawner = spawner or PopenSpawner()
        self.verbose = verbose

    def run(
        self,
        pipeline: Pipeline,
        stdin: Stream = None,
        stdout: Stream = None,
    ) -> PipelineResult:
        """Execute a pipeline and wait for every stage to finish.

        Args:
            pipeline: Pipeline to execute
            stdin: Input for the first stage (default: inherited)
            stdout: Output for the last stage (default: inherited)

        Returns:
            PipelineResult with one entry per stage, in order

        Raises:
            MalformedPipelineError: If the pipeline cannot be run
            SpawnError: If a pipe or process could not be created
        """
        validate_pipeline(pipeline)
        if len(pipeline) == 0:
            return PipelineResult()

        if self.verbose:
            click.echo(
                f"Executing pipeline: {describe_pipeline(pipeline)}", err=True
            )

        pipeline.mark_running(True)
        try:
            launched = self._spawn_all(pipeline.stages, stdin, stdout)
            return self._wait_all(launched)
        finally:
            pipeline.mark_running(False)

    def _spawn_all(
        self, stages: List[Stage], stdin: Stream, stdout: Stream
    ) -> List[_Launched]:
        count = len(stages)
        launched: List[_Launched] = []
        held: Set[int] = set()  # pipe ends currently open in this process
        prev_read: Optional[int] = None

        try:
            for i, stage in enumerate(stages):
                next_read: Optional[int] = None
                write_end: Optional[int] = None
                if i < count - 1:
                    try:
                        next_read, write_end = os.pipe()
                    except OSError as e:
                        raise SpawnError(f"Cannot create pipe: {e.strerror}") from e
                    held.update((next_read, write_end))

                stage_stdin = prev_read if prev_read is not None else stdin
                stage_stdout = write_end if write_end is not None else stdout

                if self.verbose:
                    click.echo(f"  Running: {stage}", err=True)

                launched.append(self._spawn(stage, stage_stdin, stage_stdout))

                # The child now owns these ends; the parent never reads the
                # previous pipe nor writes the new one.
                for fd in (prev_read, write_end):
                    if fd is not None:
                        os.close(fd)
                        held.discard(fd)
                prev_read = next_read
        except BaseException:
            for fd in held:
                os.close(fd)
            terminate_and_reap(
                item.process for item in launched if item.process is not None
            )
            raise

        return launched

    def _spawn(self, stage: Stage, stdin: Stream, stdout: Stream) -> _Launched:
        try:
            process = self.spawner.spawn(stage, stdin, stdout)
        except OSError as e:
            status = exec_failure_status(e)
            if status is None:
                raise SpawnError(
                    f"Cannot spawn {stage.program}: {e.strerror or e}"
                ) from e
            # Contained to this stage: siblings keep running and the
            # downstream stage sees end-of-file on its input.
            click.echo(f"pipex: {stage.program}: {e.strerror or e}", err=True)
            return _Launched(stage=stage, failed_status=status)
        return _Launched(stage=stage, process=process)

    def _wait_all(self, launched: List[_Launched]) -> PipelineResult:
        results = []
        for item in launched:
            if item.process is None:
                results.append(
                    StageResult(
                        arguments=item.stage.arguments,
                        returncode=item.failed_status,
                    )
                )
                continue
            returncode = item.process.wait()
            results.append(
                StageResult(
                    arguments=item.stage.arguments,
                    pid=item.process.pid,
                    returncode=returncode,
                )
            )
        return PipelineResult(stages=results)


def run_pipeline(
    pipeline: Pipeline,
    stdin: Stream = None,
    stdout: Stream = None,
    verbose: bool = False,
) -> PipelineResult:
    """Execute a pipeline with the default spawner."""
    return PipelineExecutor(verbose=verbose).run(pipeline, stdin=stdin, stdout=stdout)
