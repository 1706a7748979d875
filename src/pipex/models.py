"""Pydantic models for pipeline stages and their results."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

StatusPolicy = Literal["zero", "last", "pipefail"]


class Stage(BaseModel):
    """One program invocation within a pipeline.

    ``arguments[0]`` is the program to run. An empty argument list marks a
    malformed stage (nothing between two separators); it keeps its slot in
    the pipeline so the executor can reject it before spawning anything.
    """

    model_config = ConfigDict(frozen=True)

    arguments: tuple[str, ...] = ()

    @property
    def program(self) -> str | None:
        return self.arguments[0] if self.arguments else None

    @property
    def is_empty(self) -> bool:
        return not self.arguments

    def __str__(self) -> str:
        return " ".join(self.arguments)


class StageResult(BaseModel):
    """Outcome of one spawned stage."""

    arguments: tuple[str, ...]
    pid: int | None = None  # None when the program image never started
    returncode: int

    @property
    def started(self) -> bool:
        return self.pid is not None


class PipelineResult(BaseModel):
    """Exit statuses of every stage, in pipeline order."""

    stages: list[StageResult] = Field(default_factory=list)

    @property
    def returncodes(self) -> list[int]:
        return [stage.returncode for stage in self.stages]

    @property
    def succeeded(self) -> bool:
        return all(code == 0 for code in self.returncodes)

    def exit_status(self, policy: StatusPolicy = "zero") -> int:
        """Collapse stage statuses into one process exit code.

        - ``zero``: always 0 once the pipeline has run
        - ``last``: status of the last stage (POSIX shell default)
        - ``pipefail``: status of the rightmost failing stage, else 0
        """
        codes = self.returncodes
        if policy == "zero" or not codes:
            return 0
        if policy == "last":
            return _as_exit_code(codes[-1])
        if policy == "pipefail":
            for code in reversed(codes):
                if code != 0:
                    return _as_exit_code(code)
            return 0
        raise ValueError(f"Unknown status policy: {policy}")


def _as_exit_code(returncode: int) -> int:
    # Popen reports death by signal N as -N; shells report 128 + N
    if returncode < 0:
        return 128 - returncode
    return returncode


__all__ = ["PipelineResult", "Stage", "StageResult", "StatusPolicy"]
