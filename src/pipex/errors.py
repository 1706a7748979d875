"""Exceptions raised while building and running pipelines."""


class PipelineError(Exception):
    """Error during pipeline construction or execution."""

    pass


class MalformedPipelineError(PipelineError):
    """Pipeline cannot be executed as written (e.g. ``ls | | wc``)."""

    pass


class SpawnError(PipelineError):
    """A pipe or child process could not be created."""

    pass


class LineTooLongError(PipelineError):
    """Input line exceeds the configured maximum length."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"Input line is {length} bytes, maximum is {limit} bytes"
        )
