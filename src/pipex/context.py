"""pipex context for passing settings between CLI and core."""

import os
from dataclasses import dataclass
from typing import Optional, get_args

from .models import StatusPolicy
from .tokenizer import DEFAULT_INTERPRETER, DEFAULT_SEPARATOR

DEFAULT_MAX_LINE_BYTES = 4096
DEFAULT_STATUS: StatusPolicy = "zero"
STATUS_POLICIES = get_args(StatusPolicy)

ENV_INTERPRETER = "PIPEX_INTERPRETER"
ENV_STATUS = "PIPEX_STATUS"
ENV_MAX_LINE_BYTES = "PIPEX_MAX_LINE_BYTES"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    interpreter: str = DEFAULT_INTERPRETER
    status: StatusPolicy = DEFAULT_STATUS
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES
    separator: str = DEFAULT_SEPARATOR


def _parse_max_line_bytes(value: str) -> int:
    try:
        limit = int(value)
    except ValueError:
        raise ValueError(f"Invalid maximum line length: {value!r}") from None
    if limit <= 0:
        raise ValueError(f"Maximum line length must be positive: {limit}")
    return limit


def resolve_settings(
    interpreter: Optional[str] = None,
    status: Optional[str] = None,
    max_line_bytes: Optional[int] = None,
) -> Settings:
    """Resolve settings for one invocation.

    Resolution order for each field:
    1. Explicit value (CLI flag)
    2. Environment variable ($PIPEX_INTERPRETER, $PIPEX_STATUS,
       $PIPEX_MAX_LINE_BYTES)
    3. Built-in default

    Reads fresh from the environment each time.

    Raises:
        ValueError: If a value is invalid
    """
    interpreter = interpreter or os.environ.get(ENV_INTERPRETER) or DEFAULT_INTERPRETER
    if not interpreter.strip():
        raise ValueError("Interpreter cannot be empty")

    status = status or os.environ.get(ENV_STATUS) or DEFAULT_STATUS
    if status not in STATUS_POLICIES:
        raise ValueError(
            f"Invalid status policy: {status} "
            f"(expected one of {', '.join(STATUS_POLICIES)})"
        )

    if max_line_bytes is None:
        env_limit = os.environ.get(ENV_MAX_LINE_BYTES)
        max_line_bytes = (
            _parse_max_line_bytes(env_limit) if env_limit else DEFAULT_MAX_LINE_BYTES
        )
    elif max_line_bytes <= 0:
        raise ValueError(f"Maximum line length must be positive: {max_line_bytes}")

    return Settings(
        interpreter=interpreter,
        status=status,
        max_line_bytes=max_line_bytes,
    )


class PipexContext:
    def __init__(self):
        self.settings = Settings()
        self.verbose = False

