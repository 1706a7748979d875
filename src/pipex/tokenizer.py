"""Command-line tokenizer.

Turns a raw line such as ``ls -l | grep py | wc -l`` into a Pipeline of
Stage records. There is no quoting: stages are split on the separator and
tokens on ASCII whitespace (space, tab, newline).
"""

import re
from typing import List

from .errors import MalformedPipelineError
from .models import Stage
from .pipeline import Pipeline

DEFAULT_SEPARATOR = "|"
DEFAULT_INTERPRETER = "bash"
SCRIPT_SUFFIX = ".sh"

_WHITESPACE = re.compile(r"[ \t\n]+")


def check_separator(separator: str) -> None:
    """Raise ValueError unless separator is one non-whitespace character."""
    if len(separator) != 1 or _WHITESPACE.fullmatch(separator):
        raise ValueError(
            f"Separator must be one non-whitespace character: {separator!r}"
        )


def split_stages(line: str, separator: str = DEFAULT_SEPARATOR) -> List[str]:
    """Split a line into stage substrings, keeping empty ones.

    Args:
        line: Raw command line
        separator: Single character separating stages

    Returns:
        One substring per stage (``"a||b"`` gives three)

    Raises:
        ValueError: If separator is not a single non-whitespace character
    """
    check_separator(separator)
    return line.split(separator)


def split_tokens(text: str) -> List[str]:
    """Split a stage substring into tokens; no empty tokens are emitted."""
    return [token for token in _WHITESPACE.split(text) if token]


def is_script(token: str) -> bool:
    """Check if token names a shell script (``build.sh``, not ``.sh``)."""
    return len(token) > len(SCRIPT_SUFFIX) and token.endswith(SCRIPT_SUFFIX)


def build_stage(text: str, interpreter: str = DEFAULT_INTERPRETER) -> Stage:
    """Build one stage from its substring.

    A first token ending in ``.sh`` is run through the interpreter, so
    ``build.sh -x`` becomes ``bash build.sh -x``.
    """
    tokens = split_tokens(text)
    if tokens and is_script(tokens[0]):
        tokens.insert(0, interpreter)
    return Stage(arguments=tuple(tokens))


def tokenize(
    line: str,
    separator: str = DEFAULT_SEPARATOR,
    interpreter: str = DEFAULT_INTERPRETER,
) -> Pipeline:
    """Tokenize a raw line into a Pipeline.

    An empty or whitespace-only line yields a pipeline with no stages.
    Every other line yields one stage per separator-delimited substring;
    a substring with no tokens becomes an empty stage, which the executor
    refuses to run.

    Args:
        line: Raw command line
        separator: Stage separator (default ``|``)
        interpreter: Program used to run ``.sh`` stages

    Returns:
        Pipeline owning the parsed stages

    Raises:
        ValueError: If separator is not a single non-whitespace character
        MalformedPipelineError: If the line contains a NUL character
    """
    check_separator(separator)
    if "\0" in line:
        raise MalformedPipelineError("Command line contains a NUL character")
    if not split_tokens(line):
        return Pipeline()

    return Pipeline(
        [build_stage(part, interpreter) for part in split_stages(line, separator)]
    )
