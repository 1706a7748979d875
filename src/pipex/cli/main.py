"""pipex CLI main entry point."""

import sys

import click

from .. import __version__
from ..context import STATUS_POLICIES, PipexContext, resolve_settings
from ..errors import PipelineError
from ..executor import run_pipeline
from ..tokenizer import tokenize
from .helpers import check_line_length, join_words, read_line


@click.command(
    context_settings=dict(
        ignore_unknown_options=True, allow_interspersed_args=False
    )
)
@click.version_option(__version__, prog_name="pipex")
@click.option(
    "-v", "--verbose", is_flag=True, help="Describe each stage on stderr."
)
@click.option(
    "--interpreter",
    help="Program used to run .sh stages (overrides $PIPEX_INTERPRETER).",
)
@click.option(
    "--status",
    type=click.Choice(STATUS_POLICIES),
    help="Exit status policy (overrides $PIPEX_STATUS, default: zero).",
)
@click.argument("line", nargs=-1)
@click.pass_context
def cli(ctx, verbose, interpreter, status, line):
    """Run a shell-style pipeline: STAGE [| STAGE]...

    Each stage runs as its own process with its output piped into the
    next stage's input. Tokens are split on whitespace; there is no
    quoting. Options must come before the pipeline. With no LINE, the
    first line of standard input is used.

    Examples:
        pipex "printf hello | tr a-z A-Z"
        pipex ls -l '|' wc -l
        echo "build.sh -x | tee build.log" | pipex
        pipex --status pipefail "false | cat"
    """
    obj = ctx.ensure_object(PipexContext)
    obj.verbose = verbose

    try:
        obj.settings = resolve_settings(interpreter=interpreter, status=status)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    settings = obj.settings
    try:
        if line:
            raw = join_words(line)
        else:
            raw = read_line(click.get_binary_stream("stdin"))
        check_line_length(raw, settings.max_line_bytes)

        with tokenize(raw, settings.separator, settings.interpreter) as pipeline:
            result = run_pipeline(pipeline, verbose=obj.verbose)
    except PipelineError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    sys.exit(result.exit_status(settings.status))


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
