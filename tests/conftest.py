"""Pytest configuration and shared fixtures."""

import os

import pytest
from click.testing import CliRunner

from pipex.cli import cli


@pytest.fixture(autouse=True)
def clean_pipex_env(monkeypatch):
    """Keep PIPEX_* variables from the developer's shell out of tests."""
    for name in ("PIPEX_INTERPRETER", "PIPEX_STATUS", "PIPEX_MAX_LINE_BYTES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args and optional stdin.

    Usage:
        result = invoke(["printf hello | tr a-z A-Z"])
        result = invoke([], input_data="ls | wc -l\n")
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(cli, args, input=input_data)

    return _invoke


class PipeSpy:
    """Records every descriptor handed out by os.pipe()."""

    def __init__(self, real_pipe):
        self._real_pipe = real_pipe
        self.pairs = []

    def __call__(self):
        fds = self._real_pipe()
        self.pairs.append(fds)
        return fds

    @property
    def fds(self):
        return [fd for pair in self.pairs for fd in pair]

    def open_fds(self):
        """Return recorded descriptors still open in this process."""
        still_open = []
        for fd in self.fds:
            try:
                os.fstat(fd)
            except OSError:
                continue
            still_open.append(fd)
        return still_open


@pytest.fixture
def pipe_spy(monkeypatch):
    """Spy on os.pipe() so tests can check every pipe end gets closed."""
    spy = PipeSpy(os.pipe)
    monkeypatch.setattr(os, "pipe", spy)
    return spy
