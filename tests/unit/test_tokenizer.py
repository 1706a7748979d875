"""Unit tests for the command-line tokenizer."""

import pytest

from pipex.errors import MalformedPipelineError
from pipex.models import Stage
from pipex.tokenizer import (
    build_stage,
    is_script,
    split_stages,
    split_tokens,
    tokenize,
)


def test_single_stage_has_no_separator():
    pipeline = tokenize("ls -l /tmp")
    assert len(pipeline) == 1
    assert pipeline[0].arguments == ("ls", "-l", "/tmp")
    assert pipeline[0].program == "ls"


def test_stages_in_order():
    pipeline = tokenize("cat data.txt | grep foo | wc -l")
    assert [stage.arguments for stage in pipeline] == [
        ("cat", "data.txt"),
        ("grep", "foo"),
        ("wc", "-l"),
    ]


def test_tokenizing_is_deterministic():
    line = "printf hello | tr a-z A-Z"
    assert tokenize(line) == tokenize(line)


def test_whitespace_variants_are_separators():
    pipeline = tokenize("  sort\t-r \n|\tuniq   -c  \n")
    assert pipeline[0].arguments == ("sort", "-r")
    assert pipeline[1].arguments == ("uniq", "-c")


def test_no_spaces_around_separator():
    pipeline = tokenize("ls|wc")
    assert [stage.program for stage in pipeline] == ["ls", "wc"]


@pytest.mark.parametrize("line", ["", "   ", "\t\n", " \n "])
def test_blank_line_has_no_stages(line):
    assert len(tokenize(line)) == 0


@pytest.mark.parametrize(
    "line, count",
    [
        ("a", 1),
        ("a | b", 2),
        ("a | | b", 3),
        ("a || b", 3),
        ("a |", 2),
        ("| a", 2),
    ],
)
def test_stage_count_matches_substrings(line, count):
    assert len(tokenize(line)) == count


def test_empty_substring_becomes_empty_stage():
    pipeline = tokenize("ls | | wc")
    assert pipeline[1].is_empty
    assert pipeline[1].program is None
    assert not pipeline[0].is_empty
    assert not pipeline[2].is_empty


def test_script_stage_runs_through_interpreter():
    pipeline = tokenize("build.sh -x | tee log")
    assert pipeline[0].arguments == ("bash", "build.sh", "-x")
    assert pipeline[0].program == "bash"
    assert pipeline[1].arguments == ("tee", "log")


def test_lone_script_token():
    assert build_stage("a.sh").arguments == ("bash", "a.sh")


def test_custom_interpreter():
    pipeline = tokenize("./run.sh", interpreter="sh")
    assert pipeline[0].arguments == ("sh", "./run.sh")


@pytest.mark.parametrize("token", ["x.shx", ".sh", "run.SH", "sh", "a.sh.bak"])
def test_non_scripts_are_untouched(token):
    assert build_stage(token).arguments == (token,)


def test_script_rule_only_applies_to_first_token():
    assert build_stage("cat a.sh").arguments == ("cat", "a.sh")


def test_is_script():
    assert is_script("a.sh")
    assert is_script("dir/deploy.sh")
    assert not is_script(".sh")
    assert not is_script("x.shx")


def test_split_stages_keeps_empty_substrings():
    assert split_stages("a||b") == ["a", "", "b"]


def test_split_stages_custom_separator():
    assert split_stages("a ; b", separator=";") == ["a ", " b"]


@pytest.mark.parametrize("separator", ["", "||", " ", "\t"])
def test_split_stages_rejects_bad_separator(separator):
    with pytest.raises(ValueError, match="Separator"):
        split_stages("a | b", separator=separator)


def test_split_tokens_drops_empty_tokens():
    assert split_tokens("  a \t\t b\n\nc ") == ["a", "b", "c"]


def test_tokens_are_plain_strings():
    line = "echo hello"
    stage = tokenize(line)[0]
    assert stage == Stage(arguments=("echo", "hello"))
    assert all(type(token) is str for token in stage.arguments)


def test_nul_character_is_rejected():
    with pytest.raises(MalformedPipelineError, match="NUL"):
        tokenize("printf a\x00b | wc -c")


@pytest.mark.parametrize("line", ["", "   ", "ls"])
def test_bad_separator_rejected_for_any_line(line):
    with pytest.raises(ValueError, match="Separator"):
        tokenize(line, separator="||")
