import io
import os
import sys
from unittest import mock

import pytest

from xvkit import commands
from xvkit.shell import DIRSIZ


def _set_stdin(monkeypatch, data: bytes) -> None:
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


# word_count

def test_word_count_empty():
    assert commands.word_count(b"") == (0, 0, 0)


@pytest.mark.parametrize(
    "data",
    [
        b"hello world\n",
        b"  leading and trailing  \n\n",
        b"tabs\tand\rreturns\vvertical\n",
        b"no newline at end",
        b"a\0b c\n",
        b"\n\n\n",
    ],
)
def test_word_count_invariants(data):
    lines, words, chars = commands.word_count(data)
    assert chars == len(data)
    assert lines == data.count(b"\n")
    assert words == len(data.split())


def test_word_count_str_and_bytes_agree():
    text = "one two\nthree\n"
    assert commands.word_count(text) == commands.word_count(text.encode())


def test_word_count_nul_is_part_of_a_word():
    assert commands.word_count(b"\0")[1] == 1


# fmtname

def test_fmtname_pads_short_name():
    result = commands.fmtname("a/b/cat")
    assert len(result) == DIRSIZ
    assert result.rstrip(" ") == "cat"


def test_fmtname_without_slash():
    assert commands.fmtname("wc").rstrip(" ") == "wc"


def test_fmtname_long_name_unpadded():
    name = "x" * (DIRSIZ + 3)
    assert commands.fmtname("dir/" + name) == name


# echo

def test_echo_joins_arguments(capsys):
    assert commands.echo_main(["ALL", "TESTS", "PASSED"]) == 0
    assert capsys.readouterr().out == "ALL TESTS PASSED\n"


def test_echo_without_arguments_prints_nothing(capsys):
    commands.echo_main([])
    assert capsys.readouterr().out == ""


# cat

def test_cat_copies_files(tmp_path, capsys):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.write_bytes(b"first line\n")
    second.write_bytes(b"second\n" * 200)
    assert commands.cat_main([str(first), str(second)]) == 0
    assert capsys.readouterr().out == "first line\n" + "second\n" * 200


def test_cat_missing_file(tmp_path, capsys):
    missing = str(tmp_path / "missing")
    assert commands.cat_main([missing]) == 1
    assert capsys.readouterr().out == f"cat: cannot open {missing}\n"


def test_cat_reads_stdin(monkeypatch, capsys):
    _set_stdin(monkeypatch, b"from stdin\n")
    assert commands.cat_main([]) == 0
    assert capsys.readouterr().out == "from stdin\n"


# grep

def test_grep_file(tmp_path, capsys):
    path = tmp_path / "fruit"
    path.write_bytes(b"apple\nbanana\ncherry\n")
    assert commands.grep_main(["an", str(path)]) == 0
    assert capsys.readouterr().out == "banana\n"


def test_grep_anchor_on_stdin(monkeypatch, capsys):
    _set_stdin(monkeypatch, b"cat\nscat\ncattle\n")
    commands.grep_main(["^cat"])
    assert capsys.readouterr().out == "cat\ncattle\n"


def test_grep_usage(capsys):
    assert commands.grep_main([]) == 1
    assert capsys.readouterr().err == "usage: grep pattern [file ...]\n"


def test_grep_missing_file(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert commands.grep_main(["x", missing]) == 1
    assert capsys.readouterr().out == f"grep: cannot open {missing}\n"


# wc

def test_wc_file(tmp_path, capsys):
    data = b"one two\nthree four five\n\nsix"
    path = tmp_path / "words"
    path.write_bytes(data)
    assert commands.wc_main([str(path)]) == 0
    lines, words, chars = commands.word_count(data)
    assert capsys.readouterr().out == f"{lines} {words} {chars} {path}\n"


def test_wc_stdin_has_empty_name(monkeypatch, capsys):
    data = b"alpha beta\n"
    _set_stdin(monkeypatch, data)
    commands.wc_main([])
    lines, words, chars = commands.word_count(data)
    assert capsys.readouterr().out == f"{lines} {words} {chars} \n"


def test_wc_missing_file(tmp_path, capsys):
    missing = str(tmp_path / "none")
    assert commands.wc_main([missing]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"


# ls

def test_ls_file(tmp_path, capsys):
    path = tmp_path / "data"
    path.write_bytes(b"12345")
    assert commands.ls_main([str(path)]) == 0
    fields = capsys.readouterr().out.split()
    assert fields == [
        "data",
        str(commands.T_FILE),
        str(os.stat(path).st_ino),
        "5",
    ]


def test_ls_directory(tmp_path, capsys):
    (tmp_path / "file1").write_bytes(b"abc")
    (tmp_path / "sub").mkdir()
    assert commands.ls_main([str(tmp_path)]) == 0
    rows = [line.split() for line in capsys.readouterr().out.splitlines()]
    names = [row[0] for row in rows]
    assert names == [".", "..", "file1", "sub"]
    by_name = {row[0]: row for row in rows}
    assert by_name["file1"][1] == str(commands.T_FILE)
    assert by_name["sub"][1] == str(commands.T_DIR)
    assert by_name["file1"][3] == "3"


def test_ls_missing(tmp_path, capsys):
    missing = str(tmp_path / "gone")
    assert commands.ls_main([missing]) == 1
    assert capsys.readouterr().err == f"ls: cannot open {missing}\n"


# mkdir

def test_mkdir_creates_directories(tmp_path):
    first, second = tmp_path / "d1", tmp_path / "d2"
    assert commands.mkdir_main([str(first), str(second)]) == 0
    assert first.is_dir() and second.is_dir()


def test_mkdir_stops_at_failure(tmp_path, capsys):
    existing = tmp_path / "exists"
    existing.mkdir()
    later = tmp_path / "later"
    assert commands.mkdir_main([str(existing), str(later)]) == 1
    assert capsys.readouterr().err == f"mkdir: {existing} failed to create\n"
    assert not later.exists()


def test_mkdir_usage(capsys):
    assert commands.mkdir_main([]) == 1
    assert capsys.readouterr().err == "Usage: mkdir files...\n"


# rm

def test_rm_removes_files_and_empty_dirs(tmp_path):
    path = tmp_path / "f"
    path.write_bytes(b"x")
    empty = tmp_path / "empty"
    empty.mkdir()
    assert commands.rm_main([str(path), str(empty)]) == 0
    assert not path.exists()
    assert not empty.exists()


def test_rm_non_empty_directory_fails(tmp_path, capsys):
    full = tmp_path / "dd"
    full.mkdir()
    (full / "ff").write_bytes(b"ff")
    assert commands.rm_main([str(full)]) == 1
    assert capsys.readouterr().err == f"rm: {full} failed to delete\n"
    assert (full / "ff").exists()


def test_rm_stops_at_failure(tmp_path):
    missing = tmp_path / "missing"
    keep = tmp_path / "keep"
    keep.write_bytes(b"k")
    assert commands.rm_main([str(missing), str(keep)]) == 1
    assert keep.exists()


# ln

def test_ln_creates_hard_link(tmp_path):
    old = tmp_path / "lf1"
    old.write_bytes(b"hello")
    new = tmp_path / "lf2"
    assert commands.ln_main([str(old), str(new)]) == 0
    assert new.read_bytes() == b"hello"
    assert os.stat(old).st_ino == os.stat(new).st_ino


def test_ln_to_existing_name_fails(tmp_path, capsys):
    old = tmp_path / "lf2"
    old.write_bytes(b"hello")
    assert commands.ln_main([str(old), str(old)]) == 1
    assert capsys.readouterr().err == f"link {old} {old}: failed\n"


def test_ln_usage(capsys):
    assert commands.ln_main(["only"]) == 1
    assert capsys.readouterr().err == "Usage: ln old new\n"


# kill

def test_kill_sends_signal_to_each_pid():
    with mock.patch("os.kill") as fake_kill:
        assert commands.kill_main(["12", "34"]) == 0
    assert [c.args[0] for c in fake_kill.call_args_list] == [12, 34]


def test_kill_skips_non_numeric_and_ignores_errors():
    with mock.patch("os.kill", side_effect=ProcessLookupError) as fake_kill:
        assert commands.kill_main(["abc", "77"]) == 0
    assert [c.args[0] for c in fake_kill.call_args_list] == [77]


# pause

def test_pause_sleeps_for_seconds():
    with mock.patch("time.sleep") as fake_sleep:
        assert commands.pause_main(["3"]) == 0
    fake_sleep.assert_called_once()
    assert fake_sleep.call_args.args[0] == 3


def test_pause_usage(capsys):
    with mock.patch("time.sleep") as fake_sleep:
        assert commands.pause_main([]) == 1
    assert capsys.readouterr().err == "usage: pause seconds\n"
    fake_sleep.assert_not_called()


# main

def test_main_dispatches(capsys):
    assert commands.main(["echo", "hi", "there"]) == 0
    assert capsys.readouterr().out == "hi there\n"


def test_main_unknown_command(capsys):
    assert commands.main(["frobnicate"]) == 1
    assert capsys.readouterr().err == "exec frobnicate failed\n"