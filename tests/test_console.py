import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import io

import pytest

import utils
from console import run_console


@pytest.fixture
def words_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("cat\ncats\na\ntag\n")
    return str(path)


def play(words_file, script, *extra):
    return run_console(["--dict", words_file, *extra], stdin=io.StringIO(script))


def test_console_game(words_file, capsys):
    script = "\n".join([
        "/askouija Which pet?",
        "/hint",
        "/tellouija C",
        "/tellouija q",
        "/tellouija A",
        "/tellouija T",
        "/goodbye",
        "/quit",
        "/tellouija S",
    ]) + "\n"
    assert play(words_file, script) == 0
    out = capsys.readouterr().out
    assert "New question for the spirits!\nWhich pet?" in out
    assert "A C T" in out
    assert utils.CAPITALS_ONLY in out
    assert "The spirits have spoken!\n> CAT" in out
    assert utils.NO_BOARD not in out


def test_console_readings_and_unknown_command(words_file, capsys):
    script = "/askouija q\n/tellouija A\n/tellouija T\n/readings\n/readings x\n/dance\nhello\n"
    assert play(words_file, script) == 0
    out = capsys.readouterr().out
    assert "A TAG" in out
    assert "Usage: /readings [n]" in out
    assert out.count("Commands:") == 3


def test_console_uses_environment(words_file, monkeypatch, capsys):
    monkeypatch.setenv(utils.DICT_ENV, words_file)
    assert run_console([], stdin=io.StringIO("/askouija q\n")) == 0
    assert "New question for the spirits!" in capsys.readouterr().out


def test_console_requires_dictionary(monkeypatch):
    monkeypatch.delenv(utils.DICT_ENV, raising=False)
    with pytest.raises(SystemExit) as exc_info:
        run_console([], stdin=io.StringIO(""))
    assert exc_info.value.code == 2


def test_console_missing_dictionary(tmp_path, capsys):
    assert run_console(["--dict", str(tmp_path / "missing.txt")], stdin=io.StringIO("")) == 1
    assert "Could not find dictionary" in capsys.readouterr().out


def test_console_empty_dictionary(tmp_path, capsys):
    path = tmp_path / "words.txt"
    path.write_text("x\n1\n")
    assert run_console(["--dict", str(path)], stdin=io.StringIO("")) == 1
    assert "no usable words" in capsys.readouterr().out


@pytest.mark.parametrize("arg", ["0", "-3"])
def test_console_readings_needs_positive_count(words_file, capsys, arg):
    assert play(words_file, f"/askouija q\n/tellouija A\n/readings {arg}\n") == 0
    assert "Usage: /readings [n]" in capsys.readouterr().out


def test_console_directory_as_dictionary(tmp_path, capsys):
    assert run_console(["--dict", str(tmp_path)], stdin=io.StringIO("")) == 1
    assert "Could not find dictionary" in capsys.readouterr().out


def test_console_survives_long_readings(tmp_path, capsys):
    path = tmp_path / "words.txt"
    path.write_text("a\n")
    script = "/askouija q\n" + "/tellouija A\n" * 1200 + "/readings 1\n/goodbye\n"
    assert run_console(["--dict", str(path)], stdin=io.StringIO(script)) == 0
    assert "The spirits have spoken!" in capsys.readouterr().out
