import io
import shlex
import subprocess
import sys
import textwrap

import pytest

from surveyprompt import rendering
from surveyprompt.editor import EDITOR_QUESTION_TEMPLATE, Editor, default_editor
from surveyprompt.rendering import default_icons, default_prompt_config

MONTH = "What is your favorite month:"
COMMIT = "Edit git commit message"
Q = default_icons().question.text
H = default_icons().help.text
HELP_INPUT = default_prompt_config().help_input


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setattr(rendering, "DISABLE_COLOR", True)


def script_command(tmp_path, body, *extra_args):
    script = tmp_path / "fake_editor.py"
    script.write_text(textwrap.dedent(body), encoding="utf-8")
    return shlex.join([sys.executable, str(script), *extra_args])


WRITE_COMMIT = """
    import sys
    with open(sys.argv[-1], "w", encoding="utf-8") as f:
        f.write("Add editor prompt tests\\n")
"""

QUIT = """
    import sys
"""

TRUNCATE = """
    import sys
    open(sys.argv[-1], "wb").close()
"""

APPEND = """
    import sys
    path = sys.argv[-1]
    with open(path, "rb") as f:
        data = f.read()
    with open(path, "wb") as f:
        f.write(data + b" edited")
"""

WRITE_NAME = """
    import os, sys
    with open(sys.argv[-1], "w", encoding="utf-8") as f:
        f.write(os.path.basename(sys.argv[-1]))
"""

FAIL = """
    import sys
    sys.exit(3)
"""


def render(prompt, **extra):
    data = {
        "message": prompt.message,
        "default": prompt.default,
        "help": prompt.help,
        "hide_default": prompt.hide_default,
        "config": default_prompt_config(),
        **extra,
    }
    prompt.render(EDITOR_QUESTION_TEMPLATE, data)
    return prompt.stdout.getvalue()


@pytest.mark.parametrize(
    "kwargs, extra, expected",
    [
        ({}, {}, f"{Q} {MONTH} [Enter to launch editor] "),
        ({"default": "April"}, {}, f"{Q} {MONTH} (April) [Enter to launch editor] "),
        ({"default": "April", "hide_default": True}, {}, f"{Q} {MONTH} [Enter to launch editor] "),
        ({}, {"answer": "October", "show_answer": True}, f"{Q} {MONTH} October\n"),
        (
            {"help": "This is helpful"},
            {},
            f"{Q} {MONTH} [{HELP_INPUT} for help] [Enter to launch editor] ",
        ),
        (
            {"default": "April", "help": "This is helpful"},
            {},
            f"{Q} {MONTH} [{HELP_INPUT} for help] (April) [Enter to launch editor] ",
        ),
        (
            {"help": "This is helpful"},
            {"show_help": True},
            f"{H} This is helpful\n{Q} {MONTH} [Enter to launch editor] ",
        ),
        (
            {"default": "April", "help": "This is helpful"},
            {"show_help": True},
            f"{H} This is helpful\n{Q} {MONTH} (April) [Enter to launch editor] ",
        ),
    ],
)
def test_render(kwargs, extra, expected):
    prompt = Editor(message=MONTH, stdout=io.StringIO(), **kwargs)
    assert expected in render(prompt, **extra)


def make(tmp_path, body, typed="\n", extra_args=(), **kwargs):
    return Editor(
        message=COMMIT,
        editor=script_command(tmp_path, body, *extra_args),
        stdin=io.StringIO(typed),
        stdout=io.StringIO(),
        **kwargs,
    )


def test_prompt_returns_saved_text(tmp_path):
    prompt = make(tmp_path, WRITE_COMMIT)
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"
    assert f"{COMMIT} [Enter to launch editor]" in prompt.stdout.getvalue()


def test_prompt_with_default_and_no_change(tmp_path):
    prompt = make(tmp_path, QUIT, default="No comment")
    assert prompt.prompt(default_prompt_config()) == "No comment"
    assert f"{COMMIT} (No comment) [Enter to launch editor]" in prompt.stdout.getvalue()


def test_prompt_overriding_default(tmp_path):
    prompt = make(tmp_path, WRITE_COMMIT, default="No comment")
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"


def test_prompt_hiding_default(tmp_path):
    prompt = make(tmp_path, QUIT, default="No comment", hide_default=True)
    assert prompt.prompt(default_prompt_config()) == "No comment"
    assert f"{COMMIT} [Enter to launch editor]" in prompt.stdout.getvalue()


def test_prompt_for_help(tmp_path):
    prompt = make(tmp_path, WRITE_COMMIT, typed="?\n", help="Describe your git commit")
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"
    out = prompt.stdout.getvalue()
    assert f"{COMMIT} [{HELP_INPUT} for help] [Enter to launch editor]" in out
    assert "Describe your git commit" in out


def test_append_default_with_emptied_file(tmp_path):
    prompt = make(tmp_path, TRUNCATE, default="No comment", append_default=True)
    assert prompt.prompt(default_prompt_config()) == ""


def test_append_default_places_default_in_file(tmp_path):
    prompt = make(tmp_path, APPEND, default="No comment", append_default=True)
    assert prompt.prompt(default_prompt_config()) == "No comment edited"


def test_editor_with_arguments(tmp_path):
    prompt = make(tmp_path, WRITE_COMMIT, extra_args=("--",))
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"


def test_prompt_again_starts_from_invalid_text(tmp_path):
    prompt = make(tmp_path, APPEND)
    assert prompt.prompt_again(default_prompt_config(), "draft", None) == "draft edited"


def test_file_name_pattern(tmp_path):
    prompt = make(tmp_path, WRITE_NAME, file_name="notes*.md")
    name = prompt.prompt(default_prompt_config())
    assert name.startswith("notes")
    assert name.endswith(".md")


def test_end_transmission_launches_editor(tmp_path):
    prompt = make(tmp_path, WRITE_COMMIT, typed="\x04")
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"


def test_interrupt_raises(tmp_path):
    prompt = make(tmp_path, WRITE_COMMIT, typed="\x03")
    with pytest.raises(KeyboardInterrupt):
        prompt.prompt(default_prompt_config())


def test_failing_editor_raises(tmp_path):
    prompt = make(tmp_path, FAIL)
    with pytest.raises(subprocess.CalledProcessError):
        prompt.prompt(default_prompt_config())


def test_cleanup_shows_received(tmp_path):
    prompt = Editor(message=COMMIT, stdout=io.StringIO())
    prompt.cleanup(default_prompt_config(), "whatever")
    assert f"{Q} {COMMIT} <Received>\n" in prompt.stdout.getvalue()


def test_default_editor_prefers_visual(monkeypatch):
    monkeypatch.setenv("VISUAL", "nano")
    monkeypatch.setenv("EDITOR", "emacs")
    assert default_editor() == "nano"


def test_default_editor_uses_editor(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.setenv("EDITOR", "emacs")
    assert default_editor() == "emacs"


def test_default_editor_fallback(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    expected = "notepad" if sys.platform.startswith("win") else "vim"
    assert default_editor() == expected