"""Prompt that opens the user's text editor on a temporary file."""

from __future__ import annotations

import contextlib
import os
import shlex
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from .rendering import Key, PromptConfig, Renderer

EDITOR_QUESTION_TEMPLATE = (
    "{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} "
    "{{ help }}{{ color('reset') }}\n{% endif %}"
    "{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color('reset') }}"
    "{{ color('default+hb') }}{{ message }} {{ color('reset') }}"
    "{% if show_answer %}"
    "{{ color('cyan') }}{{ answer }}{{ color('reset') }}\n"
    "{% else %}"
    "{% if help and not show_help %}{{ color('cyan') }}[{{ config.help_input }} for help]"
    "{{ color('reset') }} {% endif %}"
    "{% if default and not hide_default %}{{ color('white') }}({{ default }}) "
    "{{ color('reset') }}{% endif %}"
    "{{ color('cyan') }}[Enter to launch editor] {{ color('reset') }}"
    "{% endif %}"
)

BOM = b"\xef\xbb\xbf"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"


def default_editor() -> str:
    """The editor from $VISUAL or $EDITOR, else notepad on Windows and vim elsewhere."""
    visual = os.environ.get("VISUAL", "")
    if visual:
        return visual
    editor = os.environ.get("EDITOR", "")
    if editor:
        return editor
    return "notepad" if sys.platform.startswith("win") else "vim"


def _passable(stream: TextIO | None) -> TextIO | None:
    """Return the stream if a child process can use it, else None to inherit."""
    if stream is None:
        return None
    try:
        stream.fileno()
    except (AttributeError, OSError):
        return None
    return stream


@dataclass(kw_only=True)
class Editor(Renderer):
    """Launches an editor on enter; the answer is the saved text."""

    message: str = ""
    default: str = ""
    help: str = ""
    editor: str = ""
    hide_default: bool = False
    append_default: bool = False
    file_name: str = ""

    def _data(self, config: PromptConfig, **extra: Any) -> dict[str, Any]:
        return {
            "message": self.message,
            "default": self.default,
            "help": self.help,
            "hide_default": self.hide_default,
            "config": config,
            **extra,
        }

    def prompt(self, config: PromptConfig) -> str:
        """Wait for enter, open the editor and return what was saved."""
        initial = self.default if self.default and self.append_default else ""
        return self._prompt(initial, config)

    def prompt_again(self, config: PromptConfig, invalid: str, err: Exception | None) -> str:
        """Reopen the editor with the rejected text so it can be fixed."""
        return self._prompt(invalid, config)

    def _wait_for_launch(self, config: PromptConfig) -> None:
        while True:
            key = self.read_key()
            if key in ("\r", "\n") or key == Key.END_TRANSMISSION:
                return
            if key == config.help_input and self.help:
                self.render(EDITOR_QUESTION_TEMPLATE, self._data(config, show_help=True))

    def _prompt(self, initial_value: str, config: PromptConfig) -> str:
        self.render(EDITOR_QUESTION_TEMPLATE, self._data(config))
        out = self._out
        out.write(_HIDE_CURSOR)
        out.flush()
        try:
            self._wait_for_launch(config)
            return self._edit(initial_value)
        finally:
            out.write(_SHOW_CURSOR)
            out.flush()

    def _edit(self, initial_value: str) -> str:
        prefix, star, suffix = (self.file_name or "survey*.txt").rpartition("*")
        if not star:
            prefix, suffix = suffix, ""
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        try:
            # A BOM makes editors such as notepad pick UTF-8 for an otherwise empty file.
            with os.fdopen(fd, "wb") as handle:
                handle.write(BOM)
                handle.write(initial_value.encode("utf-8"))

            args = shlex.split(self.editor or default_editor())
            if not args:
                raise ValueError("no editor configured")
            args.append(path)

            self._out.write(_SHOW_CURSOR)
            self._out.flush()
            subprocess.run(
                args,
                stdin=_passable(self._in),
                stdout=_passable(self._out),
                stderr=_passable(self.stderr if self.stderr is not None else sys.stderr),
                check=True,
            )
            raw = Path(path).read_bytes()
        finally:
            with contextlib.suppress(OSError):
                os.remove(path)

        text = raw.removeprefix(BOM).decode("utf-8")
        if not text and not self.append_default:
            return self.default
        return text

    def cleanup(self, config: PromptConfig, val: Any) -> None:
        """Redraw the question noting that text was received."""
        self.render(
            EDITOR_QUESTION_TEMPLATE,
            self._data(config, answer="<Received>", show_answer=True),
        )