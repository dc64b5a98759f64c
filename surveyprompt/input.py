"""Single-line text input with optional tab completion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from .rendering import Key, PromptConfig, Renderer, paginate
from .write import OptionAnswer, option_answer_list

_HELP_LINE = (
    "{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} "
    "{{ help }}{{ color('reset') }}\n{% endif %}"
)

INPUT_QUESTION_TEMPLATE = (
    _HELP_LINE
    + "{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color('reset') }}"
    "{{ color('default+hb') }}{{ message }} {{ color('reset') }}"
    "{% if show_answer %}"
    "{{ color('cyan') }}{{ answer }}{{ color('reset') }}\n"
    "{% elif page_entries %}"
    "{{ answer }} [Use arrows to move, enter to select, type to continue]\n"
    "{% for choice in page_entries %}"
    "{% if loop.index0 == selected_index %}"
    "{{ color(config.icons.select_focus.format) }}{{ config.icons.select_focus.text }} "
    "{% else %}{{ color('default') }}  {% endif %}"
    "{{ choice.value }}{{ color('reset') }}\n"
    "{% endfor %}"
    "{% else %}"
    "{% if (help and not show_help) or suggest %}{{ color('cyan') }}["
    "{% if help and not show_help %}{{ config.help_input }} for help"
    "{% if suggest %}, {% endif %}{% endif %}"
    "{% if suggest %}{{ color('cyan') }}{{ config.suggest_input }} for suggestions{% endif %}"
    "]{{ color('reset') }} {% endif %}"
    "{% if default %}{{ color('white') }}({{ default }}) {{ color('reset') }}{% endif %}"
    "{% endif %}"
)

_SAVE_CURSOR = "\x1b7"
_RESTORE_CURSOR = "\x1b8"
_CLEAR_TO_END = "\x1b[0K"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"


def _printable(key: str) -> bool:
    return key >= " " and key != Key.DELETE


@dataclass(kw_only=True)
class Input(Renderer):
    """A text input echoed as typed and accepted with enter; the answer is a string."""

    message: str = ""
    default: str = ""
    help: str = ""
    suggest: Callable[[str], list[str]] | None = None
    _answer: str = field(default="", init=False, repr=False)
    _typed_answer: str = field(default="", init=False, repr=False)
    _options: list[OptionAnswer] | None = field(default=None, init=False, repr=False)
    _selected_index: int = field(default=0, init=False, repr=False)
    _showing_help: bool = field(default=False, init=False, repr=False)

    def _data(self, config: PromptConfig, **extra: Any) -> dict[str, Any]:
        return {
            "message": self.message,
            "default": self.default,
            "help": self.help,
            "suggest": self.suggest is not None,
            "config": config,
            **extra,
        }

    def on_key(self, key: str, line: str, config: PromptConfig) -> tuple[str, bool] | None:
        """Handle suggestion keys.

        Returns None when the key belongs to ordinary line editing, otherwise the
        text to continue with and whether the answer is now accepted.
        """
        options = self._options
        if options is not None and key in (Key.ENTER, "\n"):
            return self._answer, True
        if options is not None and key == Key.ESCAPE:
            self._answer = self._typed_answer
            self._options = None
        elif key == Key.ARROW_UP and options:
            if self._selected_index == 0:
                self._selected_index = len(options) - 1
            else:
                self._selected_index -= 1
            self._answer = options[self._selected_index].value
        elif key in (Key.ARROW_DOWN, Key.TAB) and options:
            if self._selected_index == len(options) - 1:
                self._selected_index = 0
            else:
                self._selected_index += 1
            self._answer = options[self._selected_index].value
        elif key == Key.TAB and self.suggest is not None:
            self._answer = line
            self._typed_answer = line
            suggestions = list(self.suggest(line))
            self._selected_index = 0
            if not suggestions:
                return None
            self._answer = suggestions[0]
            if len(suggestions) == 1:
                self._typed_answer = self._answer
                self._options = None
            else:
                self._options = option_answer_list(suggestions)
        else:
            if options is None:
                return None
            if _printable(key):
                self._answer += key
            self._typed_answer = self._answer
            self._options = None

        entries, index = paginate(config.page_size, self._options or [], self._selected_index)
        self.render(
            INPUT_QUESTION_TEMPLATE,
            self._data(
                config,
                answer=self._answer,
                show_help=self._showing_help,
                selected_index=index,
                page_entries=entries,
            ),
        )
        return self._typed_answer, False

    def _echo(self, chars: list[str], pos: int) -> None:
        back = len(chars) - pos
        self._out.write(
            _RESTORE_CURSOR + _CLEAR_TO_END + "".join(chars) + (f"\x1b[{back}D" if back else "")
        )
        self._out.flush()

    def _edit(self, initial: str, config: PromptConfig) -> tuple[str, bool]:
        chars = list(initial)
        pos = len(chars)
        self._out.write(_SAVE_CURSOR)
        self._echo(chars, pos)
        while True:
            key = self.read_key()
            handled = self.on_key(key, "".join(chars), config)
            if handled is not None:
                text, done = handled
                if done:
                    self._out.write("\n")
                return text, done
            if key in (Key.ENTER, "\n"):
                self._out.write("\n")
                return "".join(chars), True
            if key == Key.END_TRANSMISSION:
                raise EOFError("end of input")
            if key in (Key.BACKSPACE, Key.DELETE):
                if pos > 0:
                    del chars[pos - 1]
                    pos -= 1
            elif key == Key.ARROW_LEFT:
                pos = max(0, pos - 1)
            elif key == Key.ARROW_RIGHT:
                pos = min(len(chars), pos + 1)
            elif _printable(key):
                chars.insert(pos, key)
                pos += 1
            else:
                continue
            self._echo(chars, pos)

    def _read_answer(self, config: PromptConfig) -> str:
        line = ""
        while True:
            if self._options is not None:
                line = ""
            line, accepted = self._edit(line, config)
            if accepted:
                return line

    def prompt(self, config: PromptConfig) -> str:
        """Ask the question and return the typed text, or the default when empty."""
        while True:
            self.render(INPUT_QUESTION_TEMPLATE, self._data(config, show_help=self._showing_help))
            if not config.show_cursor:
                self._out.write(_HIDE_CURSOR)
            try:
                line = self._read_answer(config)
            finally:
                if not config.show_cursor:
                    self._out.write(_SHOW_CURSOR)
                    self._out.flush()
            self._answer = line
            self.append_rendered_text(line)
            if line == config.help_input and self.help:
                self._showing_help = True
                continue
            break

        if not line:
            return self.default
        return line

    def cleanup(self, config: PromptConfig, val: str) -> None:
        """Redraw the question with the final answer."""
        self.render(INPUT_QUESTION_TEMPLATE, self._data(config, show_answer=True, answer=val))