"""Yes/no question whose answer is a bool."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from .rendering import HELP_HINT_TEMPLATE, QUESTION_PREFIX_TEMPLATE, PromptConfig, Renderer

CONFIRM_QUESTION_TEMPLATE = (
    QUESTION_PREFIX_TEMPLATE
    + " {{ color('reset') }}"
    "{% if answer %}"
    "{{ color('cyan') }}{{ answer }}{{ color('reset') }}\n"
    "{% else %}"
    + HELP_HINT_TEMPLATE
    + "{{ color('white') }}{% if default %}(Y/n) {% else %}(y/N) {% endif %}{{ color('reset') }}"
    "{% endif %}"
)

_YES = re.compile(r"y(?:es)?", re.IGNORECASE)
_NO = re.compile(r"n(?:o)?", re.IGNORECASE)


def yes_no(value: bool) -> str:
    """The word shown for a confirmed answer; the answer must be a bool."""
    if not isinstance(value, bool):
        raise TypeError(f"expected a bool answer, got {type(value).__name__}")
    return "Yes" if value else "No"


@dataclass(kw_only=True)
class Confirm(Renderer):
    """A text input that accepts yes or no; the answer is a bool."""

    message: str = ""
    default: bool = False
    help: str = ""

    def _read_answer(self, config: PromptConfig) -> bool:
        show_help = False
        while True:
            value = self.read_line()
            # step back over the newline echoed by the terminal
            self._previous_line()
            if _YES.fullmatch(value):
                return True
            if _NO.fullmatch(value):
                return False
            if value == "":
                return self.default
            if value == config.help_input and self.help:
                show_help = True
                self.render(CONFIRM_QUESTION_TEMPLATE, self._template_data(config, show_help=True))
                continue
            quoted = json.dumps(value, ensure_ascii=False)
            self._show_error(config, f"{quoted} is not a valid answer, please try again.")
            self.render(CONFIRM_QUESTION_TEMPLATE, self._template_data(config, show_help=show_help))

    def prompt(self, config: PromptConfig) -> bool:
        """Ask the question and wait for a yes or no."""
        self.render(CONFIRM_QUESTION_TEMPLATE, self._template_data(config))
        return self._read_answer(config)

    def cleanup(self, config: PromptConfig, val: bool) -> None:
        """Redraw the question with the final answer."""
        self.render(CONFIRM_QUESTION_TEMPLATE, self._template_data(config, answer=yes_no(val)))