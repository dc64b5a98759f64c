"""Hidden text input for secrets."""

from __future__ import annotations

import getpass
from dataclasses import dataclass
from typing import Any

from .rendering import HELP_HINT_TEMPLATE, QUESTION_PREFIX_TEMPLATE, PromptConfig, Renderer, run_template

HIDDEN_QUESTION_TEMPLATE = QUESTION_PREFIX_TEMPLATE + " {{ color('reset') }}" + HELP_HINT_TEMPLATE


@dataclass(kw_only=True)
class Password(Renderer):
    """Like Input, but the typed text is hidden and there is no default."""

    message: str = ""
    help: str = ""

    def _read_hidden(self) -> str:
        stream = self._in
        isatty = getattr(stream, "isatty", None)
        if isatty is not None and isatty():
            return getpass.getpass("", stream=self._out)
        return self.read_line()

    def prompt(self, config: PromptConfig) -> str:
        """Ask for the secret and return it."""
        user_out, _ = run_template(HIDDEN_QUESTION_TEMPLATE, self._template_data(config))
        self._out.write(user_out)
        self._out.flush()

        if not self.help:
            return self._read_hidden()

        while True:
            line = self._read_hidden()
            if line != config.help_input:
                break
            # the terminal echoed a newline; go back up before redrawing
            self._previous_line()
            self.render(HIDDEN_QUESTION_TEMPLATE, self._template_data(config, show_help=True))

        self.append_rendered_text(config.hide_character * len(line))
        return line

    def cleanup(self, config: PromptConfig, val: Any) -> None:
        """Leave the screen as it is; the secret is never shown."""
        return None