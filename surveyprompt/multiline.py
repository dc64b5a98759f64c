"""Free text spanning several lines, finished by two empty lines."""

from __future__ import annotations

from dataclasses import dataclass

from .rendering import DEFAULT_HINT_TEMPLATE, QUESTION_PREFIX_TEMPLATE, PromptConfig, Renderer

MULTILINE_QUESTION_TEMPLATE = (
    QUESTION_PREFIX_TEMPLATE
    + " {{ color('reset') }}"
    "{% if show_answer %}"
    "\n{{ color('cyan') }}{{ answer }}{{ color('reset') }}"
    "{% if answer %}\n{% endif %}"
    "{% else %}"
    + DEFAULT_HINT_TEMPLATE
    + "{{ color('cyan') }}[Enter 2 empty lines to finish]{{ color('reset') }}"
    "{% endif %}"
)


@dataclass(kw_only=True)
class Multiline(Renderer):
    """Reads lines until two consecutive empty ones; the answer is a string."""

    message: str = ""
    default: str = ""
    help: str = ""

    def _erase_input(self, count: int) -> None:
        self._previous_line(count)
        self._out.write("\x1b[2K\x1b[1E" * count)
        self._previous_line(count)
        self._out.flush()

    def prompt(self, config: PromptConfig) -> str:
        """Collect lines and return them joined, or the default when empty."""
        self.render(MULTILINE_QUESTION_TEMPLATE, self._template_data(config))

        lines: list[str] = []
        empty_once = False
        while True:
            line = self.read_line()
            if line == "":
                if empty_once:
                    self._erase_input(len(lines) + 2)
                    break
                empty_once = True
            else:
                empty_once = False
            lines.append(line)

        value = "\n".join(lines).strip()
        if not value:
            return self.default
        self.append_rendered_text(value)
        return value

    def cleanup(self, config: PromptConfig, val: str) -> None:
        """Redraw the question with the final text below it."""
        self.render(
            MULTILINE_QUESTION_TEMPLATE,
            self._template_data(config, answer=val, show_answer=True),
        )