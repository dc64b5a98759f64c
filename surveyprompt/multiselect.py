"""Choose any number of options from a filterable list."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from .rendering import Key, PromptConfig, Renderer, paginate
from .write import OptionAnswer, option_answer_list

MULTISELECT_QUESTION_TEMPLATE = (
    "{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} "
    "{{ help }}{{ color('reset') }}\n{% endif %}"
    "{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color('reset') }}"
    "{{ color('default+hb') }}{{ message }}{{ filter_message }}{{ color('reset') }}"
    "{% if show_answer %}{{ color('cyan') }} {{ answer }}{{ color('reset') }}\n"
    "{% else %}"
    "  {{ color('cyan') }}[Use arrows to move, space to select,"
    "{% if not config.remove_select_all %} <right> to all,{% endif %}"
    "{% if not config.remove_select_none %} <left> to none,{% endif %}"
    " type to filter"
    "{% if help and not show_help %}, {{ config.help_input }} for more help{% endif %}"
    "]{{ color('reset') }}\n"
    "{% for opt in page_entries %}"
    "{% if loop.index0 == selected_index %}"
    "{{ color(config.icons.select_focus.format) }}{{ config.icons.select_focus.text }}"
    "{{ color('reset') }}{% else %} {% endif %}"
    "{% if checked and checked.get(opt.index) %}"
    "{{ color(config.icons.marked_option.format) }} {{ config.icons.marked_option.text }} "
    "{% else %}"
    "{{ color(config.icons.unmarked_option.format) }} {{ config.icons.unmarked_option.text }} "
    "{% endif %}"
    "{{ color('reset') }} {{ opt.value }}"
    "{% set desc = description(opt.value, opt.index) if description else '' %}"
    "{% if desc != '' %} - {{ color('cyan') }}{{ desc }}{{ color('reset') }}{% endif %}\n"
    "{% endfor %}"
    "{% endif %}"
)

_SAVE_CURSOR = "\x1b7"
_RESTORE_CURSOR = "\x1b8"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"


@dataclass(kw_only=True)
class MultiSelect(Renderer):
    """Pick options with the arrow keys and space; the answer is a list of OptionAnswers."""

    message: str = ""
    options: list[str] = field(default_factory=list)
    default: Sequence[str] | Sequence[int] | None = None
    help: str = ""
    page_size: int = 0
    vim_mode: bool = False
    filter_message: str = ""
    filter: Callable[[str, str, int], bool] | None = None
    description: Callable[[str, int], str] | None = None
    _filter_value: str = field(default="", init=False, repr=False)
    _selected_index: int = field(default=0, init=False, repr=False)
    _checked: dict[int, bool] = field(default_factory=dict, init=False, repr=False)
    _showing_help: bool = field(default=False, init=False, repr=False)

    def _data(self, config: PromptConfig, **extra: Any) -> dict[str, Any]:
        return {
            "message": self.message,
            "filter_message": self.filter_message,
            "help": self.help,
            "checked": self._checked,
            "show_help": self._showing_help,
            "description": self.description,
            "config": config,
            **extra,
        }

    def _page_size(self, config: PromptConfig) -> int:
        return self.page_size or config.page_size

    def filter_options(self, config: PromptConfig) -> list[OptionAnswer]:
        """The options that pass the current filter, with their original positions."""
        if not self._filter_value:
            return option_answer_list(self.options)
        predicate = self.filter or config.filter
        return [
            OptionAnswer(value=opt, index=i)
            for i, opt in enumerate(self.options)
            if predicate(self._filter_value, opt, i)
        ]

    def on_change(self, key: str, config: PromptConfig) -> None:
        """Apply one keypress and redraw the list."""
        options = self.filter_options(config)
        old_filter = self._filter_value

        if key == Key.ARROW_UP or (self.vim_mode and key == "k"):
            if self._selected_index == 0:
                self._selected_index = len(options) - 1
            else:
                self._selected_index -= 1
        elif key in (Key.TAB, Key.ARROW_DOWN) or (self.vim_mode and key == "j"):
            if self._selected_index == len(options) - 1:
                self._selected_index = 0
            else:
                self._selected_index += 1
        elif key == Key.SPACE:
            if self._selected_index < len(options):
                chosen = options[self._selected_index]
                self._checked[chosen.index] = not self._checked.get(chosen.index, False)
                if not config.keep_filter:
                    self._filter_value = ""
        elif key == config.help_input and self.help:
            self._showing_help = True
        elif key == Key.ESCAPE:
            self.vim_mode = not self.vim_mode
        elif key in (Key.DELETE_WORD, Key.DELETE_LINE):
            self._filter_value = ""
        elif key in (Key.DELETE, Key.BACKSPACE):
            if self._filter_value:
                self._filter_value = self._filter_value[:-1]
        elif key >= " ":
            self._filter_value += key
            self.vim_mode = False
        elif not config.remove_select_all and key == Key.ARROW_RIGHT:
            for opt in options:
                self._checked[opt.index] = True
            if not config.keep_filter:
                self._filter_value = ""
        elif not config.remove_select_none and key == Key.ARROW_LEFT:
            for opt in options:
                self._checked[opt.index] = False
            if not config.keep_filter:
                self._filter_value = ""

        self.filter_message = f" {self._filter_value}" if self._filter_value else ""
        if old_filter != self._filter_value:
            options = self.filter_options(config)
            if options and len(options) <= self._selected_index:
                self._selected_index = len(options) - 1

        entries, index = paginate(self._page_size(config), options, self._selected_index)
        self.render(
            MULTISELECT_QUESTION_TEMPLATE,
            self._data(config, selected_index=index, page_entries=entries),
        )

    def _apply_default(self) -> None:
        self._checked = {}
        for item in self.default or ():
            if isinstance(item, str):
                if item in self.options:
                    self._checked[self.options.index(item)] = True
            else:
                self._checked[item] = True

    def prompt(self, config: PromptConfig) -> list[OptionAnswer]:
        """Show the list and return the checked options once enter is pressed."""
        self._apply_default()
        if not self.options:
            raise ValueError("please provide options to select from")

        entries, index = paginate(
            self._page_size(config), option_answer_list(self.options), self._selected_index
        )
        out = self._out
        out.write(_SAVE_CURSOR + _HIDE_CURSOR)
        try:
            self.render(
                MULTISELECT_QUESTION_TEMPLATE,
                self._data(config, selected_index=index, page_entries=entries),
            )
            while True:
                key = self.read_key()
                if key in (Key.ENTER, "\n", Key.END_TRANSMISSION):
                    break
                self.on_change(key, config)
        finally:
            out.write(_SHOW_CURSOR + _RESTORE_CURSOR)
            out.flush()

        self._filter_value = ""
        self.filter_message = ""
        return [
            OptionAnswer(value=opt, index=i)
            for i, opt in enumerate(self.options)
            if self._checked.get(i)
        ]

    def cleanup(self, config: PromptConfig, val: list[OptionAnswer]) -> None:
        """Replace the list with a one-line summary of the answer."""
        answer = ", ".join(opt.value for opt in val)
        self.render(
            MULTISELECT_QUESTION_TEMPLATE,
            self._data(
                config,
                selected_index=self._selected_index,
                answer=answer,
                show_answer=True,
            ),
        )