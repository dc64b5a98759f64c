"""Template rendering, colours, icons, prompt configuration and terminal I/O."""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Mapping, Sequence, TextIO, TypeVar

import jinja2

T = TypeVar("T")

# Set to True to strip colour codes from user-facing output (useful in tests).
DISABLE_COLOR = False


class Key(str, Enum):
    """Characters the prompts react to."""

    ARROW_LEFT = "\x02"
    ARROW_RIGHT = "\x06"
    ARROW_UP = "\x10"
    ARROW_DOWN = "\x0e"
    SPACE = " "
    ENTER = "\r"
    BACKSPACE = "\b"
    DELETE = "\x7f"
    INTERRUPT = "\x03"
    END_TRANSMISSION = "\x04"
    ESCAPE = "\x1b"
    DELETE_WORD = "\x17"
    DELETE_LINE = "\x18"
    TAB = "\t"


_COLORS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "default": 9,
}
_RESET = "\x1b[0m"

# Template fragments shared by the prompts.
HELP_LINE_TEMPLATE = (
    "{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} "
    "{{ help }}{{ color('reset') }}\n{% endif %}"
)
QUESTION_PREFIX_TEMPLATE = (
    HELP_LINE_TEMPLATE
    + "{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color('reset') }}"
    "{{ color('default+hb') }}{{ message }}"
)
HELP_HINT_TEMPLATE = (
    "{% if help and not show_help %}{{ color('cyan') }}[{{ config.help_input }} for help]"
    "{{ color('reset') }} {% endif %}"
)
DEFAULT_HINT_TEMPLATE = (
    "{% if default %}{{ color('white') }}({{ default }}) {{ color('reset') }}{% endif %}"
)


def color_code(style: str) -> str:
    """Return the ANSI escape sequence for a style such as ``"green+hb:black"``."""
    if style == "":
        return ""
    if style == "reset":
        return _RESET
    fg_part, _, bg_part = style.partition(":")
    fg, _, fg_attrs = fg_part.partition("+")
    bg, _, bg_attrs = bg_part.partition("+")

    codes: list[str] = []
    for attr, code in (("b", "1"), ("B", "5"), ("u", "4"), ("i", "7"), ("s", "9"), ("d", "2")):
        if attr in fg_attrs:
            codes.append(code)
    fg_base = 90 if "h" in fg_attrs else 30
    if fg.isdigit():
        codes.append(f"38;5;{fg}")
    elif fg in _COLORS:
        codes.append(str(fg_base + _COLORS[fg]))

    bg_base = 100 if "h" in bg_attrs else 40
    if bg.isdigit():
        codes.append(f"48;5;{bg}")
    elif bg in _COLORS:
        codes.append(str(bg_base + _COLORS[bg]))

    if not codes:
        return ""
    return "\x1b[" + ";".join(codes) + "m"


def _color_function(colored: bool) -> Callable[[str], str]:
    def color(style: str) -> str:
        return color_code(style) if colored else ""

    return color


def _env_color_disabled() -> bool:
    return os.environ.get("NO_COLOR", "") != "" or os.environ.get("CLICOLOR") == "0"


def _env_color_forced() -> bool:
    value = os.environ.get("CLICOLOR_FORCE")
    return value is not None and value != "0"


def colors_enabled() -> bool:
    """Whether user-facing output should carry colour codes."""
    if DISABLE_COLOR:
        return False
    return not (_env_color_disabled() and not _env_color_forced())


def _make_template(tmpl: str, colored: bool) -> jinja2.Template:
    env = jinja2.Environment(keep_trailing_newline=True, autoescape=False)
    env.globals["color"] = _color_function(colored)
    return env.from_string(tmpl)


_template_cache: dict[tuple[str, bool], tuple[jinja2.Template, jinja2.Template]] = {}
_template_lock = threading.Lock()


def get_template_pair(tmpl: str) -> tuple[jinja2.Template, jinja2.Template]:
    """Compile a template twice: for the user (maybe coloured) and for layout (never)."""
    colored = colors_enabled()
    key = (tmpl, colored)
    with _template_lock:
        cached = _template_cache.get(key)
    if cached is not None:
        return cached
    layout = _make_template(tmpl, False)
    user = _make_template(tmpl, True) if colored else layout
    pair = (user, layout)
    with _template_lock:
        _template_cache[key] = pair
    return pair


def run_template(tmpl: str, data: Mapping[str, Any]) -> tuple[str, str]:
    """Render a template, returning the user-facing and layout strings."""
    user, layout = get_template_pair(tmpl)
    return user.render(**data), layout.render(**data)


@dataclass(frozen=True)
class Icon:
    text: str
    format: str


@dataclass
class IconSet:
    help: Icon = field(default_factory=lambda: Icon("?", "cyan"))
    error: Icon = field(default_factory=lambda: Icon("X", "red"))
    question: Icon = field(default_factory=lambda: Icon("?", "green+hb"))
    marked_option: Icon = field(default_factory=lambda: Icon("[x]", "green"))
    unmarked_option: Icon = field(default_factory=lambda: Icon("[ ]", "default+hb"))
    select_focus: Icon = field(default_factory=lambda: Icon(">", "cyan+b"))


def default_icons() -> IconSet:
    """The icon set used when none is configured."""
    return IconSet()


def default_filter(filter_value: str, option: str, index: int) -> bool:
    """Case-insensitive substring match."""
    return filter_value.lower() in option.lower()


@dataclass
class PromptConfig:
    page_size: int = 7
    icons: IconSet = field(default_factory=default_icons)
    help_input: str = "?"
    suggest_input: str = "esc"
    filter: Callable[[str, str, int], bool] = default_filter
    keep_filter: bool = False
    show_cursor: bool = False
    remove_select_all: bool = False
    remove_select_none: bool = False
    hide_character: str = "*"


def default_prompt_config() -> PromptConfig:
    """A fresh configuration with the standard defaults."""
    return PromptConfig()


def paginate(page_size: int, choices: Sequence[T], selected: int) -> tuple[list[T], int]:
    """Return the visible page of ``choices`` and the selection's index within it."""
    total = len(choices)
    half = page_size // 2
    if total < page_size:
        start, end, cursor = 0, total, selected
    elif selected < half:
        start, end, cursor = 0, page_size, selected
    elif total - selected - 1 < half:
        start, end = total - page_size, total
        cursor = selected - start
    else:
        start = selected - half
        end = selected + (page_size - half)
        cursor = half
    return list(choices[start:end]), cursor


_ERROR_TEMPLATE = (
    "{{ color(icons.error.format) }}{{ icons.error.text }} "
    "Sorry, your reply was invalid: {{ error }}{{ color('reset') }}\n"
)

_STREAM_FIELDS = frozenset({"stdin", "stdout", "stderr"})


@dataclass
class Renderer:
    """Base for prompts: draws templates and reads from the terminal streams."""

    stdin: TextIO | None = field(default=None, repr=False, compare=False)
    stdout: TextIO | None = field(default=None, repr=False, compare=False)
    stderr: TextIO | None = field(default=None, repr=False, compare=False)
    _rendered_lines: int = field(default=0, init=False, repr=False, compare=False)

    @property
    def _in(self) -> TextIO:
        return self.stdin if self.stdin is not None else sys.stdin

    @property
    def _out(self) -> TextIO:
        return self.stdout if self.stdout is not None else sys.stdout

    def _template_data(self, config: PromptConfig, **extra: Any) -> dict[str, Any]:
        """The prompt's public fields plus ``config`` and ``extra``, for templates."""
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.init and f.name not in _STREAM_FIELDS and not f.name.startswith("_")
        }
        data["config"] = config
        data.update(extra)
        return data

    def _previous_line(self, count: int = 1) -> None:
        self._out.write(f"\x1b[{count}F")

    def _erase_previous(self) -> None:
        if self._rendered_lines <= 0:
            return
        self._out.write("\x1b[2K\x1b[1A" * self._rendered_lines + "\x1b[2K\r")
        self._rendered_lines = 0

    def render(self, tmpl: str, data: Mapping[str, Any]) -> None:
        """Replace whatever was drawn last with the rendered template."""
        user, layout = run_template(tmpl, data)
        self._erase_previous()
        self._out.write(user)
        self._out.flush()
        self._rendered_lines = layout.count("\n")

    def append_rendered_text(self, text: str) -> None:
        """Account for text echoed after the last render so it is erased too."""
        self._rendered_lines += text.count("\n") + 1

    def _show_error(self, config: PromptConfig, message: str) -> None:
        user, _ = run_template(_ERROR_TEMPLATE, {"icons": config.icons, "error": message})
        self._erase_previous()
        self._out.write(user)
        self._out.flush()

    def read_line(self) -> str:
        """Read one line without its terminator; EOFError at end of input."""
        line = self._in.readline()
        if line == "":
            raise EOFError("end of input")
        return line.rstrip("\r\n")

    def read_key(self) -> str:
        """Read a single character; KeyboardInterrupt on Ctrl-C, EOFError at end."""
        char = self._in.read(1)
        if char == "":
            raise EOFError("end of input")
        if char == Key.INTERRUPT:
            raise KeyboardInterrupt
        return char