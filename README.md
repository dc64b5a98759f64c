# surveyprompt

Interactive prompts for terminal programs. Each prompt draws a question and
reads the answer from the keyboard. A separate helper stores the answer in a
dictionary or an object.

## Installation

```
pip install surveyprompt
```

## Prompts

Each prompt class is a dataclass that takes keyword arguments. You can also pass
`stdin`, `stdout` and `stderr` streams. When you leave them out, the prompt uses
the process's standard streams.

| Class                                | Answer               | What the user does                                                          |
|--------------------------------------|----------------------|-----------------------------------------------------------------------------|
| `surveyprompt.input.Input`           | `str`                | Types a line. With `suggest` set, Tab lists completions to pick from.        |
| `surveyprompt.confirm.Confirm`       | `bool`               | Answers `y`/`yes` or `n`/`no` in any case. An empty line gives `default`.    |
| `surveyprompt.password.Password`     | `str`                | Types a line. The line is not echoed when the input is a terminal.          |
| `surveyprompt.multiline.Multiline`   | `str`                | Types several lines and ends with two empty lines.                          |
| `surveyprompt.editor.Editor`         | `str`                | Presses Enter to open an editor on a temporary file.                        |
| `surveyprompt.multiselect.MultiSelect` | `list[OptionAnswer]` | Moves with the arrows, toggles with space, and types to filter.           |

All prompts work the same way:

- `prompt(config)` asks the question and returns the answer.
- `cleanup(config, val)` redraws the question with the final answer. `Password.cleanup` draws nothing.

If a prompt has a `help` text, typing `config.help_input` (`?` by default) shows
that text. `Multiline` is the exception: it treats `?` as ordinary text.

Special keys:

- Ctrl-C raises `KeyboardInterrupt` in the prompts that read single keys: `Input`, `Editor` and `MultiSelect`.
- The end of input raises `EOFError`.

```python
from surveyprompt.confirm import Confirm
from surveyprompt.rendering import default_prompt_config

config = default_prompt_config()
question = Confirm(message="Is pizza your favorite food?", default=True)
answer = question.prompt(config)
question.cleanup(config, answer)
```

```python
from surveyprompt.multiselect import MultiSelect
from surveyprompt.rendering import default_prompt_config

config = default_prompt_config()
days = MultiSelect(
    message="What days do you prefer:",
    options=["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
    default=["Tuesday", "Thursday"],
)
picked = days.prompt(config)
print([answer.value for answer in picked])
```

### Prompt details

- **Input.** `suggest` is a function from the typed text to a list of completions.
  - When there is one suggestion, it replaces the text.
  - When there are several, they are listed. Arrow Up, Arrow Down and Tab move through the list, Enter accepts the current one, and Escape returns to the typed text.
  - An empty answer gives `default`.
- **Editor.** The editor command is taken from the first of these that is set:
  1. The `editor` field.
  2. `default_editor()`, which reads `$VISUAL`, then `$EDITOR`.
  3. `notepad` on Windows, or `vim` elsewhere.

  The command is split with shell rules. The temporary file:
  - is named from `file_name` (default `survey*.txt`);
  - starts with a UTF-8 byte-order mark, which is stripped when the file is read back;
  - contains `default` first when `append_default` is set.

  If the saved text is empty and `append_default` is not set, the answer is `default`. `hide_default` keeps the default out of the question line. `prompt_again(config, invalid, err)` reopens the editor on rejected text.
- **MultiSelect.** `default` may be a list of option strings or a list of indices.
  - `filter` replaces the configured filter. It receives the filter text, the option and the option's index.
  - `description` adds text after each option.
  - `page_size` overrides `config.page_size`.
  - `vim_mode` enables `j`/`k`. Escape toggles it.
  - Right selects all visible options and Left clears them.
  - Selecting an option clears the filter unless `config.keep_filter` is set.
  - With no options, `prompt` raises `ValueError`.

## Configuration

`surveyprompt.rendering.PromptConfig` holds the shared settings. `default_prompt_config()` returns one with these defaults:

| Field                | Default                        |
|----------------------|--------------------------------|
| `page_size`          | `7`                            |
| `icons`              | `IconSet`                      |
| `help_input`         | `"?"`                          |
| `suggest_input`      | `"esc"`                        |
| `filter`             | `default_filter`               |
| `keep_filter`        | `False`                        |
| `show_cursor`        | `False`                        |
| `remove_select_all`  | `False`                        |
| `remove_select_none` | `False`                        |
| `hide_character`     | `"*"`                          |

`default_filter` matches a substring without regard to case. An `IconSet` holds one `Icon` (text and style) for each of:

- help
- error
- question
- marked option
- unmarked option
- select focus

## Templates and colour

Prompts are drawn from Jinja2 templates.

- `run_template(tmpl, data)` returns two strings: the user-facing output and a colour-free layout copy.
- Templates call `color(style)` for ANSI codes. `color_code("green+hb")` gives the raw escape sequence.
- `colors_enabled()` reports whether colour is on. It is off when:
  - `surveyprompt.rendering.DISABLE_COLOR` is `True`, or
  - `NO_COLOR` is set, or
  - `CLICOLOR` is `0` — unless `CLICOLOR_FORCE` is set to anything other than `0`.

## Storing answers

`surveyprompt.write.write_answer(target, name, value)` puts an answer into a target. What it does depends on the target:

- **`Settable` objects** (anything with a `write_answer(name, value)` method) handle the answer themselves.
- **Mutable mappings** store the value unchanged under `name`.
- **Objects and dataclasses:**
  1. The field is found by its dataclass metadata tag `"survey"` first, then by its name, ignoring case.
  2. If no field matches, `FieldNotMatchError` is raised. `is_field_not_match(err)` returns the unmatched name.
  3. The value is converted to the field's annotated type with `convert`.

`convert` handles these cases:

- Strings become `bool`, `int`, `float` or `datetime.timedelta`. Durations are written like `30s` or `1h30m`.
- An `OptionAnswer` gives its `value` to `str` fields and its `index` to `int` fields.
- Lists and tuples are converted item by item.
- Values that cannot be converted raise `TypeError` or `ValueError`.

```python
from dataclasses import dataclass, field
from datetime import timedelta
from surveyprompt.write import write_answer

@dataclass
class Answers:
    name: str = ""
    age: int = 0
    timeout: timedelta = timedelta(0)
    username: str = field(default="", metadata={"survey": "login"})

answers = Answers()
write_answer(answers, "name", "Bob")
write_answer(answers, "age", "22")
write_answer(answers, "timeout", "30s")
write_answer(answers, "login", "bob")
```

## What is not included

The package provides individual prompts and the answer-writing helper. It does not provide:

- a routine that runs a list of questions with validators and transforms;
- a single-choice select prompt;
- a command-line program.

To handle several questions, call `prompt`, `cleanup` and `write_answer` yourself for each one.

## Running the tests

```
pip install -e .[test]
pytest
```