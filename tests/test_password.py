import io

import pytest

from surveyprompt import rendering
from surveyprompt.password import HIDDEN_QUESTION_TEMPLATE, Password
from surveyprompt.rendering import PromptConfig, default_icons, default_prompt_config

MESSAGE = "Please type your password"
TYPED = "password"
Q = default_icons().question.text
H = default_icons().help.text


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setattr(rendering, "DISABLE_COLOR", True)


def make(typed, **kwargs):
    return Password(message=MESSAGE, stdin=io.StringIO(typed), stdout=io.StringIO(), **kwargs)


@pytest.mark.parametrize(
    "typed, kwargs, config, expected",
    [
        (TYPED + "\n", {}, default_prompt_config(), TYPED),
        ("?\n", {}, default_prompt_config(), "?"),
        ("?\n" + TYPED + "\n", {"help": "Anything goes"}, default_prompt_config(), TYPED),
        ("h\n" + TYPED + "\n", {"help": "Anything goes"}, PromptConfig(help_input="h"), TYPED),
    ],
)
def test_prompt_returns_answer(typed, kwargs, config, expected):
    prompt = make(typed, **kwargs)
    assert prompt.prompt(config) == expected
    assert f"{Q} {MESSAGE} " in prompt.stdout.getvalue()


def test_help_hint_shown_when_help_present():
    prompt = make(TYPED + "\n", help="Anything goes")
    config = default_prompt_config()
    prompt.prompt(config)
    assert f"{MESSAGE} [{config.help_input} for help] " in prompt.stdout.getvalue()


def test_help_is_shown_and_prompt_repeats():
    prompt = make("?\n" + TYPED + "\n", help="Anything goes")
    prompt.prompt(default_prompt_config())
    assert f"{H} Anything goes\n{Q} {MESSAGE} " in prompt.stdout.getvalue()


@pytest.mark.parametrize("typed, kwargs", [("", {}), ("?\n", {"help": "Anything goes"})])
def test_end_of_input_raises(typed, kwargs):
    with pytest.raises(EOFError):
        make(typed, **kwargs).prompt(default_prompt_config())


def test_cleanup_writes_nothing():
    prompt = make("")
    assert prompt.cleanup(default_prompt_config(), TYPED) is None
    assert prompt.stdout.getvalue() == ""


def test_template_render_with_help_shown():
    prompt = make("", help="Anything goes")
    prompt.render(HIDDEN_QUESTION_TEMPLATE, prompt._template_data(default_prompt_config(), show_help=True))
    out = prompt.stdout.getvalue()
    assert out.startswith(f"{H} Anything goes\n")
    assert "for help" not in out