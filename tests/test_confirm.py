import io

import pytest

from surveyprompt import rendering
from surveyprompt.confirm import CONFIRM_QUESTION_TEMPLATE, Confirm, yes_no
from surveyprompt.rendering import default_icons, default_prompt_config

MESSAGE = "Is pizza your favorite food?"
Q = default_icons().question.text
H = default_icons().help.text
HELP_INPUT = default_prompt_config().help_input


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setattr(rendering, "DISABLE_COLOR", True)


def make(typed="", **kwargs):
    return Confirm(message=MESSAGE, stdin=io.StringIO(typed), stdout=io.StringIO(), **kwargs)


def ask(typed, **kwargs):
    prompt = make(typed, **kwargs)
    answer = prompt.prompt(default_prompt_config())
    return answer, prompt.stdout.getvalue()


@pytest.mark.parametrize(
    "kwargs, extra, expected",
    [
        ({"default": True}, {}, f"{Q} {MESSAGE} (Y/n) "),
        ({"default": False}, {}, f"{Q} {MESSAGE} (y/N) "),
        ({}, {"answer": "Yes"}, f"{Q} {MESSAGE} Yes\n"),
        ({"help": "This is helpful"}, {}, f"{Q} {MESSAGE} [{HELP_INPUT} for help] (y/N) "),
        ({"help": "This is helpful"}, {"show_help": True}, f"{H} This is helpful\n{Q} {MESSAGE} (y/N) "),
    ],
)
def test_render(kwargs, extra, expected):
    prompt = make(**kwargs)
    prompt.render(CONFIRM_QUESTION_TEMPLATE, prompt._template_data(default_prompt_config(), **extra))
    assert expected in prompt.stdout.getvalue()


@pytest.mark.parametrize(
    "kwargs, typed, expected_text, expected",
    [
        ({}, "n\n", f"{MESSAGE} (y/N)", False),
        ({"default": True}, "\n", f"{MESSAGE} (Y/n)", True),
        ({"default": True}, "n\n", f"{MESSAGE} (Y/n)", False),
        ({"help": "It probably is"}, "?\nY\n", f"{MESSAGE} [{HELP_INPUT} for help] (y/N)", True),
    ],
)
def test_prompt(kwargs, typed, expected_text, expected):
    answer, out = ask(typed, **kwargs)
    assert answer is expected
    assert expected_text in out


def test_prompt_shows_help_text():
    _, out = ask("?\nY\n", help="It probably is")
    assert f"{H} It probably is\n" in out


@pytest.mark.parametrize(
    "typed, default, expected",
    [
        ("y", False, True),
        ("Y", False, True),
        ("yes", False, True),
        ("YES", False, True),
        ("Yes", False, True),
        ("n", True, False),
        ("N", True, False),
        ("no", True, False),
        ("NO", True, False),
    ],
)
def test_answer_variants(typed, default, expected):
    answer, _ = ask(typed + "\n", default=default)
    assert answer is expected


@pytest.mark.parametrize(
    "typed, expected, message",
    [
        ("maybe\ny\n", True, '"maybe" is not a valid answer, please try again.'),
        ("?\nn\n", False, '"?" is not a valid answer'),
    ],
)
def test_invalid_answer_reprompts(typed, expected, message):
    answer, out = ask(typed)
    assert answer is expected
    assert message in out


def test_end_of_input_raises():
    with pytest.raises(EOFError):
        ask("")


@pytest.mark.parametrize("value, word", [(True, "Yes"), (False, "No")])
def test_cleanup_shows_answer(value, word):
    prompt = make()
    prompt.cleanup(default_prompt_config(), value)
    assert f"{Q} {MESSAGE} {word}\n" in prompt.stdout.getvalue()
    assert yes_no(value) == word


def test_yes_no_rejects_non_bool():
    with pytest.raises(TypeError):
        yes_no("yes")