import pytest

from nebula.services.errors import InputClosedError
from nebula.services.input_validator import (
    FALLBACK_SELECTION,
    NOT_A_NUMBER_MESSAGE,
    OUT_OF_RANGE_MESSAGE,
    InputValidator,
    is_strict_number,
)
from tests.helpers.story_builders import ScriptedInput


def _validator(lines, **kwargs) -> tuple[InputValidator, ScriptedInput, list[str]]:
    scripted = ScriptedInput(lines)
    messages: list[str] = []
    return InputValidator(scripted, messages.append, **kwargs), scripted, messages


def test_valid_selection_returned_on_first_attempt() -> None:
    validator, scripted, messages = _validator(["2"])

    assert validator.read_selection(3) == 2
    assert scripted.prompts == ["Enter choice (1-3): "]
    assert messages == []


def test_empty_line_reprompts_silently() -> None:
    validator, scripted, messages = _validator(["", "1"])

    assert validator.read_selection(2) == 1
    assert len(scripted.prompts) == 2
    assert messages == []


def test_out_of_range_reprompts() -> None:
    validator, scripted, messages = _validator(["9", "0", "2"])

    assert validator.read_selection(2) == 2
    assert messages == [OUT_OF_RANGE_MESSAGE, OUT_OF_RANGE_MESSAGE]
    assert len(scripted.prompts) == 3


@pytest.mark.parametrize("raw", ["abc", "-1", "+1", "1.0", " 1", "1 ", "\t2", "1e0", "²", "١"])
def test_non_digit_lines_are_rejected(raw: str) -> None:
    validator, scripted, messages = _validator([raw, "1"])

    assert validator.read_selection(2) == 1
    assert messages == [NOT_A_NUMBER_MESSAGE]
    assert scripted.remaining == 0


def test_leading_zeros_are_digits() -> None:
    validator, _, _ = _validator(["002"])
    assert validator.read_selection(2) == 2


def test_huge_number_is_out_of_range_not_an_error() -> None:
    validator, _, messages = _validator(["99999999999999999999999", "1"])

    assert validator.read_selection(5) == 1
    assert messages == [OUT_OF_RANGE_MESSAGE]


def test_end_of_input_falls_back_to_first_option() -> None:
    validator, scripted, _ = _validator([])

    assert validator.read_selection(4) == FALLBACK_SELECTION == 1
    assert len(scripted.prompts) == 1


def test_end_of_input_after_rejections_still_falls_back() -> None:
    validator, _, messages = _validator(["nope", "7"])

    assert validator.read_selection(3) == 1
    assert messages == [NOT_A_NUMBER_MESSAGE, OUT_OF_RANGE_MESSAGE]


def test_abort_policy_raises_on_end_of_input() -> None:
    validator, _, _ = _validator([], eof_policy="abort")

    assert validator.eof_policy == "abort"
    with pytest.raises(InputClosedError):
        validator.read_selection(2)


def test_unknown_policy_rejected() -> None:
    with pytest.raises(ValueError):
        InputValidator(ScriptedInput([]), print, eof_policy="retry")  # type: ignore[arg-type]


def test_max_option_below_one_rejected() -> None:
    validator, _, _ = _validator(["1"])
    with pytest.raises(ValueError):
        validator.read_selection(0)


@pytest.mark.parametrize("max_option", [1, 2, 5, 12])
def test_result_always_within_range(max_option: int) -> None:
    lines = ["0", str(max_option + 1), "x", "", str(max_option)]
    validator, _, _ = _validator(lines)

    result = validator.read_selection(max_option)
    assert 1 <= result <= max_option
    assert result == max_option


def test_validator_is_stateless_between_calls() -> None:
    validator, _, messages = _validator(["bad", "1", "2"])

    assert validator.read_selection(2) == 1
    assert validator.read_selection(2) == 2
    assert messages == [NOT_A_NUMBER_MESSAGE]


def test_defaults_use_builtin_input(monkeypatch, capsys) -> None:
    answers = iter(["x", "1"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))

    assert InputValidator().read_selection(1) == 1
    assert NOT_A_NUMBER_MESSAGE in capsys.readouterr().out


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("0123", True), ("", False), ("1a", False), (" ", False), ("³", False)],
)
def test_is_strict_number(raw: str, expected: bool) -> None:
    assert is_strict_number(raw) is expected
