import io
import logging

from tvgrab.ask import TerminalAsk, get_asker


def scripted(*answers):
    replies = iter(answers)

    def input_func(prompt):
        try:
            return next(replies)
        except StopIteration:
            raise EOFError

    return input_func


def test_ask_boolean_default_and_retry():
    out = io.StringIO()
    asker = TerminalAsk(scripted("", "maybe", "y"), out=out)
    assert asker.ask_boolean("Overwrite?", default=False) is False
    assert asker.ask_boolean("Overwrite?") is True
    assert "not a valid answer" in out.getvalue()


def test_ask_many_boolean_uses_defaults_and_answers():
    asker = TerminalAsk(scripted("y", "", "no", ""), out=io.StringIO())
    questions = [("A?", False), ("B?", True), ("C?", True), ("D?", False)]
    assert asker.ask_many_boolean(questions) == [True, True, False, False]


def test_ask_many_boolean_all_and_none():
    asker = TerminalAsk(scripted("n", "all"), out=io.StringIO())
    assert asker.ask_many_boolean([("A?", True), ("B?", False), ("C?", False)]) == [
        False, True, True]

    asker = TerminalAsk(scripted("none"), out=io.StringIO())
    assert asker.ask_many_boolean([("A?", True), ("B?", True)]) == [False, False]


def test_end_of_input_selects_defaults():
    asker = TerminalAsk(scripted(), out=io.StringIO())
    assert asker.ask_many_boolean([("A?", True), ("B?", False)]) == [True, False]


def test_get_asker_falls_back_to_terminal(caplog):
    with caplog.at_level(logging.WARNING):
        assert isinstance(get_asker("Tk"), TerminalAsk)
    assert "not available" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING):
        get_asker("TermNoProgressBar")
        get_asker(None)
    assert caplog.text == ""
