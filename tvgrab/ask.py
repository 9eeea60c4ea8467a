"""
tvgrab.ask - Interactive prompts for --configure
"""

import logging
import sys
from typing import Callable, Iterable, List, Optional, Tuple

# Front-ends accepted by --gui that are served by the terminal prompts
TERMINAL_FRONTENDS = ("term", "termnoprogressbar")


class TerminalAsk:
    """Yes/no questions on the terminal"""

    def __init__(self, input_func: Optional[Callable[[str], str]] = None, out=None):
        self.input_func = input_func or input
        self.out = out or sys.stderr

    def say(self, message: str):
        self.out.write(message + "\n")
        self.out.flush()

    def ask(self, prompt: str) -> str:
        try:
            return self.input_func(prompt).strip()
        except EOFError:
            return ""

    def ask_boolean(self, question: str, default: bool = False) -> bool:
        """Ask a single yes/no question, empty answer selects the default"""
        hint = "Y/n" if default else "y/N"
        while True:
            answer = self.ask(f"{question} [{hint}] ").lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.say(f"{answer!r} is not a valid answer, please answer yes or no")

    def ask_many_boolean(self, questions: Iterable[Tuple[str, bool]]) -> List[bool]:
        """Ask a series of yes/no questions

        Besides yes and no, 'all' answers yes and 'none' answers no to the
        current question and every remaining one.
        """
        answers: List[bool] = []
        forced: Optional[bool] = None

        for question, default in questions:
            if forced is not None:
                answers.append(forced)
                continue

            hint = "yes,NO,all,none" if not default else "YES,no,all,none"
            while True:
                answer = self.ask(f"{question} [{hint}] ").lower()
                if not answer:
                    answers.append(default)
                elif answer in ("y", "yes"):
                    answers.append(True)
                elif answer in ("n", "no"):
                    answers.append(False)
                elif answer in ("a", "all"):
                    forced = True
                    answers.append(True)
                elif answer == "none":
                    forced = False
                    answers.append(False)
                else:
                    self.say(f"{answer!r} is not a valid answer")
                    continue
                break

        return answers


def get_asker(gui: Optional[str] = None,
              input_func: Optional[Callable[[str], str]] = None) -> TerminalAsk:
    """Prompt front-end for --gui; unsupported front-ends fall back to the terminal"""
    if gui and gui.lower() not in TERMINAL_FRONTENDS:
        logging.warning("GUI front-end '%s' is not available, using terminal prompts", gui)
    return TerminalAsk(input_func=input_func)
