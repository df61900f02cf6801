from __future__ import annotations

from typing import Callable

InputFn = Callable[[str], str]


def ask_yes_no(prompt: str, input_fn: InputFn = input) -> bool:
    """Return True for y/yes (any case). EOF counts as no."""
    try:
        answer = input_fn(f"{prompt} (Y/N): ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def pause(prompt: str = "Press Enter to exit...", input_fn: InputFn = input) -> None:
    try:
        input_fn(prompt)
    except EOFError:
        pass
