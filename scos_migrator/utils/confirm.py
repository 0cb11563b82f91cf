from typing import Callable, Protocol


class Confirmer(Protocol):
    def confirm(self, prompt: str) -> bool: ...


class InteractiveConfirmer:
    """Blocks on the operator until a yes/no answer is given."""

    def __init__(self, input_fn: Callable[[str], str] = input):
        self.input_fn: Callable[[str], str] = input_fn

    def confirm(self, prompt: str) -> bool:
        while True:
            answer = self.input_fn(f"{prompt} [y/n]: ").strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False


class AutoConfirmer:
    def __init__(self, answer: bool = True):
        self.answer: bool = answer

    def confirm(self, prompt: str) -> bool:
        return self.answer
