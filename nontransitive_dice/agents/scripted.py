from collections import deque
from typing import Iterable, Optional, Sequence, Union

from .base import InputSource
from ..core.dice import Die
from ..core.engine import GameCancelled

EXIT = "exit"


class ScriptedInputSource(InputSource):
    """
    Replays a fixed script of numbers and die choices. Used in tests and for non-interactive runs.
    The token "exit" in either script raises GameCancelled when reached.
    Not registered in AGENT_MAP, since it needs a script to be useful.
    """
    def __init__(self, numbers: Iterable[Union[int, str]] = (), choices: Iterable[Union[int, str]] = ()):
        self.numbers = deque(numbers)
        self.choices = deque(choices)
        self.seen_commitments = []

    def _next(self, queue: deque, what: str):
        if not queue:
            raise LookupError(f"script has no more {what}")
        item = queue.popleft()
        if item == EXIT:
            raise GameCancelled(f"scripted exit while choosing {what}")
        return item

    def choose_number(self, range_: int, commitment: bytes) -> int:
        self.seen_commitments.append(commitment)
        return self._next(self.numbers, "numbers")

    def choose_die(self, dice: Sequence[Die], taken: Optional[int]) -> int:
        return self._next(self.choices, "die choices")
