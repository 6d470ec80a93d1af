from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..core.dice import Die


class InputSource(ABC):
    """
    Abstract base class for everything that supplies choices to a match: the console player,
    computer opponents, and scripted sources in tests.
    Input sources must implement choose_number (their contribution to a fair-random draw)
    and choose_die. Raising GameCancelled from either method asks the engine to abandon the match.
    """

    @abstractmethod
    def choose_number(self, range_: int, commitment: bytes) -> int:
        """
        Given the opponent's published commitment, return a number in [0, range_).
        Args:
            range_ (int): Number of possible outcomes.
            commitment (bytes): HMAC the opponent committed to before this call.
        Returns:
            int: This side's contribution to the draw.
        """
        raise NotImplementedError

    @abstractmethod
    def choose_die(self, dice: Sequence[Die], taken: Optional[int]) -> int:
        """
        Return the index of the die to play with.
        Args:
            dice (list[Die]): All dice in the match.
            taken (int|None): Index already picked by the opponent, or None when picking first.
        Returns:
            int: Index into dice, different from taken.
        """
        raise NotImplementedError

    def available_dice(self, dice: Sequence[Die], taken: Optional[int]) -> List[int]:
        """
        Indices of the dice that can still be picked.
        """
        return [i for i in range(len(dice)) if i != taken]
