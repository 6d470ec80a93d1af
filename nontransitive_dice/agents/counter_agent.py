from typing import Optional, Sequence

from .random_agent import RandomAgent
from ..core.dice import Die
from ..core.probability import best_counter, best_worst_case
from . import register_agent


@register_agent("counter")
class CounterAgent(RandomAgent):
    """
    A computer opponent that uses the probability model when picking dice.
    Picking second, it answers with the die most likely to beat the opponent's pick.
    Picking first, it takes the die with the best worst-case win probability.
    Numbers for fair draws are still uniformly random, since any choice is equally good there.
    """

    def choose_die(self, dice: Sequence[Die], taken: Optional[int]) -> int:
        if taken is None:
            return best_worst_case(dice)
        return best_counter(dice, taken)
