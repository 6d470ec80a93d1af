
"""
probability.py
Pairwise win probabilities between dice by exhaustive enumeration of face pairs.
Related modules:
- dice.py: Die type.
- agents/counter_agent.py: Picks dice with best_counter and best_worst_case.
- UI/cli.py: Renders probability_matrix as the help table.
"""

from fractions import Fraction
from itertools import permutations, product
from typing import List, Optional, Sequence, Tuple

from .dice import Die

HALF = Fraction(1, 2)


def win_probability(a: Die, b: Die) -> Fraction:
    """
    Probability that a roll of a is strictly greater than a roll of b.
    Ties count as a win for neither die.
    Args:
        a (Die): First die.
        b (Die): Second die.
    Returns:
        Fraction: wins / (len(a) * len(b)).
    """
    wins = sum(1 for x, y in product(a.faces, b.faces) if x > y)
    return Fraction(wins, len(a.faces) * len(b.faces))


def tie_probability(a: Die, b: Die) -> Fraction:
    ties = sum(1 for x, y in product(a.faces, b.faces) if x == y)
    return Fraction(ties, len(a.faces) * len(b.faces))


def probability_matrix(dice: Sequence[Die]) -> List[List[Optional[Fraction]]]:
    """
    Row i, column j holds win_probability(dice[i], dice[j]); the diagonal is None.
    """
    return [
        [None if i == j else win_probability(a, b) for j, b in enumerate(dice)]
        for i, a in enumerate(dice)
    ]


def find_cycle(dice: Sequence[Die]) -> Optional[Tuple[int, int, int]]:
    """
    Find indices (i, j, k) where i beats j, j beats k and k beats i, each with probability above 1/2.
    Returns:
        tuple|None: The first such triple in index order, or None if the set has no cycle of three.
    """
    for i, j, k in permutations(range(len(dice)), 3):
        if (win_probability(dice[i], dice[j]) > HALF
                and win_probability(dice[j], dice[k]) > HALF
                and win_probability(dice[k], dice[i]) > HALF):
            return i, j, k
    return None


def is_nontransitive(dice: Sequence[Die]) -> bool:
    return find_cycle(dice) is not None


def best_counter(dice: Sequence[Die], taken: int) -> int:
    """
    Index of the die, other than taken, with the highest win probability against dice[taken].
    Ties go to the lowest index.
    """
    candidates = [i for i in range(len(dice)) if i != taken]
    return max(candidates, key=lambda i: (win_probability(dice[i], dice[taken]), -i))


def best_worst_case(dice: Sequence[Die]) -> int:
    """
    Index of the die whose lowest win probability against any other die is highest.
    Used when picking first, where the opponent will answer with their best counter.
    """
    if len(dice) == 1:
        return 0

    def worst(i):
        return min(win_probability(dice[i], dice[j]) for j in range(len(dice)) if j != i)
    return max(range(len(dice)), key=lambda i: (worst(i), -i))
