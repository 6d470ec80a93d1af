from typing import Optional, Sequence

from .base import InputSource
from ..core.dice import Die
from ..core.sampler import UnbiasedSampler
from . import register_agent


@register_agent("random")
class RandomAgent(InputSource):
    """
    The plain computer opponent: picks any available die uniformly at random
    and contributes a uniformly random number to every fair draw.
    """
    def __init__(self, sampler: Optional[UnbiasedSampler] = None):
        """
        Args:
            sampler: Optional UnbiasedSampler; a secure one is created if omitted.
        """
        self.sampler = sampler or UnbiasedSampler()

    def choose_number(self, range_: int, commitment: bytes) -> int:
        return self.sampler.sample(range_)

    def choose_die(self, dice: Sequence[Die], taken: Optional[int]) -> int:
        return self.sampler.choice(self.available_dice(dice, taken))
