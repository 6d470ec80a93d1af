
"""
sampler.py
Unbiased bounded random integers from a cryptographically secure entropy source.
Related modules:
- fair_random.py: Draws each session's secret value with UnbiasedSampler.
- engine.py: Uses UnbiasedSampler directly when rolls are not committed.
"""

import logging
import secrets
from typing import Callable, Optional, Sequence, TypeVar

from .errors import InvalidRange

logger = logging.getLogger(__name__)

WORD_BYTES = 4
SPAN = 1 << (8 * WORD_BYTES)

T = TypeVar("T")


class UnbiasedSampler:
    """
    Draws integers uniformly from [0, range) by rejection sampling over 32-bit words.
    A plain `r % range` favours small values whenever range does not divide 2**32;
    draws from the tail above the largest multiple of range are discarded instead.
    """
    def __init__(self, entropy: Optional[Callable[[int], bytes]] = None):
        """
        Args:
            entropy: Callable returning n random bytes. Defaults to secrets.token_bytes.
        """
        self.entropy = entropy or secrets.token_bytes

    def sample(self, range_: int) -> int:
        """
        Draw a uniformly distributed integer in [0, range_).
        Args:
            range_ (int): Exclusive upper bound, 1 <= range_ <= 2**32.
        Returns:
            int: The drawn value.
        Raises:
            InvalidRange: If range_ is not an integer in [1, 2**32].
        """
        check_range(range_)
        threshold = SPAN - (SPAN % range_)
        while True:
            r = int.from_bytes(self.entropy(WORD_BYTES), "big")
            if r < threshold:
                return r % range_
            logger.debug("Rejected draw above threshold %d for range %d", threshold, range_)

    def choice(self, seq: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        if not seq:
            raise InvalidRange("cannot choose from an empty sequence")
        return seq[self.sample(len(seq))]


def check_range(range_) -> None:
    if isinstance(range_, bool) or not isinstance(range_, int):
        raise InvalidRange(f"range must be an integer, got {range_!r}")
    if not (1 <= range_ <= SPAN):
        raise InvalidRange(f"range must be between 1 and {SPAN}, got {range_}")
