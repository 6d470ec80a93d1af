
"""
config.py
Defines the MatchConfig dataclass, which centralizes the options of a non-transitive dice match.
Related modules:
- engine.py: Uses MatchConfig to decide how rolls are drawn and how long to wait for the human.
- dice.py: parse_dice uses min_dice.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MatchConfig:
    """
    Centralizes all rule options for a match.
    Fields:
        min_dice (int): Minimum number of dice for the game to be well-posed.
        commit_rolls (bool): If True, die rolls use the full commit-reveal protocol;
            if False, rolls are bare secure-random draws and only first pick is committed.
        counterpart_timeout (float|None): Seconds to wait for the human's number, or None to wait forever.
        key_size (int): Length in bytes of the per-session HMAC key.
        human_first_on (int): Combined first-pick result for which the human picks first.
    """
    min_dice: int = 3
    commit_rolls: bool = True
    counterpart_timeout: Optional[float] = None
    key_size: int = 32
    human_first_on: int = 0
