
"""
state.py
Defines the MatchState dataclass holding the progress of one non-transitive dice match.
Related modules:
- engine.py: Mutates and reads MatchState during play.
"""

from dataclasses import dataclass
from typing import Optional

HUMAN = "human"
COMPUTER = "computer"
TIE = "tie"


@dataclass
class MatchState:
    """
    Stores the public progress of a match.
    Fields:
        status (str): NOT_STARTED | CHOOSING_FIRST | SELECTING | ROLLING | ENDED | CANCELLED | ABORTED.
        first_picker (str|None): HUMAN or COMPUTER once decided.
        human_die (int|None): Index of the human's die.
        computer_die (int|None): Index of the computer's die.
        human_roll (int|None): Face the human rolled.
        computer_roll (int|None): Face the computer rolled.
        outcome (str|None): HUMAN, COMPUTER or TIE when the match ended.
    """
    status: str = "NOT_STARTED"
    first_picker: Optional[str] = None
    human_die: Optional[int] = None
    computer_die: Optional[int] = None
    human_roll: Optional[int] = None
    computer_roll: Optional[int] = None
    outcome: Optional[str] = None
