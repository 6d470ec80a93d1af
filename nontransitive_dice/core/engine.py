
"""
engine.py
Implements the MatchEngine class, which sequences fair-random sessions to decide who picks first,
collects dice choices and resolves both rolls, emitting events along the way.
Related modules:
- config.py: MatchConfig is used to configure the engine.
- state.py: MatchState holds the progress of the match.
- fair_random.py: Every fairness-sensitive draw is a FairRandomSession.
- dice.py: Die type.
- agents/: InputSource implementations supply numbers and dice choices.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .config import MatchConfig
from .dice import Die
from .errors import FairRandomError
from .fair_random import FairRandomSession, Revelation
from .sampler import UnbiasedSampler
from .state import COMPUTER, HUMAN, TIE, MatchState

logger = logging.getLogger(__name__)


class IllegalChoiceError(Exception):
    """
    Raised when an input source picks a die that does not exist or is already taken.
    """
    pass


class GameCancelled(Exception):
    """
    Raised by an input source to abandon the match (e.g. the player chose "exit").
    """
    pass


class MatchEngine:
    """
    Runs one match between a human seat and a computer seat.
    In every fair draw the computer commits first and the human contributes the counterpart value,
    so the human can check each reveal against the commitment shown before they chose.
    """
    def __init__(self, dice: Sequence[Die], computer, human, config: Optional[MatchConfig] = None,
                 sampler: Optional[UnbiasedSampler] = None, on_event: Optional[Callable[[Dict], None]] = None):
        """
        Initialize a new match.
        Args:
            dice (list[Die]): Dice on the table.
            computer (InputSource): The committing side.
            human (InputSource): The side that contributes counterpart values.
            config (MatchConfig|None): Match options; defaults to MatchConfig().
            sampler (UnbiasedSampler|None): Sampler for secret values and uncommitted rolls.
            on_event (callable|None): Called with each event as it is emitted.
        Raises:
            ValueError: If fewer than config.min_dice dice are given, or config.human_first_on is not 0 or 1.
        """
        self.config = config or MatchConfig()
        if self.config.human_first_on not in (0, 1):
            raise ValueError(f"human_first_on must be 0 or 1, got {self.config.human_first_on!r}")
        if len(dice) < max(2, self.config.min_dice):
            raise ValueError(f"need at least {max(2, self.config.min_dice)} dice, got {len(dice)}")
        self.dice = list(dice)
        self.computer = computer
        self.human = human
        self.sampler = sampler or UnbiasedSampler()
        self.on_event = on_event
        self.state = MatchState()
        self.revelations: List[Revelation] = []
        self._session: Optional[FairRandomSession] = None
        self._events = []

    def _emit(self, event: Dict):
        """
        Internal: Record an event and pass it to the listener, if any.
        """
        self._events.append(event)
        if self.on_event is not None:
            self.on_event(event)

    def pop_events(self):
        """
        Return and clear all emitted events since last call.
        Returns:
            list[dict]: List of event dicts.
        """
        ev = list(self._events)
        self._events.clear()
        return ev

    def get_events(self):
        """
        Return all events emitted so far (does not clear).
        """
        return list(self._events)

    def _fair_draw(self, range_: int, purpose: str) -> Revelation:
        """
        Internal: Run one commit-reveal session with the computer committing and the human answering.
        Raises:
            CommitmentMismatch: If the reveal does not match the published commitment.
        """
        session = FairRandomSession(range_, sampler=self.sampler, key_size=self.config.key_size)
        self._session = session

        def ask_human(commitment: bytes, session_range: int) -> int:
            self._emit({"type": "CommitmentPublished", "purpose": purpose, "range": session_range,
                        "hmac": commitment.hex().upper()})
            return self.human.choose_number(session_range, commitment)

        try:
            revelation = session.run(ask_human, timeout=self.config.counterpart_timeout)
        finally:
            self._session = None
        self.revelations.append(revelation)
        self._emit({
            "type": "Revealed",
            "purpose": purpose,
            "range": revelation.range,
            "secret_value": revelation.secret_value,
            "key": revelation.key_hex,
            "counterpart_value": revelation.counterpart_value,
            "result": revelation.result,
            "verified": revelation.verified,
        })
        return revelation.ensure_verified()

    def decide_first_picker(self) -> str:
        """
        Decide who picks a die first with a fair draw over {0, 1}.
        Returns:
            str: HUMAN or COMPUTER.
        """
        self.state.status = "CHOOSING_FIRST"
        revelation = self._fair_draw(2, "first_pick")
        first = HUMAN if revelation.result == self.config.human_first_on else COMPUTER
        self.state.first_picker = first
        self._emit({"type": "FirstPickDecided", "first": first, "result": revelation.result})
        return first

    def _pick(self, who: str, taken: Optional[int]) -> int:
        source = self.human if who == HUMAN else self.computer
        choice = source.choose_die(self.dice, taken)
        if isinstance(choice, bool) or not isinstance(choice, int) or not (0 <= choice < len(self.dice)):
            raise IllegalChoiceError(f"{who} chose a die that does not exist: {choice!r}")
        if choice == taken:
            raise IllegalChoiceError(f"{who} chose die #{choice + 1}, which is already taken")
        if who == HUMAN:
            self.state.human_die = choice
        else:
            self.state.computer_die = choice
        self._emit({"type": "DieSelected", "player": who, "die": choice, "faces": list(self.dice[choice].faces)})
        return choice

    def select_dice(self) -> None:
        """
        Collect die choices, first picker first; the second picker cannot take the same die.
        Raises:
            IllegalChoiceError: If a source returns an invalid index.
        """
        if self.state.first_picker is None:
            raise IllegalChoiceError("first picker has not been decided")
        self.state.status = "SELECTING"
        second = COMPUTER if self.state.first_picker == HUMAN else HUMAN
        taken = self._pick(self.state.first_picker, None)
        self._pick(second, taken)

    def roll(self, who: str) -> int:
        """
        Roll the die of the given player.
        With config.commit_rolls the face index comes from a fair draw; otherwise from a bare secure draw.
        Returns:
            int: The face rolled.
        """
        self.state.status = "ROLLING"
        index = self.state.human_die if who == HUMAN else self.state.computer_die
        if index is None:
            raise IllegalChoiceError(f"{who} has no die to roll")
        die = self.dice[index]
        if self.config.commit_rolls:
            face_index = self._fair_draw(len(die), f"{who}_roll").result
        else:
            face_index = self.sampler.sample(len(die))
        face = die.face(face_index)
        if who == HUMAN:
            self.state.human_roll = face
        else:
            self.state.computer_roll = face
        self._emit({"type": "Rolled", "player": who, "face_index": face_index, "face": face})
        return face

    def _resolve(self) -> str:
        h, c = self.state.human_roll, self.state.computer_roll
        outcome = HUMAN if h > c else COMPUTER if c > h else TIE
        self.state.outcome = outcome
        self.state.status = "ENDED"
        self._emit({"type": "MatchEnded", "outcome": outcome, "human_roll": h, "computer_roll": c})
        logger.info("Match ended: human %d vs computer %d -> %s", h, c, outcome)
        return outcome

    def cancel(self, reason: str = "") -> None:
        """
        Abandon the match and any in-flight session. Nothing further is revealed.
        """
        if self._session is not None:
            self._session.cancel()
            self._session = None
        self.state.status = "CANCELLED"
        self._emit({"type": "MatchCancelled", "reason": reason})
        logger.info("Match cancelled: %s", reason)

    def abort(self, error: Exception) -> None:
        """
        Mark the match as failed after a protocol or choice error. The error itself is left to the caller.
        """
        if self._session is not None:
            self._session.cancel()
            self._session = None
        self.state.status = "ABORTED"
        self._emit({"type": "MatchAborted", "error": type(error).__name__, "message": str(error)})
        logger.warning("Match aborted: %s", error)

    def play(self) -> Optional[str]:
        """
        Play the whole match.
        Returns:
            str|None: HUMAN, COMPUTER or TIE; None if an input source cancelled the match.
        Any error below leaves the match in status ABORTED before propagating.
        Raises:
            CommitmentMismatch: If any reveal fails verification.
            CounterpartTimeout: If the human does not answer within config.counterpart_timeout.
            IllegalChoiceError: If a source picks an invalid die.
        """
        try:
            self.decide_first_picker()
            self.select_dice()
            self.roll(HUMAN)
            self.roll(COMPUTER)
        except GameCancelled as e:
            self.cancel(str(e))
            return None
        except (FairRandomError, IllegalChoiceError) as e:
            self.abort(e)
            raise
        return self._resolve()

    def is_terminal(self) -> bool:
        """
        Returns True if the match ended, was cancelled or was aborted.
        """
        return self.state.status in ("ENDED", "CANCELLED", "ABORTED")
