
"""
fair_random.py
Implements FairRandomSession, one run of the two-party commit-reveal protocol over a range.
The committing party draws a secret value and publishes an HMAC of it; only then is the
counterpart's value accepted; the result is their sum modulo the range; finally the key and
secret are revealed so the counterpart can check the commitment.
Related modules:
- sampler.py: Draws the secret value.
- commitment.py: Computes and verifies the commitment.
- engine.py: Runs sessions to decide first pick and rolls.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from . import commitment as scheme
from .errors import (
    CommitmentMismatch,
    CounterpartTimeout,
    OutOfRange,
    ProtocolStateError,
    SessionCancelled,
)
from .sampler import UnbiasedSampler, check_range

logger = logging.getLogger(__name__)

CREATED = "CREATED"
COMMITTED = "COMMITTED"
AWAITING_COUNTERPART = "AWAITING_COUNTERPART"
COMBINED = "COMBINED"
REVEALED = "REVEALED"
CANCELLED = "CANCELLED"

TERMINAL_STATES = (REVEALED, CANCELLED)

# provider(commitment, range) -> counterpart value
CounterpartProvider = Callable[[bytes, int], int]


@dataclass(frozen=True)
class Revelation:
    """
    Everything disclosed at the end of a session.
    Fields:
        range (int): Range the session drew over.
        commitment (bytes): Commitment published before the counterpart's value was known.
        secret_value (int): Committing party's secret value.
        key (bytes): HMAC key used for the commitment.
        counterpart_value (int): Value supplied by the counterpart.
        result (int): (secret_value + counterpart_value) % range.
        verified (bool): Whether secret_value and key reproduce commitment.
    """
    range: int
    commitment: bytes
    secret_value: int
    key: bytes
    counterpart_value: int
    result: int
    verified: bool

    @property
    def commitment_hex(self) -> str:
        return self.commitment.hex().upper()

    @property
    def key_hex(self) -> str:
        return self.key.hex().upper()

    def ensure_verified(self) -> "Revelation":
        """
        Raise CommitmentMismatch if verification failed, otherwise return self.
        """
        if not self.verified:
            raise CommitmentMismatch(
                f"revealed value {self.secret_value} and key {self.key_hex} "
                f"do not match commitment {self.commitment_hex}"
            )
        return self


class FairRandomSession:
    """
    State machine for a single fair-random draw.
    Steps must be called in order: commit(), publish(), combine(value), reveal().
    cancel() may be called at any point before reveal and ends the session without a reveal.
    """
    def __init__(self, range_: int, sampler: Optional[UnbiasedSampler] = None,
                 key_size: int = scheme.KEY_SIZE, key_source: Optional[Callable[[int], bytes]] = None):
        """
        Args:
            range_ (int): Number of possible outcomes, >= 1.
            sampler (UnbiasedSampler|None): Sampler for the secret value.
            key_size (int): Length of the HMAC key in bytes.
            key_source (callable|None): Callable returning n key bytes. Defaults to commitment.new_key.
        Raises:
            InvalidRange: If range_ < 1.
        """
        check_range(range_)
        self.range = range_
        self.sampler = sampler or UnbiasedSampler()
        self.key_size = key_size
        self.key_source = key_source or scheme.new_key
        self.status = CREATED
        self.commitment: Optional[bytes] = None
        self.counterpart_value: Optional[int] = None
        self.result: Optional[int] = None
        self._secret_value: Optional[int] = None
        self._key: Optional[bytes] = None

    def _require(self, *expected: str) -> None:
        if self.status == CANCELLED:
            raise SessionCancelled("session was cancelled")
        if self.status not in expected:
            raise ProtocolStateError(f"expected state {' or '.join(expected)}, session is {self.status}")

    def commit(self) -> bytes:
        """
        Generate fresh key material and a secret value, and compute the commitment.
        Returns:
            bytes: The commitment.
        """
        self._require(CREATED)
        self._key = self.key_source(self.key_size)
        self._secret_value = self.sampler.sample(self.range)
        self.commitment = scheme.commit(self._secret_value, self._key)
        self.status = COMMITTED
        logger.debug("Committed over range %d: %s", self.range, self.commitment.hex())
        return self.commitment

    def publish(self) -> bytes:
        """
        Hand the commitment to the counterpart. Only after this is their value accepted.
        Returns:
            bytes: The commitment.
        """
        self._require(COMMITTED)
        self.status = AWAITING_COUNTERPART
        return self.commitment

    def combine(self, counterpart_value: int) -> int:
        """
        Accept the counterpart's value and compute the combined result.
        Args:
            counterpart_value (int): Integer in [0, range).
        Returns:
            int: (secret + counterpart_value) % range.
        Raises:
            OutOfRange: If counterpart_value is not an integer in [0, range).
        """
        self._require(AWAITING_COUNTERPART)
        if isinstance(counterpart_value, bool) or not isinstance(counterpart_value, int):
            raise OutOfRange(f"counterpart value must be an integer, got {counterpart_value!r}")
        if not (0 <= counterpart_value < self.range):
            raise OutOfRange(f"counterpart value {counterpart_value} is outside [0, {self.range})")
        self.counterpart_value = counterpart_value
        self.result = (self._secret_value + counterpart_value) % self.range
        self.status = COMBINED
        return self.result

    def reveal(self) -> Revelation:
        """
        Disclose the key and secret value and recompute the commitment check.
        A failed check is reported in Revelation.verified, never corrected.
        Returns:
            Revelation: Disclosed material and verification outcome.
        """
        self._require(COMBINED)
        verified = scheme.verify(self.commitment, self._secret_value, self._key)
        revelation = Revelation(
            range=self.range,
            commitment=self.commitment,
            secret_value=self._secret_value,
            key=self._key,
            counterpart_value=self.counterpart_value,
            result=self.result,
            verified=verified,
        )
        self._secret_value = None
        self._key = None
        self.status = REVEALED
        if not verified:
            logger.warning("Commitment %s failed verification at reveal", self.commitment.hex())
        return revelation

    def cancel(self) -> None:
        """
        Abandon the session. The published commitment (if any) stays; nothing is revealed.
        """
        if self.status in TERMINAL_STATES:
            return
        logger.debug("Session over range %d cancelled in state %s", self.range, self.status)
        self._secret_value = None
        self._key = None
        self.status = CANCELLED

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def run(self, provider: CounterpartProvider, timeout: Optional[float] = None) -> Revelation:
        """
        Drive the whole protocol, asking provider for the counterpart's value after publishing.
        Args:
            provider (callable): provider(commitment, range) -> int.
            timeout (float|None): Seconds to wait for provider, or None to block.
        Returns:
            Revelation: The revealed session.
        Raises:
            CounterpartTimeout: If provider does not answer within timeout.
            OutOfRange: If provider answers with a value outside [0, range).
        Any error from provider or combine cancels the session before propagating.
        """
        self.commit()
        published = self.publish()
        try:
            value = self._await_counterpart(provider, published, timeout)
            self.combine(value)
        except BaseException:
            self.cancel()
            raise
        return self.reveal()

    def _await_counterpart(self, provider: CounterpartProvider, published: bytes, timeout: Optional[float]) -> int:
        if timeout is None:
            return provider(published, self.range)
        answers = queue.Queue(maxsize=1)

        def ask():
            try:
                answers.put((True, provider(published, self.range)))
            except BaseException as e:
                answers.put((False, e))

        # daemon: a provider still blocked on input() must not keep the interpreter alive
        threading.Thread(target=ask, name="counterpart-provider", daemon=True).start()
        try:
            ok, payload = answers.get(timeout=timeout)
        except queue.Empty:
            raise CounterpartTimeout(f"no counterpart value within {timeout} seconds") from None
        if not ok:
            raise payload
        return payload
