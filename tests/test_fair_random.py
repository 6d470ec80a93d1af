import os
import subprocess
import sys
import textwrap
import threading
import time
import unittest

from nontransitive_dice.core import commitment
from nontransitive_dice.core.errors import (
    CommitmentMismatch,
    CounterpartTimeout,
    InvalidRange,
    OutOfRange,
    ProtocolStateError,
    SessionCancelled,
)
from nontransitive_dice.core.fair_random import FairRandomSession
from nontransitive_dice.core.sampler import UnbiasedSampler


def fixed_secret(value):
    """Sampler whose entropy always yields `value` (valid for ranges above value)."""
    return UnbiasedSampler(entropy=lambda n: value.to_bytes(n, "big"))


class TestFairRandomSession(unittest.TestCase):
    """
    Tests for the commit-reveal lifecycle of `FairRandomSession`:
      - Steps must be called in order and cannot be skipped.
      - The combined result is (secret + counterpart) % range.
      - Reveal verifies the commitment and reports tampering.
      - Cancellation and timeouts end the session without a reveal.
    """

    def _session(self, range_, secret):
        return FairRandomSession(range_, sampler=fixed_secret(secret))

    def test_range_two_examples(self):
        s = self._session(2, 1)
        s.commit()
        s.publish()
        self.assertEqual(s.combine(1), 0)
        s = self._session(2, 0)
        s.commit()
        s.publish()
        self.assertEqual(s.combine(1), 1)

    def test_full_round_trip_verifies(self):
        s = self._session(6, 4)
        c = s.commit()
        self.assertEqual(s.publish(), c)
        self.assertEqual(s.combine(5), (4 + 5) % 6)
        rev = s.reveal()
        self.assertTrue(rev.verified)
        self.assertEqual(rev.secret_value, 4)
        self.assertEqual(rev.counterpart_value, 5)
        self.assertEqual(rev.result, 3)
        self.assertEqual(rev.commitment, c)
        self.assertTrue(commitment.verify(rev.commitment, rev.secret_value, rev.key))
        self.assertEqual(rev.key_hex, rev.key.hex().upper())
        self.assertIs(rev.ensure_verified(), rev)
        self.assertEqual(s.status, "REVEALED")

    def test_fresh_key_per_session(self):
        keys = set()
        for _ in range(5):
            s = FairRandomSession(10)
            rev = s.run(lambda c, r: 0)
            keys.add(rev.key)
        self.assertEqual(len(keys), 5)

    def test_range_one_always_zero(self):
        s = FairRandomSession(1)
        self.assertEqual(s.run(lambda c, r: 0).result, 0)
        s = FairRandomSession(1)
        with self.assertRaises(OutOfRange):
            s.run(lambda c, r: 1)
        self.assertEqual(s.status, "CANCELLED")

    def test_invalid_range(self):
        with self.assertRaises(InvalidRange):
            FairRandomSession(0)

    def test_counterpart_out_of_range(self):
        s = self._session(3, 0)
        s.commit()
        s.publish()
        for bad in (-1, 3, 1.0, True):
            with self.assertRaises(OutOfRange):
                s.combine(bad)
        # still awaiting a valid value
        self.assertEqual(s.combine(2), 2)

    def test_cannot_skip_publish(self):
        s = self._session(3, 0)
        with self.assertRaises(ProtocolStateError):
            s.combine(1)
        s.commit()
        with self.assertRaises(ProtocolStateError):
            s.combine(1)
        with self.assertRaises(ProtocolStateError):
            s.reveal()
        with self.assertRaises(ProtocolStateError):
            s.commit()

    def test_counterpart_sees_only_commitment(self):
        seen = []

        def provider(c, r):
            seen.append((c, r))
            return 0
        s = self._session(4, 2)
        rev = s.run(provider)
        self.assertEqual(seen, [(rev.commitment, 4)])

    def test_tampered_secret_is_reported(self):
        s = self._session(6, 1)
        s.commit()
        s.publish()
        # committing party changes its value after seeing the commitment go out
        s._secret_value = 2
        s.combine(0)
        rev = s.reveal()
        self.assertFalse(rev.verified)
        self.assertEqual(rev.result, 2)
        with self.assertRaises(CommitmentMismatch):
            rev.ensure_verified()

    def test_cancel_before_reveal(self):
        s = self._session(6, 1)
        c = s.commit()
        s.publish()
        s.cancel()
        self.assertEqual(s.status, "CANCELLED")
        self.assertEqual(s.commitment, c)
        self.assertIsNone(s._key)
        self.assertIsNone(s._secret_value)
        with self.assertRaises(SessionCancelled):
            s.combine(0)
        with self.assertRaises(SessionCancelled):
            s.reveal()

    def test_cancel_after_reveal_is_noop(self):
        s = self._session(2, 0)
        s.run(lambda c, r: 0)
        s.cancel()
        self.assertEqual(s.status, "REVEALED")

    def test_reveal_discards_session_secrets(self):
        s = self._session(2, 0)
        s.run(lambda c, r: 1)
        self.assertIsNone(s._key)
        self.assertIsNone(s._secret_value)

    def test_provider_error_cancels_session(self):
        def provider(c, r):
            raise KeyError("boom")
        s = self._session(2, 0)
        with self.assertRaises(KeyError):
            s.run(provider)
        self.assertEqual(s.status, "CANCELLED")

    def test_timeout(self):
        release = threading.Event()

        def slow(c, r):
            release.wait(5)
            return 0
        s = self._session(2, 0)
        try:
            with self.assertRaises(CounterpartTimeout):
                s.run(slow, timeout=0.05)
        finally:
            release.set()
        self.assertEqual(s.status, "CANCELLED")

    def test_process_exits_promptly_after_timeout(self):
        code = textwrap.dedent("""
            import time
            from nontransitive_dice.core.errors import CounterpartTimeout
            from nontransitive_dice.core.fair_random import FairRandomSession
            s = FairRandomSession(2)
            try:
                s.run(lambda c, r: time.sleep(10) or 0, timeout=0.1)
            except CounterpartTimeout:
                print("timed out", s.status)
        """)
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        env = dict(os.environ)
        env["PYTHONPATH"] = root + os.pathsep + env.get("PYTHONPATH", "")
        start = time.monotonic()
        proc = subprocess.run([sys.executable, "-c", code], env=env, capture_output=True, text=True, timeout=30)
        elapsed = time.monotonic() - start
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertIn("timed out CANCELLED", proc.stdout)
        self.assertLess(elapsed, 5.0)

    def test_provider_error_surfaces_through_timeout_path(self):
        def provider(c, r):
            raise KeyError("boom")
        s = self._session(2, 0)
        with self.assertRaises(KeyError):
            s.run(provider, timeout=5)
        self.assertEqual(s.status, "CANCELLED")

    def test_timeout_not_hit(self):
        s = self._session(5, 3)
        rev = s.run(lambda c, r: 4, timeout=5)
        self.assertEqual(rev.result, 2)
        self.assertTrue(rev.verified)


if __name__ == '__main__':
    unittest.main()
