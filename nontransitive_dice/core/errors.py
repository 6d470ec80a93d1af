
"""
errors.py
Defines the error taxonomy for the fair-random protocol.
Related modules:
- sampler.py: Raises InvalidRange.
- commitment.py: Raises OutOfRange for values that cannot be encoded.
- fair_random.py: Raises every error defined here.
"""


class FairRandomError(Exception):
    """
    Base class for all errors raised by a fair-random session or its building blocks.
    """
    pass


class InvalidRange(FairRandomError, ValueError):
    """
    Raised when a range below 1 (or above 2**32) is supplied to the sampler or a session.
    """
    pass


class OutOfRange(FairRandomError, ValueError):
    """
    Raised when a value falls outside [0, range).
    """
    pass


class CommitmentMismatch(FairRandomError):
    """
    Raised when a revealed secret and key do not reproduce the published commitment.
    This means the committing party changed its value after committing.
    """
    pass


class CounterpartTimeout(FairRandomError):
    """
    Raised when the counterpart's value does not arrive within the caller's timeout.
    """
    pass


class ProtocolStateError(FairRandomError):
    """
    Raised when a session step is called out of order (e.g. combine before publish).
    """
    pass


class SessionCancelled(FairRandomError):
    """
    Raised when a step is requested on a session that was cancelled.
    """
    pass
