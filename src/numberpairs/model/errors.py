"""
Exceptions raised by the bead-line model.

None of these are user-facing: they signal a caller bug (the addend source and
the track falling out of sync) and must surface instead of being absorbed.
Positions outside the track are not errors; they are clamped.
"""


class BeadLineError(Exception):
    """Base class for bead-line failures."""


class PreconditionError(BeadLineError, ValueError):
    """Input that violates an operation's contract (unknown token, bad counts, ...)."""


class InvariantError(BeadLineError, AssertionError):
    """A settled track breaks ordering, spacing, side or bounds invariants."""


class DividerConvergenceError(BeadLineError, RuntimeError):
    """Divider-crossing reassignment did not reach a fixed point within the cap."""
