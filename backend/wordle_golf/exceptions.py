"""Errors raised by the leaderboard engine.

``NotFound`` and ``InvalidArgument`` extend the builtin ``LookupError`` and
``ValueError`` so route handlers can translate them alongside any other lookup
or validation failure. ``TransientError`` marks a failed store read that is
safe to retry.
"""


class NotFound(LookupError):
    pass


class InvalidArgument(ValueError):
    pass


class TransientError(Exception):
    """A store read failed; no partial standings were produced."""
