# armillary/core/errors.py
"""
Caller-contract errors.

Numeric / provider failures never end up here: they are replaced by an
analytic fallback at the point of use and only logged.
"""


class InvalidInstantError(ValueError):
    """Day-of-year not valid for the year, or negative minutes."""


class InvalidLocationError(ValueError):
    """Latitude outside [-90, 90] or longitude outside [-180, 180]."""


class UnknownBodyError(ValueError):
    """Body is not the Sun, the Moon or one of the eight planets."""
