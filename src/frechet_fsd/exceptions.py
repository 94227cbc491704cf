"""Exception types raised by frechet-fsd."""

from __future__ import annotations


class InvalidCurve(ValueError):
    """Raised when a curve cannot be built from the given points."""


class IndexOutOfRange(IndexError):
    """
    Raised on access to a point, edge or diagram cell outside its bounds.

    With well-formed curves this never happens inside the package; it
    signals a corrupted index in the caller.
    """


class FrechetLogicError(RuntimeError):
    """Raised when the binary search finds no feasible critical value."""
