"""Exception types raised by the encoding chain."""

from __future__ import annotations


class ShapeError(ValueError):
    """A vector or table length disagrees with the configuration or another input."""


__all__ = ["ShapeError"]
