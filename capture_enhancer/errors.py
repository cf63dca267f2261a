"""Exceptions raised by the enhancement core."""

from __future__ import annotations


class EnhancementError(Exception):
    """Base class for every error raised by the enhancement core."""


class InvalidDimensionsError(EnhancementError, ValueError):
    """Raised when a buffer or plane does not match its declared geometry."""


class InvalidParameterError(EnhancementError, ValueError):
    """Raised when a processing knob is outside its accepted range."""
