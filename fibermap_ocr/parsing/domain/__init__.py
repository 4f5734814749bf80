"""Parsing domain: exceptions."""

from .exceptions import CircuitIdFormatError, UnparseableLineError

__all__ = ["CircuitIdFormatError", "UnparseableLineError"]
