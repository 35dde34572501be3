"""Splice, pitch, reverse and delay audio effect with recycling feedback."""

__version__ = "0.1.0"

__all__ = ["effect", "params", "ring_buffer", "splice", "utilities"]