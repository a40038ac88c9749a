"""Errors raised by superposition and scoring."""


class StructureError(ValueError):
    """Invalid point-set input: mismatched or empty sets, bad shapes, or length bounds."""
