"""Procedural town generation and validation for a Dogs in the Vineyard game."""

__version__ = "0.3.0"
