"""F1 Fantasy economy and scoring engine."""

__version__ = "0.3.0"
