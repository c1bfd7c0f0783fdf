"""Repository best-practice checks."""

__version__ = "0.1.0"
