"""Foliodash -- multi-portfolio holdings dashboard client."""

__version__ = "0.1.0"
