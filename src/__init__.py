"""Adaptive content gating for diagnostic-driven e-learning courses."""

__version__ = "1.0.0"
