"""Pegase due diligence — workspace state, persistence and sanitization."""

__version__ = "0.1.0"
